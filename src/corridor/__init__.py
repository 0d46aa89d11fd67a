"""Route corridor facility matching service."""

__version__ = "0.1.0"
