"""Route group exports."""

from . import facilities, health

__all__ = ["facilities", "health"]
