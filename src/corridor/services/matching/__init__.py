"""Route corridor and point-radius facility matching."""

from .corridor import (
    DEFAULT_RADIUS_KM,
    facilities_along_route,
    facilities_near_location,
    match_facilities_along_polyline,
    match_facilities_along_route,
    match_facilities_near_location,
    min_distance_to_polyline,
)
from .polyline import extract_polyline

__all__ = [
    "DEFAULT_RADIUS_KM",
    "extract_polyline",
    "facilities_along_route",
    "facilities_near_location",
    "match_facilities_along_polyline",
    "match_facilities_along_route",
    "match_facilities_near_location",
    "min_distance_to_polyline",
]
