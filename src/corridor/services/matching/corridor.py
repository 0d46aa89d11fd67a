"""Select catalogue facilities that lie within a radius of a route or a point."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

from ..geospatial import great_circle_distance, point_to_segment_distance
from ...models.domain import Coordinate, Facility, FacilityMatch, Route
from .polyline import extract_polyline

DEFAULT_RADIUS_KM = 5.0

logger = logging.getLogger(__name__)


def min_distance_to_polyline(point: Coordinate, polyline: Sequence[Coordinate]) -> float:
    """Minimum distance in kilometers from ``point`` to any segment of ``polyline``.

    Returns ``math.inf`` when the polyline has fewer than two points.
    """

    min_distance = math.inf
    for index in range(len(polyline) - 1):
        distance = point_to_segment_distance(point, polyline[index], polyline[index + 1])
        if distance < min_distance:
            min_distance = distance
    return min_distance


def match_facilities_along_polyline(
    polyline: Sequence[Coordinate],
    catalogue: Iterable[Facility],
    radius_km: float = DEFAULT_RADIUS_KM,
) -> list[FacilityMatch]:
    """Facilities within ``radius_km`` of an already extracted route polyline, in catalogue order."""

    if len(polyline) < 2:
        logger.debug(f"Route has {len(polyline)} polyline point(s); no corridor to match against")
        return []

    matches: list[FacilityMatch] = []
    for facility in catalogue:
        distance = min_distance_to_polyline(facility.location, polyline)
        if distance <= radius_km:
            matches.append(FacilityMatch(facility=facility, distance_km=distance))

    logger.debug(
        f"Matched {len(matches)} facilities within {radius_km:.2f} km of a {len(polyline)}-point route polyline"
    )
    return matches


def match_facilities_along_route(
    route: Route,
    catalogue: Iterable[Facility],
    radius_km: float = DEFAULT_RADIUS_KM,
) -> list[FacilityMatch]:
    """Facilities within ``radius_km`` of the route path, in catalogue order."""

    return match_facilities_along_polyline(extract_polyline(route), catalogue, radius_km)


def facilities_along_route(
    route: Route,
    catalogue: Iterable[Facility],
    radius_km: float = DEFAULT_RADIUS_KM,
) -> list[Facility]:
    return [match.facility for match in match_facilities_along_route(route, catalogue, radius_km)]


def match_facilities_near_location(
    lat: float,
    lng: float,
    catalogue: Iterable[Facility],
    radius_km: float = DEFAULT_RADIUS_KM,
) -> list[FacilityMatch]:
    """Facilities whose great-circle distance to (lat, lng) is within ``radius_km``."""

    origin = Coordinate(lat=lat, lng=lng)
    matches: list[FacilityMatch] = []
    for facility in catalogue:
        distance = great_circle_distance(facility.location, origin)
        if distance <= radius_km:
            matches.append(FacilityMatch(facility=facility, distance_km=distance))
    return matches


def facilities_near_location(
    lat: float,
    lng: float,
    catalogue: Iterable[Facility],
    radius_km: float = DEFAULT_RADIUS_KM,
) -> list[Facility]:
    return [match.facility for match in match_facilities_near_location(lat, lng, catalogue, radius_km)]
