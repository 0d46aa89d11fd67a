"""Geospatial helper functions."""

from __future__ import annotations

import math

from shapely.geometry import LineString, Point

from ..models.domain import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def great_circle_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in kilometers between two coordinates."""

    return haversine_km(a.lat, a.lng, b.lat, b.lng)


def project_onto_segment(point: Coordinate, start: Coordinate, end: Coordinate) -> Coordinate:
    """Return the point of segment [start, end] nearest to ``point`` in planar lat/lng space.

    The projection parameter is clamped to the segment, so the result is
    always one of the endpoints or a point between them.
    """

    if start == end:
        return start
    segment = LineString([start.as_tuple(), end.as_tuple()])
    nearest = segment.interpolate(segment.project(Point(point.as_tuple())))
    return Coordinate(lat=nearest.x, lng=nearest.y)


def point_to_segment_distance(point: Coordinate, start: Coordinate, end: Coordinate) -> float:
    """Shortest distance in kilometers from ``point`` to the segment [start, end].

    The nearest point is found by planar projection in degree space and the
    distance to it is measured along the great circle. Accurate for the short
    segments of a route step; drifts for very long segments or near the poles.
    """

    return great_circle_distance(point, project_onto_segment(point, start, end))
