"""Request orchestration for facility matching endpoints."""

from __future__ import annotations

import logging

from ...config import settings
from ...data.facility_repository import load_facilities
from ...schemas.facilities import (
    FacilityMatchModel,
    NearbyFacilitiesResponse,
    RouteMatchRequest,
    RouteMatchResponse,
)
from ..routing.osrm_client import OSRMClient
from .corridor import match_facilities_along_polyline, match_facilities_near_location
from .polyline import extract_polyline

logger = logging.getLogger(__name__)


def match_route(payload: RouteMatchRequest) -> RouteMatchResponse:
    radius_km = payload.radius_km if payload.radius_km is not None else settings.default_radius_km

    if payload.route is not None:
        route = payload.route.to_domain()
    elif payload.waypoints:
        if len(payload.waypoints) < 2:
            raise ValueError("At least two waypoints are required to compute a route.")
        route = OSRMClient().fetch_route(payload.waypoints)
        logger.info(f"Fetched OSRM route with {len(route.legs)} legs for {len(payload.waypoints)} waypoints")
    else:
        raise ValueError("Either 'route' or 'waypoints' must be provided.")

    polyline = extract_polyline(route)
    catalogue = load_facilities()
    matches = match_facilities_along_polyline(polyline, catalogue, radius_km)
    return RouteMatchResponse(
        radius_km=radius_km,
        polyline_points=len(polyline),
        matches=[FacilityMatchModel.from_domain(match) for match in matches],
    )


def nearby_facilities(lat: float, lng: float, radius_km: float | None = None) -> NearbyFacilitiesResponse:
    radius = radius_km if radius_km is not None else settings.default_radius_km
    matches = match_facilities_near_location(lat, lng, load_facilities(), radius)
    return NearbyFacilitiesResponse(
        lat=lat,
        lng=lng,
        radius_km=radius,
        matches=[FacilityMatchModel.from_domain(match) for match in matches],
    )
