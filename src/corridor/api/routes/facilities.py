"""Facility catalogue and corridor matching endpoints."""

from __future__ import annotations

import logging
from typing import List

import httpx
from fastapi import APIRouter, HTTPException, Query, status

from ...data.facility_repository import get_facilities_by_type, get_facility_by_id, load_facilities
from ...models.domain import FacilityType
from ...schemas.facilities import (
    FacilityModel,
    NearbyFacilitiesResponse,
    RouteMatchRequest,
    RouteMatchResponse,
)
from ...services.matching.service import match_route, nearby_facilities

router = APIRouter(prefix="/facilities", tags=["facilities"])


def _catalogue_error(exc: Exception) -> HTTPException:
    """Map a catalogue loading failure to an HTTP error."""
    if isinstance(exc, FileNotFoundError):
        logging.error(f"Facility catalogue unavailable: {exc}")
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Facility catalogue unavailable: {exc}",
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("", response_model=List[FacilityModel], status_code=status.HTTP_200_OK)
def list_facilities(
    type: FacilityType | None = Query(default=None, description="Optional facility type filter"),
) -> List[FacilityModel]:
    try:
        facilities = get_facilities_by_type(type) if type is not None else load_facilities()
    except (FileNotFoundError, ValueError) as exc:
        raise _catalogue_error(exc) from exc
    return [FacilityModel.from_domain(facility) for facility in facilities]


@router.get("/near", response_model=NearbyFacilitiesResponse, status_code=status.HTTP_200_OK)
def facilities_near(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: float | None = Query(default=None, description="Search radius in kilometers"),
) -> NearbyFacilitiesResponse:
    try:
        return nearby_facilities(lat, lng, radius_km)
    except (FileNotFoundError, ValueError) as exc:
        raise _catalogue_error(exc) from exc


@router.post("/along-route", response_model=RouteMatchResponse, status_code=status.HTTP_200_OK)
def facilities_along_route(payload: RouteMatchRequest) -> RouteMatchResponse:
    try:
        return match_route(payload)
    except (FileNotFoundError, ValueError) as exc:
        raise _catalogue_error(exc) from exc
    except (ConnectionError, httpx.HTTPError) as exc:
        logging.warning(f"Directions lookup failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to fetch route from directions service: {exc}",
        ) from exc
    except Exception as exc:
        logging.exception(f"Error matching facilities along route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to match facilities: {str(exc)}",
        ) from exc


@router.get("/{facility_id}", response_model=FacilityModel, status_code=status.HTTP_200_OK)
def get_facility(facility_id: str) -> FacilityModel:
    try:
        facility = get_facility_by_id(facility_id)
    except (FileNotFoundError, ValueError) as exc:
        raise _catalogue_error(exc) from exc
    if facility is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Facility '{facility_id}' not found")
    return FacilityModel.from_domain(facility)
