"""Facility and route-matching request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import Coordinate, Facility, FacilityMatch, FacilityType, Route, RouteLeg, RouteStep


class CoordinateModel(BaseModel):
    lat: float
    lng: float

    def to_domain(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)


class RouteStepModel(BaseModel):
    start_location: CoordinateModel
    end_location: CoordinateModel
    path: Optional[List[CoordinateModel]] = Field(
        default=None,
        description="Detailed path points of the step, if the directions provider returned them.",
    )


class RouteLegModel(BaseModel):
    start_location: CoordinateModel
    end_location: CoordinateModel
    steps: List[RouteStepModel] = Field(default_factory=list)


class RouteModel(BaseModel):
    legs: List[RouteLegModel] = Field(default_factory=list)

    def to_domain(self) -> Route:
        return Route(
            legs=tuple(
                RouteLeg(
                    start=leg.start_location.to_domain(),
                    end=leg.end_location.to_domain(),
                    steps=tuple(
                        RouteStep(
                            start=step.start_location.to_domain(),
                            end=step.end_location.to_domain(),
                            path=tuple(point.to_domain() for point in step.path) if step.path is not None else None,
                        )
                        for step in leg.steps
                    ),
                )
                for leg in self.legs
            )
        )


class FacilityModel(BaseModel):
    id: str
    name: str
    type: FacilityType
    location: CoordinateModel
    address: str
    detour_time: float
    services: List[str]

    @classmethod
    def from_domain(cls, facility: Facility) -> "FacilityModel":
        return cls(
            id=facility.id,
            name=facility.name,
            type=facility.type,
            location=CoordinateModel(lat=facility.location.lat, lng=facility.location.lng),
            address=facility.address,
            detour_time=facility.detour_time,
            services=sorted(facility.services),
        )


class FacilityMatchModel(BaseModel):
    facility: FacilityModel
    distance_km: float

    @classmethod
    def from_domain(cls, match: FacilityMatch) -> "FacilityMatchModel":
        return cls(facility=FacilityModel.from_domain(match.facility), distance_km=round(match.distance_km, 3))


class RouteMatchRequest(BaseModel):
    route: Optional[RouteModel] = None
    waypoints: Optional[List[tuple[float, float]]] = Field(
        default=None,
        description="(lat, lng) waypoints; the route is fetched from OSRM when no route is supplied.",
    )
    radius_km: Optional[float] = Field(default=None, description="Corridor radius in kilometers.")


class RouteMatchResponse(BaseModel):
    radius_km: float
    polyline_points: int
    matches: List[FacilityMatchModel]


class NearbyFacilitiesResponse(BaseModel):
    lat: float
    lng: float
    radius_km: float
    matches: List[FacilityMatchModel]
