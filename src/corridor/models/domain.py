"""Domain models for facilities and routes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A (latitude, longitude) pair in decimal degrees."""

    lat: float
    lng: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lng)


class FacilityType(str, Enum):
    DISTRIBUTION_CENTER = "distribution_center"
    FUEL_STATION = "fuel_station"
    WAREHOUSE = "warehouse"


@dataclass(frozen=True, slots=True)
class Facility:
    """A fixed supply-chain location with service metadata."""

    id: str
    name: str
    type: FacilityType
    location: Coordinate
    address: str = ""
    detour_time: float = 0.0
    services: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class RouteStep:
    start: Coordinate
    end: Coordinate
    path: Optional[tuple[Coordinate, ...]] = None


@dataclass(frozen=True, slots=True)
class RouteLeg:
    start: Coordinate
    end: Coordinate
    steps: tuple[RouteStep, ...] = ()


@dataclass(frozen=True, slots=True)
class Route:
    """A multi-leg route as returned by a directions provider."""

    legs: tuple[RouteLeg, ...] = ()


@dataclass(frozen=True, slots=True)
class FacilityMatch:
    facility: Facility
    distance_km: float
