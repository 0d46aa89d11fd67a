"""HTTP client for fetching routes from OSRM and converting them to the route model."""

from __future__ import annotations

import logging
import time
from typing import Any, Sequence

import httpx

from ...config import settings
from ...models.domain import Coordinate, Route, RouteLeg, RouteStep

logger = logging.getLogger(__name__)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
    ) -> None:
        self.base_url = base_url or settings.osrm_base_url
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.base_url = self.base_url.rstrip("/")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds

    def _get_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout, connect=10.0))

    def route(self, waypoints: Sequence[tuple[float, float]]) -> dict:
        """Request a turn-by-turn route through ``waypoints`` given as (lat, lon) pairs."""
        if len(waypoints) < 2:
            raise ValueError("At least two waypoints are required for an OSRM route.")

        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in waypoints)
        params = {"steps": "true", "geometries": "geojson", "overview": "false"}
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinate_str}"

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    if data.get("code") != "Ok" or not data.get("routes"):
                        raise ValueError(f"OSRM returned no route: {data.get('code')} {data.get('message', '')}".strip())
                    return data
                except httpx.HTTPStatusError as e:
                    # OSRM answers NoRoute/InvalidQuery with 4xx; retrying cannot change the outcome
                    status_code = e.response.status_code
                    if 400 <= status_code < 500 and status_code != 429:
                        try:
                            body = e.response.json()
                        except ValueError:
                            body = {}
                        code = body.get("code") if isinstance(body, dict) else None
                        message = body.get("message", "") if isinstance(body, dict) else ""
                        raise ValueError(
                            f"OSRM rejected the route request: {code or status_code} {message}".strip()
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"OSRM route request timed out after {self.max_retries} attempts: {e}")
                        raise
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM route timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except (httpx.NetworkError, OSError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Failed to connect to OSRM service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
                except httpx.HTTPError:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
        finally:
            client.close()

    def fetch_route(self, waypoints: Sequence[tuple[float, float]]) -> Route:
        return route_from_osrm(self.route(waypoints), waypoints)


def _coordinate(lon_lat: Sequence[float]) -> Coordinate:
    lon, lat = lon_lat[0], lon_lat[1]
    return Coordinate(lat=float(lat), lng=float(lon))


def _step_from_osrm(step: dict[str, Any]) -> RouteStep | None:
    geometry = step.get("geometry") or {}
    path = tuple(_coordinate(point) for point in geometry.get("coordinates") or ())
    if path:
        return RouteStep(start=path[0], end=path[-1], path=path)
    location = (step.get("maneuver") or {}).get("location")
    if not location:
        return None
    point = _coordinate(location)
    return RouteStep(start=point, end=point, path=None)


def route_from_osrm(payload: dict, waypoints: Sequence[tuple[float, float]] = ()) -> Route:
    """Convert the first route of an OSRM ``/route`` response into a ``Route``.

    Leg endpoints come from the first and last step of each leg; legs without
    usable steps take their endpoints from the request waypoints.
    """
    routes = payload.get("routes") or []
    if not routes:
        raise ValueError("OSRM response contains no routes.")

    legs: list[RouteLeg] = []
    for index, leg in enumerate(routes[0].get("legs") or []):
        steps = tuple(
            step for step in (_step_from_osrm(raw) for raw in leg.get("steps") or []) if step is not None
        )
        if steps:
            start, end = steps[0].start, steps[-1].end
        elif index + 1 < len(waypoints):
            start = Coordinate(lat=waypoints[index][0], lng=waypoints[index][1])
            end = Coordinate(lat=waypoints[index + 1][0], lng=waypoints[index + 1][1])
        else:
            logger.warning(f"Skipping OSRM leg {index} without steps or matching waypoints")
            continue
        legs.append(RouteLeg(start=start, end=end, steps=steps))
    return Route(legs=tuple(legs))


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health by requesting a short route."""
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    try:
        test_coords = "88.363900,22.572600;88.370000,22.580000"
        url = f"{base.rstrip('/')}/route/v1/{settings.osrm_profile}/{test_coords}"
        response = httpx.get(url, params={"overview": "false"}, timeout=5.0)
        response.raise_for_status()
        return response.json().get("code") == "Ok"
    except (httpx.HTTPError, ValueError):
        return False
