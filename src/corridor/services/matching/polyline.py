"""Flatten a multi-leg route into a single polyline."""

from __future__ import annotations

from ...models.domain import Coordinate, Route


def extract_polyline(route: Route) -> list[Coordinate]:
    """Collect the detailed path points of every step, in route order.

    Routes whose steps carry no detailed path fall back to the start and end
    of each leg, which yields two points per leg. Consecutive duplicates are
    kept.
    """

    points: list[Coordinate] = []
    for leg in route.legs:
        for step in leg.steps:
            if step.path:
                points.extend(step.path)

    if not points:
        for leg in route.legs:
            points.append(leg.start)
            points.append(leg.end)
    return points
