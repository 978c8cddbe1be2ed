"""Great-circle proximity between selected locations and disaster events."""

import math
from dataclasses import dataclass
from typing import Any, Iterable

import structlog

from riskatlas.geo_utils import Coordinate

logger = structlog.get_logger()

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in kilometers.

    Uses the haversine formula on a sphere of radius 6371 km. Inputs are not
    range checked; the result is symmetric and zero for identical points.

    Args:
        a: First coordinate.
        b: Second coordinate.

    Returns:
        Distance in kilometers.
    """
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = math.radians(b.lat - a.lat)
    dlon = math.radians(b.lon - a.lon)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push h a hair outside [0, 1] for antipodal points
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


@dataclass
class EventDistance:
    """A catalog event paired with its distance from the selection."""

    event: Any
    distance_km: float | None


def annotate_distances(
    events: Iterable[Any],
    origin: Coordinate | None,
) -> list[EventDistance]:
    """Attach distances to events, keeping their catalog order.

    Args:
        events: Catalog entries exposing a ``coordinate`` attribute.
        origin: The selected coordinate, or None when nothing is selected.

    Returns:
        One EventDistance per event; distance is None without an origin.
    """
    return [
        EventDistance(
            event=event,
            distance_km=distance_km(origin, event.coordinate) if origin is not None else None,
        )
        for event in events
    ]


def find_nearby_events(
    origin: Coordinate,
    events: Iterable[Any],
    max_distance_km: float | None = None,
) -> list[EventDistance]:
    """Find events within a radius of a coordinate, nearest first.

    Args:
        origin: The selected coordinate.
        events: Catalog entries exposing a ``coordinate`` attribute.
        max_distance_km: Optional search radius in kilometers.

    Returns:
        EventDistance list sorted by distance.
    """
    results = [
        item
        for item in annotate_distances(events, origin)
        if max_distance_km is None or item.distance_km <= max_distance_km
    ]
    results.sort(key=lambda r: r.distance_km)

    logger.debug(
        "Proximity search complete",
        num_nearby_events=len(results),
        max_distance_km=max_distance_km,
    )

    return results


def format_distance(value: float | None) -> str:
    """Render a distance the way the disaster panel shows it."""
    if value is None:
        return "N/A"
    return f"{value:.1f}"
