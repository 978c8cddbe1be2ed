"""Static volcano and earthquake listings for the disaster panel."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from riskatlas.geo_utils import Coordinate
from riskatlas.risk.proximity import EventDistance, annotate_distances, format_distance


class DisasterKind(str, Enum):
    """Disaster panel tabs."""

    VOLCANOES = "volcanoes"
    EARTHQUAKES = "earthquakes"


@dataclass(frozen=True)
class Volcano:
    """A monitored volcano."""

    name: str
    status: str
    alert_level: str
    location: str
    coordinate: Coordinate
    last_activity: str

    @property
    def title(self) -> str:
        return self.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "alert_level": self.alert_level,
            "location": self.location,
            "lat": self.coordinate.lat,
            "lon": self.coordinate.lon,
            "last_activity": self.last_activity,
        }


@dataclass(frozen=True)
class Earthquake:
    """A recent earthquake report."""

    magnitude: float
    location: str
    depth_km: float
    coordinate: Coordinate
    time: str
    intensity: str

    @property
    def title(self) -> str:
        return f"Magnitude {self.magnitude} Earthquake"

    def to_dict(self) -> dict[str, Any]:
        return {
            "magnitude": self.magnitude,
            "location": self.location,
            "depth_km": self.depth_km,
            "lat": self.coordinate.lat,
            "lon": self.coordinate.lon,
            "time": self.time,
            "intensity": self.intensity,
        }


VOLCANOES: tuple[Volcano, ...] = (
    Volcano("Mayon Volcano", "Active", "Alert Level 1", "Albay, Bicol Region",
            Coordinate(13.2572, 123.6856), "June 2023"),
    Volcano("Taal Volcano", "Active", "Alert Level 1", "Batangas",
            Coordinate(14.0021, 120.9937), "March 2022"),
    Volcano("Pinatubo Volcano", "Dormant", "Normal", "Zambales/Pampanga/Tarlac",
            Coordinate(15.1300, 120.3500), "June 1991"),
    Volcano("Kanlaon Volcano", "Active", "Alert Level 1", "Negros Oriental",
            Coordinate(10.4120, 123.1320), "December 2023"),
    Volcano("Bulusan Volcano", "Active", "Alert Level 0", "Sorsogon",
            Coordinate(12.7700, 124.0500), "June 2022"),
)

EARTHQUAKES: tuple[Earthquake, ...] = (
    Earthquake(5.2, "Mindanao Sea", 35, Coordinate(6.5, 123.5),
               "2 hours ago", "Intensity IV (Moderately Strong)"),
    Earthquake(4.8, "Eastern Samar", 15, Coordinate(11.8, 125.5),
               "5 hours ago", "Intensity III (Weak)"),
    Earthquake(3.9, "Batangas", 8, Coordinate(13.9, 121.0),
               "12 hours ago", "Intensity II (Slightly Felt)"),
    Earthquake(4.5, "Surigao del Norte", 42, Coordinate(9.8, 125.5),
               "1 day ago", "Intensity III (Weak)"),
)


def get_events(kind: DisasterKind | str) -> tuple[Volcano, ...] | tuple[Earthquake, ...]:
    """Return the catalog for a panel tab."""
    kind = DisasterKind(kind)
    if kind is DisasterKind.VOLCANOES:
        return VOLCANOES
    return EARTHQUAKES


def list_disasters(kind: DisasterKind | str, origin: Coordinate | None = None) -> list[EventDistance]:
    """List a catalog in display order with distances from the selection.

    Args:
        kind: Which tab to list.
        origin: Selected coordinate; distances are None without one.

    Returns:
        EventDistance entries in catalog order.
    """
    return annotate_distances(get_events(kind), origin)


def describe_event(item: EventDistance) -> list[str]:
    """Render a listing entry as display lines."""
    event = item.event
    distance = f"{format_distance(item.distance_km)} km from selected location"

    if isinstance(event, Volcano):
        return [
            event.title,
            f"Status: {event.status}",
            f"Alert Level: {event.alert_level}",
            f"Location: {event.location}",
            f"Distance: {distance}",
            f"Last Activity: {event.last_activity}",
        ]

    return [
        event.title,
        f"Location: {event.location}",
        f"Depth: {event.depth_km} km",
        f"Distance: {distance}",
        f"Time: {event.time}",
        f"Intensity: {event.intensity}",
    ]
