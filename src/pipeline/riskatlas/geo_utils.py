"""Shared geospatial value types and helpers."""

import math
from dataclasses import dataclass

from shapely.geometry import Point, box


class InvalidCoordinateError(ValueError):
    """Raised when a latitude/longitude pair is outside WGS84 range."""


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point in decimal degrees."""

    lat: float
    lon: float

    def __str__(self) -> str:
        return f"{self.lat:.6f}, {self.lon:.6f}"


@dataclass(frozen=True)
class SelectedLocation:
    """The location the user is currently looking at."""

    coordinate: Coordinate
    display_name: str

    @property
    def lat(self) -> float:
        return self.coordinate.lat

    @property
    def lon(self) -> float:
        return self.coordinate.lon


@dataclass(frozen=True)
class BoundingBox:
    """Latitude/longitude rectangle, inclusive on every edge."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, coord: Coordinate) -> bool:
        """Check whether a coordinate falls inside the box.

        Non-finite coordinates are never inside.
        """
        if not (math.isfinite(coord.lat) and math.isfinite(coord.lon)):
            return False
        polygon = box(self.min_lon, self.min_lat, self.max_lon, self.max_lat)
        return polygon.covers(Point(coord.lon, coord.lat))


# Coarse box around the Philippine archipelago
PHILIPPINES_BBOX = BoundingBox(min_lat=5.0, max_lat=20.0, min_lon=116.0, max_lon=127.0)


def validate_coordinate(lat: float, lon: float) -> Coordinate:
    """Build a Coordinate, rejecting values outside WGS84 range.

    Args:
        lat: Latitude in degrees (-90 to 90).
        lon: Longitude in degrees (-180 to 180).

    Returns:
        The validated Coordinate.

    Raises:
        InvalidCoordinateError: If either value is out of range or not finite.
    """
    lat = float(lat)
    lon = float(lon)
    if not (math.isfinite(lat) and -90 <= lat <= 90):
        raise InvalidCoordinateError(f"Latitude {lat} is outside [-90, 90]")
    if not (math.isfinite(lon) and -180 <= lon <= 180):
        raise InvalidCoordinateError(f"Longitude {lon} is outside [-180, 180]")
    return Coordinate(lat=lat, lon=lon)
