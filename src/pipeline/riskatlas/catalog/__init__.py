"""Static disaster catalogs."""

from riskatlas.catalog.disasters import (
    EARTHQUAKES,
    VOLCANOES,
    DisasterKind,
    Earthquake,
    Volcano,
    describe_event,
    list_disasters,
)

__all__ = [
    "VOLCANOES",
    "EARTHQUAKES",
    "Volcano",
    "Earthquake",
    "DisasterKind",
    "list_disasters",
    "describe_event",
]
