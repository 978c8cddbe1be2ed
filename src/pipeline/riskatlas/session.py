"""Interactive map session state.

The session owns the single current selection. Each new selection replaces
the previous one; nothing is remembered. Core components only ever see a
snapshot of it passed as an argument.
"""

from dataclasses import dataclass, field

import structlog

from riskatlas.assistant.responder import RuleBasedResponder
from riskatlas.catalog.disasters import DisasterKind, list_disasters
from riskatlas.geo_utils import SelectedLocation, validate_coordinate
from riskatlas.geocode.client import NominatimClient
from riskatlas.risk.profiles import ProfileResolver, RiskProfile
from riskatlas.risk.proximity import EventDistance

logger = structlog.get_logger()

# Notices shown when a map layer is switched on/off
LAYER_NOTICES: dict[str, tuple[str, str]] = {
    "3d": (
        "3D View activated. Note: Full 3D building visualization requires integration with "
        "OSM Buildings or Mapbox GL JS. Currently showing enhanced terrain data.",
        "Switched back to 2D map view.",
    ),
    "satellite": (
        "Satellite imagery view enabled. You can now see real satellite photos of the terrain.",
        "Switched to standard street map view.",
    ),
    "hazards": (
        "Hazard overlay enabled. High-risk areas are now highlighted on the map.",
        "Hazard overlay disabled.",
    ),
    "weather": (
        "Weather layer enabled. Current weather conditions and forecasts are now visible. To get "
        "detailed weather for a specific location, click on the map or ask me about the weather.",
        "Weather layer disabled.",
    ),
    "overlay": (
        "Hazard overlay visualization enabled. Risk levels are color-coded: red (high), "
        "yellow (moderate), green (low).",
        "Hazard overlay visualization disabled.",
    ),
}


@dataclass
class MapSession:
    """Current selection, layer switches, and the assistant bound to them."""

    resolver: ProfileResolver = field(default_factory=ProfileResolver)
    responder: RuleBasedResponder | None = None
    selected: SelectedLocation | None = None
    layers: dict[str, bool] = field(default_factory=lambda: {name: False for name in LAYER_NOTICES})

    def __post_init__(self) -> None:
        if self.responder is None:
            self.responder = RuleBasedResponder(resolver=self.resolver)

    # Selection

    def select(self, lat: float, lon: float, display_name: str) -> SelectedLocation:
        """Replace the current selection.

        Raises:
            InvalidCoordinateError: If the coordinate is out of range.
        """
        coordinate = validate_coordinate(lat, lon)
        self.selected = SelectedLocation(coordinate=coordinate, display_name=display_name)
        logger.info("Location selected", display_name=display_name, lat=coordinate.lat, lon=coordinate.lon)
        return self.selected

    def select_from_search(self, query: str, geocoder: NominatimClient) -> SelectedLocation | None:
        """Select the best search hit; keeps the old selection when nothing matched.

        Raises:
            GeocodingError: If the search request fails.
        """
        location = geocoder.search(query)
        if location is None:
            return None
        return self.select(location.lat, location.lon, location.display_name)

    def select_from_click(self, lat: float, lon: float, geocoder: NominatimClient) -> SelectedLocation:
        """Select a clicked coordinate, naming it by reverse lookup."""
        coordinate = validate_coordinate(lat, lon)
        location = geocoder.reverse(coordinate)
        return self.select(coordinate.lat, coordinate.lon, location.display_name)

    # Layers

    def toggle_layer(self, name: str) -> str:
        """Flip a map layer and return the assistant notice for it.

        Raises:
            KeyError: If the layer name is unknown.
        """
        key = name.strip().lower()
        if key not in LAYER_NOTICES:
            raise KeyError(f"Unknown layer '{name}'. Choose from: {', '.join(LAYER_NOTICES)}")

        self.layers[key] = not self.layers[key]
        enabled_notice, disabled_notice = LAYER_NOTICES[key]
        return enabled_notice if self.layers[key] else disabled_notice

    # Queries against the current selection

    def ask(self, utterance: str) -> str:
        """Answer an utterance using the current selection."""
        return self.responder.respond(utterance, self.selected)

    def profile(self) -> RiskProfile | None:
        if self.selected is None:
            return None
        return self.resolver.resolve(self.selected.display_name, self.selected.coordinate)

    def disasters(self, kind: DisasterKind | str = DisasterKind.VOLCANOES) -> list[EventDistance]:
        origin = self.selected.coordinate if self.selected is not None else None
        return list_disasters(kind, origin)

    def location_report(self) -> str | None:
        """Render the location panel for the current selection."""
        profile = self.profile()
        if profile is None:
            return None
        return format_location_report(self.selected, profile)


def format_location_report(location: SelectedLocation, profile: RiskProfile) -> str:
    """Render a location and its profile as the location panel text."""
    lines = [
        location.display_name,
        str(location.coordinate),
        "",
        "Risk Assessment",
        f"  {profile.risk_level.label}",
    ]
    lines.extend(f"  - {hazard}" for hazard in profile.hazards)
    lines += ["", "Population Data", f"  {profile.population}", "", "Infrastructure Solutions"]
    lines.extend(f"  - {rec}" for rec in profile.recommendations)
    lines += ["", "Budget Estimate", f"  {profile.budget}"]
    return "\n".join(lines)
