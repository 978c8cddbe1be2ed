"""Keyword rule table for the scripted assistant.

Each rule pairs a keyword set with a response builder. Builders receive the
raw utterance and a snapshot of the selected location (or None) and return
the reply text. Rules are evaluated top to bottom; order is significant.
"""

from dataclasses import dataclass, field
from typing import Callable

from riskatlas.geo_utils import SelectedLocation
from riskatlas.risk.profiles import ProfileResolver

ResponseBuilder = Callable[[str, SelectedLocation | None], str]


@dataclass(frozen=True)
class IntentRule:
    """A keyword-triggered response rule."""

    name: str
    keywords: frozenset[str]
    build: ResponseBuilder
    exact: frozenset[str] = field(default_factory=frozenset)

    def matches(self, text_lower: str) -> bool:
        """Check a lower-cased utterance against this rule.

        A rule fires when any keyword is a substring of the utterance or the
        whole utterance equals one of ``exact``.
        """
        return any(k in text_lower for k in self.keywords) or text_lower in self.exact


FALLBACK_RESPONSE = (
    "I can help you analyze locations, assess risks, provide infrastructure solutions, "
    "and answer questions about population, weather, disasters, and more. Click on the map "
    "to select a location, or ask me a specific question about any area in the Philippines!"
)

VOLCANO_OVERVIEW = (
    "Check the Disaster Monitoring panel for recent seismic activity, active volcanoes, and "
    "earthquake reports. The Philippines sits on the Pacific Ring of Fire with 24 active "
    "volcanoes and frequent seismic activity. I can provide details about specific volcanoes "
    "like Mayon, Taal, or Pinatubo - just ask!"
)

MAYON_DETAILS = (
    "Mayon Volcano in Albay:\n\n"
    "Status: Active (Current Alert Level 1)\n"
    "Last Major Activity: June 2023\n"
    "Location: Legazpi City, Albay\n"
    "Height: 2,463 meters\n\n"
    "Mayon is one of the Philippines' most active volcanoes, known for its perfect cone shape. "
    "The 6km permanent danger zone remains in effect. PHIVOLCS continuously monitors volcanic "
    "activity with seismographs, tiltmeters, and gas sensors."
)

TAAL_DETAILS = (
    "Taal Volcano in Batangas:\n\n"
    "Status: Active (Alert Level 1)\n"
    "Last Major Activity: March 2022 (Alert Level raised to 3)\n"
    "Location: Taal Lake, Batangas\n"
    "Height: 311 meters (crater)\n\n"
    "Taal is one of the most active volcanoes in the Philippines. The entire Volcano Island is "
    "a Permanent Danger Zone. Communities around Taal Lake remain on alert with established "
    "evacuation procedures."
)

BUILDINGS_3D = (
    "The 3D building layer uses OSM Buildings data to create realistic 3D models of "
    "structures. When you zoom in on urban areas, you'll see buildings rendered in 3D with "
    "estimated heights. This helps visualize infrastructure and plan architectural "
    "improvements. Try clicking the \"3D\" button in the map controls!"
)

HELP_TEXT = (
    "I can help you with:\n\n"
    "✓ Analyze locations for risks and hazards\n"
    "✓ Provide population and demographic data\n"
    "✓ Recommend infrastructure solutions\n"
    "✓ Monitor active volcanoes and earthquakes\n"
    "✓ Show weather forecasts and conditions\n"
    "✓ Identify location from uploaded images\n"
    "✓ Generate 3D architectural mockups\n"
    "✓ Calculate distances from disaster zones\n\n"
    "Just click on the map or ask me any question!"
)

CAMARINES_NORTE_POPULATION = (
    "Based on the latest census data and news reports, Camarines Norte has an estimated "
    "population of approximately 580,000 people. The population is concentrated in urban "
    "centers like Daet (the capital) and coastal municipalities. The province has experienced "
    "steady growth due to mining and tourism activities."
)

MANILA_POPULATION = (
    "Metro Manila has a population of approximately 13.5 million people, making it one of the "
    "most densely populated urban areas in the world. This high density creates unique "
    "challenges for disaster preparedness and infrastructure management."
)

CAMARINES_NORTE_SOLUTIONS = (
    "Infrastructure Solutions for Camarines Norte:\n\n"
    "1. Drainage System Upgrade: Install modern drainage infrastructure in 15 flood-prone "
    "barangays with automated water level monitoring.\n\n"
    "2. Typhoon Shelters: Build 8 earthquake and typhoon-resistant evacuation centers "
    "strategically located across the province.\n\n"
    "3. Early Warning Systems: Deploy IoT-based sensors for real-time flood, landslide, and "
    "storm surge monitoring.\n\n"
    "4. Coastal Protection: Construct 12km of reinforced seawalls and mangrove rehabilitation "
    "zones.\n\n"
    "Estimated Budget: ₱2.5B - ₱5B\n\n"
    "These solutions are based on recent engineering assessments and community needs "
    "identified in local news reports."
)


def _fixed(text: str) -> ResponseBuilder:
    """Builder that ignores its inputs."""
    return lambda utterance, location: text


def build_intent_rules(resolver: ProfileResolver, assistant_name: str = "AI VISION") -> list[IntentRule]:
    """Build the ordered intent rule table.

    Args:
        resolver: Resolver used to interpolate location profiles.
        assistant_name: Name the assistant introduces itself with.

    Returns:
        Rules in evaluation order.
    """

    def population(utterance: str, location: SelectedLocation | None) -> str:
        if location is None:
            return (
                "Please select a location on the map first, and I can provide detailed population "
                "information from recent census data and news articles."
            )
        name_lower = location.display_name.lower()
        if "camarines norte" in name_lower:
            return CAMARINES_NORTE_POPULATION
        if "manila" in name_lower:
            return MANILA_POPULATION
        profile = resolver.resolve(location.display_name, location.coordinate)
        return (
            f"The estimated population for {location.display_name} is {profile.population}. "
            "Click on specific locations for more detailed demographic information."
        )

    def hazards(utterance: str, location: SelectedLocation | None) -> str:
        if location is None:
            return (
                "Please select a location on the map to analyze its hazard profile. I can provide "
                "information on typhoons, floods, earthquakes, volcanic activity, and other natural "
                "disasters."
            )
        profile = resolver.resolve(location.display_name, location.coordinate)
        hazard_lines = "\n".join(profile.hazards)
        return (
            f"Analysis for {location.display_name}:\n\n"
            f"Risk Level: {profile.risk_level.label}\n\n"
            f"Major Hazards:\n{hazard_lines}\n\n"
            "For detailed risk assessment and safety recommendations, check the Location Details "
            "panel above."
        )

    def solutions(utterance: str, location: SelectedLocation | None) -> str:
        if location is None:
            return (
                "Click on a specific location to receive tailored infrastructure solutions with "
                "budget estimates and 3D architectural mockups."
            )
        if "camarines norte" in location.display_name.lower():
            return CAMARINES_NORTE_SOLUTIONS
        profile = resolver.resolve(location.display_name, location.coordinate)
        recommendation_lines = "\n".join(profile.recommendations)
        return (
            f"Recommended infrastructure solutions for {location.display_name}:\n\n"
            f"{recommendation_lines}\n\n"
            f"Estimated Budget: {profile.budget}\n\n"
            "These recommendations are based on the location's specific hazard profile and "
            "community needs."
        )

    def weather(utterance: str, location: SelectedLocation | None) -> str:
        if location is None:
            return (
                "To get weather information, please select a location on the map or enable the "
                "Weather layer in the map controls."
            )
        # Canned conditions; no live weather source is consulted
        return (
            f"Weather information for {location.display_name}:\n\n"
            "Current conditions: Partly cloudy, 28°C\n"
            "Forecast: Scattered thunderstorms expected this afternoon\n"
            "Wind: 15 km/h from the northeast\n"
            "Humidity: 75%\n\n"
            "Note: For real-time weather data, enable the Weather layer in the map controls. The "
            "Philippines typically experiences tropical weather with distinct wet (June-November) "
            "and dry (December-May) seasons."
        )

    greeting = (
        f"Hello! I'm {assistant_name}, your geospatial analysis assistant. I can help you with:\n\n"
        "• Location information and demographics\n"
        "• Hazard and risk assessments\n"
        "• Infrastructure solutions and recommendations\n"
        "• Weather forecasts and conditions\n"
        "• Disaster monitoring (volcanoes, earthquakes)\n"
        "• Population data and news reports\n\n"
        "Click anywhere on the map or search for a location to get started!"
    )

    return [
        IntentRule("population", frozenset({"people", "population", "how many"}), population),
        IntentRule("hazards", frozenset({"hazard", "risk", "danger", "prone"}), hazards),
        IntentRule("solutions", frozenset({"solution", "fix", "improve", "infrastructure"}), solutions),
        IntentRule("weather", frozenset({"weather", "forecast", "temperature", "rain"}), weather),
        IntentRule("disasters", frozenset({"volcano", "earthquake", "seismic"}), _fixed(VOLCANO_OVERVIEW)),
        IntentRule("mayon", frozenset({"mayon"}), _fixed(MAYON_DETAILS)),
        IntentRule("taal", frozenset({"taal"}), _fixed(TAAL_DETAILS)),
        IntentRule("buildings_3d", frozenset({"3d", "building", "model"}), _fixed(BUILDINGS_3D)),
        IntentRule("greeting", frozenset({"hello", "hi "}), _fixed(greeting), exact=frozenset({"hi"})),
        IntentRule("help", frozenset({"help", "what can you do"}), _fixed(HELP_TEXT)),
    ]
