"""Rule-based risk profiles for selected locations."""

import copy
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
import yaml

from riskatlas.config import get_config
from riskatlas.geo_utils import PHILIPPINES_BBOX, BoundingBox, Coordinate

logger = structlog.get_logger()


class RuleTableError(ValueError):
    """Raised when a rule table file cannot be turned into rules."""


class RiskLevel(str, Enum):
    """Coarse hazard rating shown on the location panel."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"

    @property
    def label(self) -> str:
        return f"{self.value} Risk"

    @property
    def css_class(self) -> str:
        return f"risk-{self.value.lower()}"


def _string_list(data: dict[str, Any], key: str, required: bool = False) -> tuple[str, ...]:
    """Read a list of strings from a rule-table entry.

    A bare string is rejected rather than split into characters.
    """
    if key not in data:
        if required:
            raise RuleTableError(f"Rule table entry is missing '{key}'")
        return ()

    value = data[key]
    if not isinstance(value, (list, tuple)):
        raise RuleTableError(f"'{key}' must be a list, got {type(value).__name__}: {value!r}")
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class RiskProfile:
    """Risk, demographic and budget summary for a location."""

    risk_level: RiskLevel
    hazards: tuple[str, ...]
    population: str
    recommendations: tuple[str, ...]
    budget: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RiskProfile":
        """Create a RiskProfile from a rule-table entry."""
        try:
            level = RiskLevel(str(data["risk_level"]).strip().capitalize())
        except (KeyError, ValueError) as e:
            raise RuleTableError(f"Invalid risk_level in profile: {data.get('risk_level')!r}") from e

        return cls(
            risk_level=level,
            hazards=_string_list(data, "hazards"),
            population=str(data.get("population", "Data unavailable")),
            recommendations=_string_list(data, "recommendations"),
            budget=str(data.get("budget", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "risk_level": self.risk_level.value,
            "risk_label": self.risk_level.label,
            "risk_class": self.risk_level.css_class,
            "hazards": list(self.hazards),
            "population": self.population,
            "recommendations": list(self.recommendations),
            "budget": self.budget,
        }


@dataclass(frozen=True)
class MatchRule:
    """Name-substring rule; any pattern contained in the name matches."""

    name: str
    patterns: frozenset[str]
    profile: RiskProfile

    def matches(self, name_lower: str) -> bool:
        return any(pattern in name_lower for pattern in self.patterns)


@dataclass(frozen=True)
class RegionRule:
    """Bounding-box rule used when no name rule matches."""

    name: str
    bbox: BoundingBox
    profile: RiskProfile

    def matches(self, coord: Coordinate) -> bool:
        return self.bbox.contains(coord)


# Default rule table. Order is significant: the first matching rule wins.
DEFAULT_PROFILE_RULES = {
    "rules": [
        {
            "name": "camarines_norte",
            "patterns": ["camarines norte", "daet"],
            "profile": {
                "risk_level": "High",
                "hazards": [
                    "High typhoon exposure (avg. 20 typhoons/year)",
                    "Severe flooding during monsoon season",
                    "Coastal erosion and storm surge risk",
                    "Moderate seismic activity",
                ],
                "population": "~580,000 residents",
                "budget": "₱2.5B - ₱5B",
                "recommendations": [
                    "Upgrade drainage systems in 15 flood-prone barangays",
                    "Construct 8 typhoon-resistant evacuation centers",
                    "Install IoT-based early warning systems",
                    "Build coastal protection seawalls (12km)",
                    "Improve road infrastructure for emergency access",
                ],
            },
        },
        {
            "name": "camarines_sur",
            "patterns": ["camarines sur", "naga"],
            "profile": {
                "risk_level": "High",
                "hazards": [
                    "Volcanic activity from Mt. Mayon and Mt. Isarog",
                    "Lahar flow zones",
                    "Typhoon corridor",
                    "Landslide-prone areas",
                ],
                "population": "~2.07 million residents",
                "budget": "₱3B - ₱6B",
                "recommendations": [
                    "Volcanic monitoring and alert systems",
                    "Lahar retention dams and channels",
                    "Slope stabilization in mountain communities",
                    "Emergency evacuation route improvements",
                ],
            },
        },
        {
            "name": "metro_manila",
            "patterns": ["manila", "quezon", "metro"],
            "profile": {
                "risk_level": "Moderate",
                "hazards": [
                    "Urban flooding and poor drainage",
                    "Traffic congestion affecting emergency response",
                    "High population density (vulnerability multiplier)",
                    "Earthquake risk (West Valley Fault)",
                ],
                "population": "~13.5 million (Metro Manila)",
                "budget": "₱10B - ₱20B",
                "recommendations": [
                    "Modernize flood control systems",
                    "Earthquake-resistant retrofitting of buildings",
                    "Improve emergency evacuation protocols",
                    "Upgrade public transportation infrastructure",
                ],
            },
        },
        {
            "name": "albay",
            "patterns": ["albay", "legazpi"],
            "profile": {
                "risk_level": "High",
                "hazards": [
                    "Active Mayon Volcano (Alert Level monitoring)",
                    "Pyroclastic flow danger zones",
                    "Typhoon exposure",
                    "Ashfall impact on agriculture",
                ],
                "population": "~1.37 million residents",
                "budget": "₱2B - ₱4B",
                "recommendations": [
                    "Volcanic monitoring network expansion",
                    "Permanent danger zone relocation centers",
                    "Ashfall protection for critical infrastructure",
                    "Agricultural resilience programs",
                ],
            },
        },
    ],
    "region": {
        "name": "philippines_region",
        "bbox": {
            "min_lat": PHILIPPINES_BBOX.min_lat,
            "max_lat": PHILIPPINES_BBOX.max_lat,
            "min_lon": PHILIPPINES_BBOX.min_lon,
            "max_lon": PHILIPPINES_BBOX.max_lon,
        },
        "profile": {
            "risk_level": "Moderate",
            "hazards": [
                "Typhoon belt location",
                "Seismic activity (Pacific Ring of Fire)",
                "Monsoon flooding potential",
            ],
            "population": "Regional population varies",
            "budget": "₱800M - ₱2B",
            "recommendations": [
                "Standard typhoon preparedness measures",
                "Earthquake-resistant building codes",
                "Flood mitigation infrastructure",
                "Community disaster training programs",
            ],
        },
    },
    "default": {
        "risk_level": "Low",
        "hazards": ["Standard environmental risks"],
        "population": "Data unavailable",
        "budget": "₱300M - ₱800M",
        "recommendations": [
            "Maintain infrastructure standards",
            "Regular safety inspections",
            "Basic emergency preparedness",
        ],
    },
}


def load_rules(path: Path) -> dict[str, Any]:
    """Load a rule table from YAML, falling back to defaults per section.

    Args:
        path: YAML file with optional ``rules``, ``region`` and ``default`` keys.

    Returns:
        A complete rule table dictionary.

    Raises:
        RuleTableError: If the file is missing, not valid YAML or not a mapping.
    """
    if not path.exists():
        raise RuleTableError(f"Rule table not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RuleTableError(f"Invalid YAML in rule table {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RuleTableError(f"Rule table must be a mapping: {path}")

    table = copy.deepcopy(DEFAULT_PROFILE_RULES)
    for key in ("rules", "region", "default"):
        if key in data:
            table[key] = data[key]

    logger.info("Loaded rule table", path=str(path), num_rules=len(table["rules"]))
    return table


class ProfileResolver:
    """First-match-wins evaluator over name rules and a region fallback."""

    def __init__(self, table: dict[str, Any] | None = None):
        """Compile a rule table into rule records.

        Args:
            table: Rule table dictionary; the built-in table when omitted.
        """
        table = table or DEFAULT_PROFILE_RULES

        try:
            self.rules = [
                MatchRule(
                    name=entry.get("name", f"rule_{i}"),
                    patterns=frozenset(p.lower() for p in _string_list(entry, "patterns", required=True)),
                    profile=RiskProfile.from_dict(entry["profile"]),
                )
                for i, entry in enumerate(table.get("rules") or [])
            ]

            region = table.get("region")
            self.region_rule = None
            if region:
                self.region_rule = RegionRule(
                    name=region.get("name", "region"),
                    bbox=BoundingBox(**{k: float(v) for k, v in region["bbox"].items()}),
                    profile=RiskProfile.from_dict(region["profile"]),
                )

            self.default_profile = RiskProfile.from_dict(table["default"])
        except RuleTableError:
            raise
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise RuleTableError(f"Malformed rule table: {e}") from e

    @classmethod
    def from_yaml(cls, path: Path) -> "ProfileResolver":
        """Build a resolver from a YAML rule table."""
        return cls(load_rules(path))

    def resolve(self, display_name: str, coord: Coordinate) -> RiskProfile:
        """Resolve the risk profile for a named location.

        Args:
            display_name: Place name, matched case-insensitively by substring.
            coord: Coordinate used for the region fallback.

        Returns:
            A fresh RiskProfile; never raises.
        """
        name_lower = (display_name or "").lower()

        for rule in self.rules:
            if rule.matches(name_lower):
                logger.debug("Profile rule matched", rule=rule.name, place=display_name)
                return replace(rule.profile)

        if self.region_rule is not None and self.region_rule.matches(coord):
            logger.debug("Region rule matched", rule=self.region_rule.name, lat=coord.lat, lon=coord.lon)
            return replace(self.region_rule.profile)

        logger.debug("No profile rule matched", place=display_name)
        return replace(self.default_profile)


# Global resolver instance, rebuilt when the configured rule table file changes
_resolver: ProfileResolver | None = None
_resolver_key: tuple[str | None, int | None] | None = None


def _rule_table_key(rules_path: str | None) -> tuple[str | None, int | None]:
    """Cache key for a rule table: its path and modification time."""
    if not rules_path:
        return (None, None)
    try:
        return (rules_path, Path(rules_path).stat().st_mtime_ns)
    except OSError:
        return (rules_path, None)


def get_resolver() -> ProfileResolver:
    """Get or create the resolver for the configured rule table.

    The table is reloaded when the configured path or the file's modification
    time changes. An unusable table is logged and the built-in table is used
    in its place, so resolution never fails on configuration.
    """
    global _resolver, _resolver_key
    rules_path = get_config().profiles.rules_path
    key = _rule_table_key(rules_path)
    if _resolver is None or key != _resolver_key:
        _resolver = ProfileResolver()
        if rules_path:
            try:
                _resolver = ProfileResolver.from_yaml(Path(rules_path))
            except RuleTableError as e:
                logger.warning("Rule table unusable, using built-in rules", path=rules_path, error=str(e))
        _resolver_key = key
    return _resolver


def check_rule_table(rules_path: str | None) -> None:
    """Load a configured rule table once so errors surface at startup.

    Raises:
        RuleTableError: If the table is missing or malformed.
    """
    if rules_path:
        ProfileResolver.from_yaml(Path(rules_path))


def resolve_risk_profile(display_name: str, coord: Coordinate) -> RiskProfile:
    """Resolve a risk profile against the configured rule table."""
    return get_resolver().resolve(display_name, coord)
