"""Risk profiles and proximity analysis."""

from riskatlas.risk.profiles import (
    ProfileResolver,
    RiskLevel,
    RiskProfile,
    resolve_risk_profile,
)
from riskatlas.risk.proximity import EventDistance, distance_km, find_nearby_events

__all__ = [
    "distance_km",
    "find_nearby_events",
    "EventDistance",
    "resolve_risk_profile",
    "ProfileResolver",
    "RiskProfile",
    "RiskLevel",
]
