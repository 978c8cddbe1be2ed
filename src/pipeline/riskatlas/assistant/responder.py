"""Keyword-driven assistant replies.

There is no language model here. Replies come from a fixed, ordered rule
table; the first rule whose keywords appear in the utterance answers.
"""

import structlog

from riskatlas.assistant.rules import FALLBACK_RESPONSE, IntentRule, build_intent_rules
from riskatlas.config import get_config
from riskatlas.geo_utils import SelectedLocation
from riskatlas.risk.profiles import ProfileResolver, get_resolver

logger = structlog.get_logger()


class RuleBasedResponder:
    """First-match-wins evaluator over an intent rule table."""

    def __init__(
        self,
        resolver: ProfileResolver | None = None,
        rules: list[IntentRule] | None = None,
        assistant_name: str = "AI VISION",
        fallback: str = FALLBACK_RESPONSE,
    ):
        """Initialize the responder.

        Args:
            resolver: Profile resolver for location-aware rules.
            rules: Custom rule table; the built-in table when omitted.
            assistant_name: Name used in the greeting.
            fallback: Reply when no rule matches.
        """
        self.resolver = resolver or ProfileResolver()
        self.rules = rules if rules is not None else build_intent_rules(self.resolver, assistant_name)
        self.fallback = fallback

    def match(self, utterance: str) -> IntentRule | None:
        """Return the first rule that fires for an utterance, if any."""
        text = (utterance or "").strip().lower()
        for rule in self.rules:
            if rule.matches(text):
                return rule
        return None

    def respond(self, utterance: str, location: SelectedLocation | None = None) -> str:
        """Reply to an utterance given the current selection.

        Args:
            utterance: Raw user text.
            location: Snapshot of the selected location, or None.

        Returns:
            Reply text; never raises for string input.
        """
        rule = self.match(utterance)
        if rule is None:
            logger.debug("No intent rule matched", utterance=utterance)
            return self.fallback

        logger.debug(
            "Intent rule matched",
            rule=rule.name,
            has_location=location is not None,
        )
        return rule.build(utterance, location)


def respond_to_utterance(utterance: str, location: SelectedLocation | None = None) -> str:
    """Reply to an utterance with the configured resolver and assistant name."""
    responder = RuleBasedResponder(
        resolver=get_resolver(),
        assistant_name=get_config().assistant.name,
    )
    return responder.respond(utterance, location)
