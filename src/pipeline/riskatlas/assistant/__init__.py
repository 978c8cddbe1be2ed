"""Scripted, keyword-matching assistant."""

from riskatlas.assistant.responder import RuleBasedResponder, respond_to_utterance
from riskatlas.assistant.rules import IntentRule, build_intent_rules

__all__ = [
    "RuleBasedResponder",
    "respond_to_utterance",
    "IntentRule",
    "build_intent_rules",
]
