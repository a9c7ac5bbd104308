"""
Extractor Agent - Reads requirement fields out of free-text chat messages.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Union

from .base_agent import BaseAgent
from ..models.profile import clear_fields, has_field, normalize_profile
from ..models.state import ConversationStage, ConversationState, RequirementProfile
from ..models.vocabulary import (
    CityInfo,
    FIELD_SYNONYMS,
    PURPOSE_RULES,
    STATUS_RULES,
    SUPPORTED_CITIES,
    find_city,
    keyword_regex,
    match_property_type,
)

logger = logging.getLogger(__name__)

# Fields the extractor can fill, in the order they are applied
EXTRACTABLE_FIELDS = ("city", "type", "bedrooms", "budget", "purpose", "status")


class ExtractorAgent(BaseAgent):
    """
    Rule-based requirement extractor.

    Every rule is a deterministic keyword or regex match; a message that
    matches nothing simply leaves the profile unchanged. Fields that are
    already known are only replaced when the buyer explicitly asks to
    change them (see `detect_update_cues`).
    """

    RESET_PATTERN = re.compile(r"\b(?:start\s+over|reset)\b", re.IGNORECASE)
    UPDATE_CUE_PATTERN = keyword_regex(("change", "update", "different", "switch", "instead"))
    BEDROOM_PATTERN = re.compile(r"(\d+)\s*-?\s*(?:bhk|bedrooms|bedroom|bed)", re.IGNORECASE)
    STUDIO_PATTERN = re.compile(r"\bstudio", re.IGNORECASE)

    def __init__(self):
        super().__init__("extractor_agent")

        self.city_patterns = [
            (city, re.compile(re.escape(city.key), re.IGNORECASE)) for city in SUPPORTED_CITIES
        ]
        self.purpose_patterns = [(rule.value, keyword_regex(rule.keywords)) for rule in PURPOSE_RULES]
        self.status_patterns = [(rule.value, keyword_regex(rule.keywords)) for rule in STATUS_RULES]
        self.field_patterns = [(field, keyword_regex(words)) for field, words in FIELD_SYNONYMS]

    def process(self, state: ConversationState) -> ConversationState:
        """
        Apply the reset cue, update cues and extraction rules to the turn's profile.

        Args:
            state: Current workflow state

        Returns:
            Updated state with the new profile
        """
        utterance = state.get("utterance", "")

        if self.is_reset(utterance):
            logger.info("Reset cue received, clearing requirement profile")
            state["reset"] = True
            state["profile"] = RequirementProfile()
            state["updated_stage"] = int(ConversationStage.GREETING)
            return state

        profile = normalize_profile(state.get("profile", {}))

        cleared = self.detect_update_cues(utterance, profile)
        if cleared:
            logger.debug(f"Update cue clears fields: {cleared}")
            profile = clear_fields(profile, cleared)
        state["cleared_fields"] = cleared

        state["profile"] = self.extract(utterance, profile)
        return state

    def is_reset(self, utterance: str) -> bool:
        """True when the buyer asks to start over."""
        return bool(self.RESET_PATTERN.search(utterance or ""))

    def detect_update_cues(self, utterance: str, profile: Dict[str, Any]) -> List[str]:
        """
        Find known fields the buyer is asking to change.

        A change word ("change", "update", "different", ...) must appear, and
        the field must be named either by a synonym ("budget", "location")
        or by a new value for it ("... Dubai instead").

        Args:
            utterance: User message
            profile: Current profile

        Returns:
            Names of fields to clear before re-extracting, in table order
        """
        text = utterance or ""
        if not self.UPDATE_CUE_PATTERN.search(text):
            return []

        budget_city = self.extract_city(text) or find_city(profile.get("city"))
        values_present = self.read_fields(text, budget_city)

        fields = []
        for field, pattern in self.field_patterns:
            if not has_field(profile, field):
                continue
            if pattern.search(text) or field in values_present:
                fields.append(field)
        return fields

    def extract(
        self,
        utterance: str,
        profile: Dict[str, Any],
        fields: Optional[Iterable[str]] = None
    ) -> RequirementProfile:
        """
        Fill unknown fields from the message.

        Args:
            utterance: User message
            profile: Current profile (not modified)
            fields: Restrict extraction to these fields (default: all)

        Returns:
            New profile with any newly found fields added
        """
        updated = normalize_profile(profile)
        allowed = set(fields) if fields is not None else set(EXTRACTABLE_FIELDS)
        text = utterance or ""

        # Budget is read in the unit of the city the profile will hold after this turn
        if has_field(updated, "city"):
            budget_city = find_city(updated["city"])
        elif "city" in allowed:
            budget_city = self.extract_city(text)
        else:
            budget_city = None

        found = self.read_fields(text, budget_city)

        for field in EXTRACTABLE_FIELDS:
            if field not in allowed or field not in found or has_field(updated, field):
                continue
            if field == "city":
                city: CityInfo = found["city"]
                updated["city"] = city.name
                updated["currency"] = city.currency.value
                updated["budgetUnit"] = city.budget_unit.value
            else:
                updated[field] = found[field]

        new_fields = sorted(set(updated) - set(normalize_profile(profile)))
        if new_fields:
            logger.debug(f"Extracted fields: {new_fields}")
        return updated

    def read_fields(self, text: str, budget_city: Optional[CityInfo] = None) -> Dict[str, Any]:
        """
        Read every field value present in the text, ignoring any profile.

        City is returned as its CityInfo table entry; the other values are
        ready to store.
        """
        found: Dict[str, Any] = {}

        city = self.extract_city(text)
        if city:
            found["city"] = city

        property_type = self.extract_property_type(text)
        if property_type:
            found["type"] = property_type

        bedrooms = self.extract_bedrooms(text)
        if bedrooms is not None:
            found["bedrooms"] = bedrooms

        if budget_city is not None:
            budget = self.extract_budget(text, budget_city)
            if budget is not None:
                found["budget"] = budget

        purpose = self._first_rule_match(self.purpose_patterns, text)
        if purpose:
            found["purpose"] = purpose

        status = self._first_rule_match(self.status_patterns, text)
        if status:
            found["status"] = status

        return found

    def extract_city(self, text: str) -> Optional[CityInfo]:
        """Case-insensitive substring match against the supported-city table."""
        for city, pattern in self.city_patterns:
            if pattern.search(text or ""):
                return city
        return None

    def extract_property_type(self, text: str) -> Optional[str]:
        info = match_property_type(text or "")
        return info.name if info else None

    def extract_bedrooms(self, text: str) -> Optional[Union[int, str]]:
        """Bedroom count from '<n> bhk/bed/bedroom(s)', else 'studio'."""
        match = self.BEDROOM_PATTERN.search(text or "")
        if match:
            return int(match.group(1))
        if self.STUDIO_PATTERN.search(text or ""):
            return "studio"
        return None

    def extract_budget(self, text: str, city: CityInfo) -> Optional[Union[int, float]]:
        """
        Budget in absolute currency units.

        Accepts "<number> <unit>" or "<number> <currency>"; either way the
        amount is read in the city's budget unit, e.g. "1.5 crore" in Mumbai
        is 15,000,000 and "2 AED" in Dubai is 2,000,000.

        Args:
            text: User message
            city: Table entry for the buyer's city

        Returns:
            Absolute budget, or None if no amount in the expected unit was given
        """
        unit = city.budget_unit
        currency = city.currency.value.lower()
        suffixes = "|".join(re.escape(alias) for alias in unit.aliases + (currency,))
        pattern = re.compile(rf"(\d[\d,]*(?:\.\d+)?)\s*({suffixes})\b", re.IGNORECASE)

        match = pattern.search(text or "")
        if not match:
            return None

        try:
            value = float(match.group(1).replace(",", ""))
        except ValueError:
            return None

        return _as_number(value * unit.multiplier)

    @staticmethod
    def _first_rule_match(patterns, text: str) -> Optional[str]:
        for value, pattern in patterns:
            if pattern.search(text or ""):
                return value
        return None


def _as_number(value: float) -> Union[int, float]:
    """Drop float noise from unit conversion; whole amounts become ints."""
    value = round(value, 2)
    return int(value) if value.is_integer() else value


# Singleton instance
_extractor_agent: ExtractorAgent = None


def get_extractor_agent() -> ExtractorAgent:
    """Get or create the extractor agent singleton."""
    global _extractor_agent
    if _extractor_agent is None:
        _extractor_agent = ExtractorAgent()
    return _extractor_agent

