"""
Stage Agent - Advances the conversation stage and picks the reply for each turn.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional

from .base_agent import BaseAgent
from .extractor_agent import ExtractorAgent, get_extractor_agent
from .recommendation_agent import RecommendationAgent, get_recommendation_agent
from ..models.profile import clear_fields, has_field, has_match_constraint, is_empty, missing_fields
from ..models.state import ConversationStage, ConversationState, get_stage
from ..models.vocabulary import CITY_BLURBS, DISPLAY_LABELS, FIELD_PROMPTS, find_property_type, keyword_regex

logger = logging.getLogger(__name__)

STARTER_SUGGESTIONS = [
    "I want to buy a flat in Gurgaon",
    "Looking for a 3BHK in Dubai under 2 Cr",
    "Show me top builder projects",
]

FOLLOW_UP_SUGGESTIONS = [
    "Tell me more details",
    "Show other options",
    "Schedule a visit",
    "Contact via WhatsApp",
]

RESET_RESPONSE = (
    "No problem, let's start over. Which city are you interested in, "
    "and what's your budget range?"
)

# How a still-missing field is named when noting it in a reply
_MISSING_FIELD_NAMES = {
    "city": "preferred city",
    "purpose": "purpose of purchase",
    "budget": "budget",
}


def default_suggestions(stage: int) -> List[str]:
    """Suggestion buttons shown when a turn offers no quick replies."""
    if get_stage(stage) is ConversationStage.GREETING:
        return list(STARTER_SUGGESTIONS)
    return list(FOLLOW_UP_SUGGESTIONS)


class StageAgent(BaseAgent):
    """
    Conversation state machine.

    Reads the stage the turn started in plus the freshly extracted profile,
    then decides the next stage, the reply and which panels the UI shows.
    Message intent (positive, negative, scheduling, ...) is classified with
    keyword rules.
    """

    NEGATIVE_PATTERN = re.compile(
        r"\b(?:don[’']?t\s+like|not\s+interested|no|nope|nah|other\s+options|different)\b",
        re.IGNORECASE,
    )
    POSITIVE_PATTERN = keyword_regex(("like", "good", "interested", "yes", "yeah", "yup", "perfect", "great"))
    DETAILS_PATTERN = re.compile(r"\b(?:more\s+details|tell\s+me\s+more)\b", re.IGNORECASE)
    SCHEDULING_PATTERN = keyword_regex(
        ("visit", "see", "tour", "call", "talk", "speak", "meeting", "appointment")
    )

    # Objection keywords -> field to drop, checked in order
    OBJECTION_RULES = (
        ("city", keyword_regex(("location", "area"))),
        ("budget", keyword_regex(("price", "expensive", "budget"))),
        ("type", keyword_regex(("type", "kind"))),
    )

    def __init__(
        self,
        extractor: Optional[ExtractorAgent] = None,
        recommender: Optional[RecommendationAgent] = None
    ):
        super().__init__("stage_agent")
        self._extractor = extractor
        self._recommender = recommender

        self._handlers: Dict[ConversationStage, Callable[[ConversationState], None]] = {
            ConversationStage.GREETING: self._handle_greeting,
            ConversationStage.REQUIREMENTS: self._handle_requirements,
            ConversationStage.RECOMMENDATIONS: self._handle_recommendations,
            ConversationStage.SCHEDULING: self._handle_scheduling,
            ConversationStage.OBJECTION: self._handle_objection,
            ConversationStage.SUMMARY: self._handle_summary,
            ConversationStage.CLOSED: self._handle_closed,
        }

    @property
    def extractor(self) -> ExtractorAgent:
        if self._extractor is None:
            self._extractor = get_extractor_agent()
        return self._extractor

    @property
    def recommender(self) -> RecommendationAgent:
        if self._recommender is None:
            self._recommender = get_recommendation_agent()
        return self._recommender

    def process(self, state: ConversationState) -> ConversationState:
        """
        Run the transition for the turn's starting stage.

        Args:
            state: Workflow state after extraction

        Returns:
            Updated state with stage, reply and UI flags
        """
        if state.get("reset"):
            state["updated_stage"] = int(ConversationStage.GREETING)
            state["response"] = RESET_RESPONSE
            state["quick_replies"] = list(STARTER_SUGGESTIONS)
            state["show_recommendations"] = False
            state["show_schedule_options"] = False
        else:
            stage = get_stage(state.get("stage", 1))
            self._handlers[stage](state)

        state["missing_fields"] = missing_fields(state.get("profile", {}))

        logger.debug(
            f"Stage {state.get('stage')} -> {state.get('updated_stage')}, "
            f"recommendations={state.get('show_recommendations')}"
        )
        return state

    # ------------------------------------------------------------------
    # Message classification
    # ------------------------------------------------------------------

    def is_negative(self, text: str) -> bool:
        return bool(self.NEGATIVE_PATTERN.search(text or ""))

    def is_positive(self, text: str) -> bool:
        return bool(self.POSITIVE_PATTERN.search(text or ""))

    def wants_details(self, text: str) -> bool:
        return bool(self.DETAILS_PATTERN.search(text or ""))

    def is_scheduling_request(self, text: str) -> bool:
        return bool(self.SCHEDULING_PATTERN.search(text or ""))

    # ------------------------------------------------------------------
    # Stage handlers
    # ------------------------------------------------------------------

    def _handle_greeting(self, state: ConversationState) -> None:
        profile = state.get("profile", {})

        if is_empty(profile):
            state["updated_stage"] = int(ConversationStage.GREETING)
            state["response"] = (
                "I'd be happy to help you find the perfect property. Could you tell me "
                "which city you're interested in and your budget range?"
            )
            state["quick_replies"] = list(STARTER_SUGGESTIONS)
            return

        missing = missing_fields(profile)
        response = "Great! I'd like to understand your requirements better. "
        if missing:
            state["updated_stage"] = int(ConversationStage.REQUIREMENTS)
            state["response"] = response + self.missing_field_prompt(missing, profile)
        else:
            state["updated_stage"] = int(ConversationStage.RECOMMENDATIONS)
            state["response"] = response + "Let me find some properties for you."
            state["show_recommendations"] = True

    def _handle_requirements(self, state: ConversationState) -> None:
        profile = state.get("profile", {})
        missing = missing_fields(profile)

        if not missing:
            state["updated_stage"] = int(ConversationStage.RECOMMENDATIONS)
            state["response"] = (
                "Based on your requirements, I've found some properties that might "
                "interest you. Take a look at these options."
            )
            state["show_recommendations"] = True
        elif has_match_constraint(profile) and self.recommender.has_exact_matches(profile):
            state["updated_stage"] = int(ConversationStage.RECOMMENDATIONS)
            state["response"] = (
                "I've found some properties that match what you've told me so far. "
                f"To narrow them down, could you also share your {_describe_missing(missing)}?"
            )
            state["show_recommendations"] = True
        else:
            state["updated_stage"] = int(ConversationStage.REQUIREMENTS)
            state["response"] = self.missing_field_prompt(missing, profile)

    def _handle_recommendations(self, state: ConversationState) -> None:
        text = state.get("utterance", "")

        if self.is_negative(text):
            state["updated_stage"] = int(ConversationStage.OBJECTION)
            state["response"] = (
                "I understand. "
                + _cleared_note(state.get("cleared_fields", []), state.get("profile", {}))
                + "What specifically didn't work for you? You can mention "
                "location, price, property type, or other preferences."
            )
            state["quick_replies"] = [
                "Location not ideal",
                "Price is too high",
                "Want different property type",
            ]
        elif self.is_positive(text):
            state["updated_stage"] = int(ConversationStage.SCHEDULING)
            state["response"] = (
                "Great! Would you like to schedule a site visit or a call with our "
                "property expert to discuss further?"
            )
            state["show_schedule_options"] = True
            state["quick_replies"] = [
                "Schedule a site visit",
                "Book a call with expert",
                "Send me more options",
            ]
        elif self.wants_details(text):
            state["updated_stage"] = int(ConversationStage.RECOMMENDATIONS)
            state["response"] = self.describe_properties(state.get("profile", {}))
            state["quick_replies"] = [
                "Schedule visit",
                "Book a call",
                "Show similar properties",
            ]
        else:
            state["updated_stage"] = int(ConversationStage.RECOMMENDATIONS)
            state["response"] = "Would you like to see more options with different parameters?"
            state["quick_replies"] = [
                "Yes, show more options",
                "Adjust my preferences",
                "Start over",
            ]

        state["show_recommendations"] = True

    def _handle_scheduling(self, state: ConversationState) -> None:
        if self.is_scheduling_request(state.get("utterance", "")):
            state["updated_stage"] = int(ConversationStage.SUMMARY)
            state["response"] = "Perfect! How would you like to schedule?"
            state["quick_replies"] = [
                "WhatsApp me the details",
                "Schedule via Calendly",
                "Call me now",
            ]
        else:
            state["updated_stage"] = int(ConversationStage.SCHEDULING)
            state["response"] = (
                "Would you like to schedule a site visit to see the property in person, "
                "or would you prefer a call with our property expert first?"
            )
        state["show_schedule_options"] = True

    def _handle_objection(self, state: ConversationState) -> None:
        text = state.get("utterance", "")
        profile = state.get("profile", {})

        field = next((name for name, pattern in self.OBJECTION_RULES if pattern.search(text)), None)

        if field is None:
            state["response"] = (
                "I'll adjust my search based on your feedback. "
                "Let me find some better options for you."
            )
        else:
            profile = clear_fields(profile, [field])
            profile = self.extractor.extract(text, profile, fields=[field])
            state["profile"] = profile
            state["response"] = self._objection_response(field, profile)

        state["updated_stage"] = int(ConversationStage.RECOMMENDATIONS)
        state["show_recommendations"] = True

    def _handle_summary(self, state: ConversationState) -> None:
        state["updated_stage"] = int(ConversationStage.CLOSED)
        state["response"] = (
            "Thank you for your interest! I've noted down your preferences. Would you like "
            "me to send a summary of these properties to your email or WhatsApp?"
        )
        state["quick_replies"] = [
            "Send via WhatsApp",
            "Email me the details",
            "Both please",
        ]

    def _handle_closed(self, state: ConversationState) -> None:
        state["updated_stage"] = max(int(state.get("stage", 7)), int(ConversationStage.CLOSED))
        state["response"] = (
            "Thank you for using our service! We'll keep tracking better options based on "
            "your preferences and alert you if prices change. Feel free to reach out if you "
            "have more questions."
        )

    # ------------------------------------------------------------------
    # Reply helpers
    # ------------------------------------------------------------------

    def missing_field_prompt(self, missing: List[str], profile: Dict[str, Any]) -> str:
        """Canned question for the first missing field."""
        if not missing:
            return "Could you provide more details about your requirements?"
        template = FIELD_PROMPTS.get(missing[0])
        if template is None:
            return "Could you provide more details about your requirements?"
        return template.format(budget_unit=profile.get("budgetUnit") or "Lakh/Crore")

    def describe_properties(self, profile: Dict[str, Any]) -> str:
        """Short blurb about the kind of properties being shown."""
        info = find_property_type(profile.get("type"))
        subject = info.plural if info else "properties"
        base = (
            f"These {subject} offer premium amenities including 24/7 security, swimming "
            "pools, gyms, and landscaped gardens. "
        )
        city_blurb = CITY_BLURBS.get(
            profile.get("city"), "They are located in prime areas with good connectivity."
        )
        return base + city_blurb + " Would you like to know more about a specific property?"

    def _objection_response(self, field: str, profile: Dict[str, Any]) -> str:
        if has_field(profile, field):
            label = DISPLAY_LABELS.get(field, field).lower()
            return f"Got it, I've updated your {label}. Here are some options that fit better."
        if field == "city":
            return "I'll adjust the location preferences. What area would you prefer instead?"
        if field == "budget":
            return (
                "I'll look for more options within your budget. "
                "Would you like to adjust your budget range?"
            )
        return "What type of property would you prefer instead?"


def _describe_missing(missing: List[str]) -> str:
    names = [
        _MISSING_FIELD_NAMES.get(field, DISPLAY_LABELS.get(field, field).lower()) for field in missing
    ]
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def _cleared_note(cleared: List[str], profile: Dict[str, Any]) -> str:
    """Sentence naming fields an update cue dropped and the message did not refill."""
    dropped = [field for field in cleared if not has_field(profile, field)]
    if not dropped:
        return ""
    return f"I've cleared your {_describe_missing(dropped)}. "
