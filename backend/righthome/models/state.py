"""
LangGraph state definitions for the conversation workflow.
"""

from typing import TypedDict, List, Optional, Dict, Any, Union
from enum import IntEnum

from .listing import ListingRecord


class ConversationStage(IntEnum):
    """Phases of a buying conversation. Anything past SUMMARY is terminal."""

    GREETING = 1
    REQUIREMENTS = 2
    RECOMMENDATIONS = 3
    SCHEDULING = 4
    OBJECTION = 5
    SUMMARY = 6
    CLOSED = 7

    @property
    def title(self) -> str:
        return _STAGE_INFO[self][0]

    @property
    def description(self) -> str:
        return _STAGE_INFO[self][1]

    @property
    def progress(self) -> int:
        """Percentage shown on the progress bar."""
        return min(int((self.value - 1) / 5 * 100), 100)

    @property
    def is_terminal(self) -> bool:
        return self is ConversationStage.CLOSED


_STAGE_INFO = {
    ConversationStage.GREETING: ("Let's Get Started", "Tell us what you're looking for"),
    ConversationStage.REQUIREMENTS: ("Your Preferences", "We'll use these to find perfect matches"),
    ConversationStage.RECOMMENDATIONS: ("Recommended Properties", "Based on your criteria"),
    ConversationStage.SCHEDULING: ("Schedule a Visit", "Connect with our property experts"),
    ConversationStage.OBJECTION: ("Refine Your Search", "What would you like to change?"),
    ConversationStage.SUMMARY: ("Summary & Follow-up", "Your property journey so far"),
    ConversationStage.CLOSED: ("All Set", "We'll keep tracking better options for you"),
}


def get_stage(value: Any) -> ConversationStage:
    """
    Convert a raw stage number to ConversationStage.

    Values of 7 and above collapse to CLOSED; anything unreadable or below 1
    is treated as the opening stage.

    Args:
        value: Stage number as sent by the client

    Returns:
        Corresponding ConversationStage
    """
    try:
        number = int(value)
    except (TypeError, ValueError):
        return ConversationStage.GREETING

    if number >= ConversationStage.CLOSED:
        return ConversationStage.CLOSED
    if number < ConversationStage.GREETING:
        return ConversationStage.GREETING
    return ConversationStage(number)


def normalize_stage(value: Any) -> int:
    """Stage number to carry forward; terminal values above 7 are kept as sent."""
    stage = get_stage(value)
    if stage.is_terminal:
        return max(int(value), int(stage))
    return int(stage)


class RequirementProfile(TypedDict, total=False):
    """Requirements gathered from the buyer so far."""

    city: str
    currency: str
    budgetUnit: str
    budget: float
    bedrooms: Union[int, str]
    purpose: str
    status: str
    type: str
    stage: int  # mirrors the conversation stage in display views only


class ConversationState(TypedDict, total=False):
    """
    State object passed through the LangGraph turn workflow.

    Each turn starts from a snapshot of the buyer's profile and stage and
    ends with the reply and flags for the UI layer.
    """

    # Input
    utterance: str
    stage: int
    profile: RequirementProfile

    # Extraction
    reset: bool
    cleared_fields: List[str]

    # Stage machine output
    updated_stage: int
    response: str
    show_recommendations: bool
    show_schedule_options: bool
    missing_fields: List[str]
    quick_replies: List[str]

    # Recommendations
    recommendations: List[ListingRecord]
    exact_match: bool


def create_initial_state(
    utterance: str,
    profile: Optional[Dict[str, Any]] = None,
    stage: int = 1
) -> ConversationState:
    """
    Create an initial state object for a new turn.

    Args:
        utterance: The user's message
        profile: Requirement profile from the previous turn (not modified)
        stage: Conversation stage from the previous turn

    Returns:
        Initialized ConversationState
    """
    return ConversationState(
        utterance=utterance or "",
        stage=normalize_stage(stage),
        profile=RequirementProfile(**dict(profile or {})),
        reset=False,
        cleared_fields=[],
        updated_stage=normalize_stage(stage),
        response="",
        show_recommendations=False,
        show_schedule_options=False,
        missing_fields=[],
        quick_replies=[],
        recommendations=[],
        exact_match=False,
    )
