"""
Data models for the RightHome property co-pilot.
"""

from .schemas import (
    TurnResult,
    ChatRequest,
    ChatResponse,
    StageInfo,
    ConversationMessage,
    RequirementItem,
    SessionView,
    ScheduleLinks,
    HealthResponse,
)
from .listing import ListingRecord, ListingDetails
from .state import (
    ConversationState,
    ConversationStage,
    RequirementProfile,
    create_initial_state,
    get_stage,
)

__all__ = [
    "TurnResult",
    "ChatRequest",
    "ChatResponse",
    "StageInfo",
    "ConversationMessage",
    "RequirementItem",
    "SessionView",
    "ScheduleLinks",
    "HealthResponse",
    "ListingRecord",
    "ListingDetails",
    "ConversationState",
    "ConversationStage",
    "RequirementProfile",
    "create_initial_state",
    "get_stage",
]
