"""
Services for the RightHome property co-pilot.
"""

from .catalog_service import CatalogService, CatalogLoadError, get_catalog_service
from .llm_service import LLMService, get_llm_service
from .reply_generator import (
    ReplyGenerator,
    NullReplyGenerator,
    LLMReplyGenerator,
    ReplyGenerationError,
    get_reply_generator,
)
from .scheduling_service import SchedulingService, get_scheduling_service
from .session_service import SessionService, SessionData, WELCOME_MESSAGE, get_session_service

__all__ = [
    "CatalogService",
    "CatalogLoadError",
    "get_catalog_service",
    "LLMService",
    "get_llm_service",
    "ReplyGenerator",
    "NullReplyGenerator",
    "LLMReplyGenerator",
    "ReplyGenerationError",
    "get_reply_generator",
    "SchedulingService",
    "get_scheduling_service",
    "SessionService",
    "SessionData",
    "WELCOME_MESSAGE",
    "get_session_service",
]
