"""
Agent modules for the RightHome property co-pilot.
"""

from .base_agent import BaseAgent
from .extractor_agent import ExtractorAgent, get_extractor_agent
from .recommendation_agent import RecommendationAgent, RecommendationResult, get_recommendation_agent
from .stage_agent import StageAgent, default_suggestions
from .conversation_manager import ConversationManager, build_turn_result

__all__ = [
    "BaseAgent",
    "ExtractorAgent",
    "get_extractor_agent",
    "RecommendationAgent",
    "RecommendationResult",
    "get_recommendation_agent",
    "StageAgent",
    "default_suggestions",
    "ConversationManager",
    "build_turn_result",
]
