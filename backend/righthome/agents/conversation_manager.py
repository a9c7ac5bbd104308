"""
Conversation Manager - Composes the final turn result and optional phrasing.
"""

import logging
from typing import Optional

from ..models.profile import normalize_profile
from ..models.schemas import TurnResult
from ..models.state import ConversationStage, ConversationState, get_stage
from ..services.reply_generator import ReplyGenerationError, ReplyGenerator, get_reply_generator
from ..utils.helpers import clean_llm_response

logger = logging.getLogger(__name__)

# Turns starting in these stages may have their reply phrased by the generator
GENERATIVE_STAGES = (ConversationStage.GREETING, ConversationStage.REQUIREMENTS)


def build_turn_result(state: ConversationState) -> TurnResult:
    """
    Convert the final workflow state into the turn contract.

    Args:
        state: Workflow state after all nodes ran

    Returns:
        TurnResult for the UI layer
    """
    return TurnResult(
        response=state.get("response", ""),
        updated_requirement_map=dict(normalize_profile(state.get("profile", {}))),
        updated_stage=state.get("updated_stage", state.get("stage", 1)),
        show_recommendations=bool(state.get("show_recommendations")),
        show_schedule_options=bool(state.get("show_schedule_options")),
        missing_fields=list(state.get("missing_fields", [])),
        quick_replies=list(state.get("quick_replies", [])),
        recommendations=list(state.get("recommendations", [])),
    )


class ConversationManager:
    """
    Last step of a turn.

    Every structured field is settled before this runs. For opening-stage
    turns the reply generator may rephrase the canned text; when it fails
    the error carries the canned result so the caller can still answer.
    """

    def __init__(self, reply_generator: Optional[ReplyGenerator] = None):
        self.agent_name = "conversation_manager"
        self._reply_generator = reply_generator

    @property
    def reply_generator(self) -> ReplyGenerator:
        if self._reply_generator is None:
            self._reply_generator = get_reply_generator()
        return self._reply_generator

    def should_generate(self, state: ConversationState) -> bool:
        if state.get("reset"):
            return False
        return get_stage(state.get("stage", 1)) in GENERATIVE_STAGES

    async def process(self, state: ConversationState) -> ConversationState:
        """
        Let the reply generator phrase the reply when the turn allows it.

        Args:
            state: Workflow state after the stage and recommendation steps

        Returns:
            Updated state with the final reply text
        """
        if not self.should_generate(state):
            return state

        fallback = build_turn_result(state)

        try:
            text = await self.reply_generator.generate(
                utterance=state.get("utterance", ""),
                profile=fallback.updated_requirement_map,
                stage=fallback.updated_stage,
                missing_fields=fallback.missing_fields,
                has_matches=bool(fallback.recommendations),
                draft=fallback.response,
            )
        except Exception as e:
            logger.warning(f"Reply generation failed: {e}")
            raise ReplyGenerationError(f"Reply generation failed: {e}", fallback=fallback) from e

        text = clean_llm_response(text) if text else ""
        if text:
            state["response"] = text

        return state

    async def __call__(self, state: ConversationState) -> ConversationState:
        return await self.process(state)

