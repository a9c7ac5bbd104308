"""
Reply generators - optional phrasing of the assistant's message.

The stage logic always produces a complete canned reply. A generator may
replace that text for the opening stages; it never changes the structured
fields of a turn.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..config import get_settings
from ..models.schemas import TurnResult
from ..models.state import get_stage
from .llm_service import LLMService, get_llm_service

logger = logging.getLogger(__name__)


class ReplyGenerationError(RuntimeError):
    """
    Raised when the reply generator fails during a turn.

    `fallback` holds the turn's deterministic result, so callers can still
    answer the buyer with the canned reply.
    """

    def __init__(self, message: str, fallback: TurnResult):
        super().__init__(message)
        self.fallback = fallback


class ReplyGenerator(ABC):
    """Strategy for phrasing the reply of a turn."""

    @abstractmethod
    async def generate(
        self,
        utterance: str,
        profile: Dict[str, Any],
        stage: int,
        missing_fields: List[str],
        has_matches: bool,
        draft: str = ""
    ) -> Optional[str]:
        """
        Produce reply text for the turn.

        Args:
            utterance: The buyer's message
            profile: Requirement profile after the turn
            stage: Stage the conversation moves to
            missing_fields: Required fields still unknown
            has_matches: Whether listings are shown with the reply
            draft: The canned reply computed for the turn

        Returns:
            Reply text, or None to keep the canned reply
        """
        pass


class NullReplyGenerator(ReplyGenerator):
    """Keeps the canned reply."""

    async def generate(self, utterance, profile, stage, missing_fields, has_matches, draft=""):
        return None


class LLMReplyGenerator(ReplyGenerator):
    """Phrases replies with the OpenAI chat API."""

    def __init__(self, llm: Optional[LLMService] = None):
        self._llm = llm

    @property
    def llm(self) -> LLMService:
        if self._llm is None:
            self._llm = get_llm_service()
        return self._llm

    async def generate(self, utterance, profile, stage, missing_fields, has_matches, draft=""):
        text = await self.llm.phrase_reply(
            utterance=utterance,
            requirements=profile,
            stage_title=get_stage(stage).title,
            missing_fields=missing_fields,
            has_matches=has_matches,
            draft=draft,
        )
        return text or None


# Singleton instance
_reply_generator: Optional[ReplyGenerator] = None


def get_reply_generator() -> ReplyGenerator:
    """
    Get or create the configured reply generator.

    Returns:
        LLMReplyGenerator when USE_LLM_REPLIES is set, else NullReplyGenerator
    """
    global _reply_generator

    if _reply_generator is None:
        if get_settings().USE_LLM_REPLIES:
            logger.info("Using LLM reply generator")
            _reply_generator = LLMReplyGenerator()
        else:
            _reply_generator = NullReplyGenerator()

    return _reply_generator
