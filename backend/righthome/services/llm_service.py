"""
LLM service for interacting with OpenAI GPT models.
"""

import logging
from typing import Any, Dict, List, Optional

from ..config import get_settings, load_system_prompt

logger = logging.getLogger(__name__)


class LLMService:
    """
    Service for interacting with Large Language Models (OpenAI GPT).

    Calls are async so a turn can await the reply without blocking the
    API event loop.
    """

    def __init__(self):
        self.settings = get_settings()
        self._client = None
        self._init_client()

    def _init_client(self):
        """Initialize the async OpenAI client."""
        try:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self.settings.OPENAI_API_KEY)
            logger.info(f"Initialized OpenAI LLM client with model: {self.settings.OPENAI_MODEL}")

        except ImportError:
            raise ImportError(
                "openai package is required. Install with: pip install openai"
            )

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None
    ) -> str:
        """
        Generate a response from the LLM.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt
            temperature: Sampling temperature (uses settings default if not provided)
            max_tokens: Maximum tokens in response (uses settings default if not provided)
            model: Model to use (uses settings default if not provided)

        Returns:
            Generated text response
        """
        messages = []

        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        messages.append({"role": "user", "content": prompt})

        response = await self._client.chat.completions.create(
            model=model or self.settings.OPENAI_MODEL,
            messages=messages,
            temperature=temperature if temperature is not None else self.settings.OPENAI_TEMPERATURE,
            max_tokens=max_tokens or self.settings.OPENAI_MAX_TOKENS
        )

        return response.choices[0].message.content or ""

    async def phrase_reply(
        self,
        utterance: str,
        requirements: Dict[str, Any],
        stage_title: str,
        missing_fields: List[str],
        has_matches: bool,
        draft: str = ""
    ) -> str:
        """
        Phrase the assistant's next message in a conversational tone.

        Args:
            utterance: The buyer's latest message
            requirements: Requirement profile after this turn
            stage_title: Title of the stage the conversation is in
            missing_fields: Required fields still unknown
            has_matches: Whether listings are being shown this turn
            draft: The canned reply the text should convey

        Returns:
            Reply text
        """
        prompt_template = load_system_prompt("reply_generator")

        prompt = prompt_template.format(
            utterance=utterance,
            requirements=self._format_requirements_for_prompt(requirements),
            stage=stage_title,
            missing_fields=", ".join(missing_fields) if missing_fields else "none",
            has_matches="yes" if has_matches else "no",
            draft=draft or "(none)",
        )

        return await self.generate(prompt=prompt)

    def _format_requirements_for_prompt(self, requirements: Dict[str, Any]) -> str:
        """Format the requirement profile for inclusion in prompts."""
        if not requirements:
            return "Nothing captured yet."

        return "\n".join(f"- {key}: {value}" for key, value in requirements.items())


# Singleton instance
_llm_service: Optional[LLMService] = None


def get_llm_service() -> LLMService:
    """
    Get or create the LLM service singleton.

    Returns:
        LLMService instance
    """
    global _llm_service

    if _llm_service is None:
        _llm_service = LLMService()

    return _llm_service
