"""
Configuration settings for the RightHome property co-pilot.
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    OPENAI_API_KEY: str = ""

    # OpenAI Model Settings
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.4
    OPENAI_MAX_TOKENS: int = 300

    # Use the LLM to phrase stage 1/2 prompts (canned templates otherwise)
    USE_LLM_REPLIES: bool = False

    # Catalog Settings
    CATALOG_PATH: Optional[str] = None  # Overrides the packaged listings.json

    # Recommendation Settings
    MAX_RECOMMENDATIONS: int = 5
    BUDGET_TOLERANCE: float = 0.2
    BUDGET_SOFT_TOLERANCE: float = 0.3

    # Session Settings
    SESSION_TIMEOUT_HOURS: int = 24
    HISTORY_LIMIT: int = 50

    # Scheduling Links
    WHATSAPP_NUMBER: str = "919876543210"
    CALENDLY_URL: str = "https://calendly.com/righthome/site-visit"
    SUPPORT_EMAIL: str = "homes@righthome.ai"

    # Paths
    BASE_DIR: Path = Path(__file__).resolve().parent
    DATA_DIR: Path = BASE_DIR / "data"
    SYSTEM_PROMPTS_DIR: Path = BASE_DIR / "prompts"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience function to load prompt files
def load_system_prompt(prompt_name: str) -> str:
    """
    Load a prompt template from the prompts directory.

    Args:
        prompt_name: Name of the prompt (e.g., 'reply_generator')

    Returns:
        The prompt text content
    """
    settings = get_settings()
    prompt_file = settings.SYSTEM_PROMPTS_DIR / f"{prompt_name}_prompt.txt"

    if prompt_file.exists():
        return prompt_file.read_text(encoding="utf-8")
    else:
        return f"[PLACEHOLDER] Prompt for {prompt_name} not found at {prompt_file}"
