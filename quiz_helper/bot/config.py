"""Configuration settings using pydantic-settings."""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Telegram Bot
    BOT_TOKEN: str = Field(default="", description="Telegram Bot API token")

    # Questions
    QUIZ_FILE: Optional[str] = Field(
        default=None,
        description="Path to a JSON file with questions (built-in sample quiz if unset)"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    class Config:
        """Pydantic config."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()

SAMPLE_QUESTIONS = [
    {
        "prompt": "What’s the only flying mammal?",
        "type": "single_choice",
        "choices": ["Eagle", "Bat", "Flying Squirrel", "Penguin"],
        "correct": 1,
    },
    {
        "prompt": "What are IKEA’s colors?",
        "type": "multiple_choice",
        "choices": ["Red", "Blue", "Yellow", "Green"],
        "correct": [1, 2],
    },
    {
        "prompt": "Is 2 + 2 = 4?",
        "type": "boolean",
        "choices": ["True", "False"],
        "correct": 0,
    },
]
