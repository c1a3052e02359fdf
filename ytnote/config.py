"""
Configuration settings for the ytnote application.
"""

import os
from typing import List, Optional
from pathlib import Path
from dotenv import load_dotenv

from ytnote.utils.logger import logging


# Ensure environment variables are loaded
load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return float(value)


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "YouTube Note Summarizer"
    APP_VERSION = "0.2.0"

    # Data directories
    BASE_DIR = Path(__file__).resolve().parent.parent.absolute()
    DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))
    SETTINGS_FILE = Path(os.getenv("SETTINGS_FILE", DATA_DIR / "settings.json"))

    # API keys (fallbacks when the settings file holds none)
    GROQ_API_KEY = os.getenv("GROQ_API_KEY")
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")

    # Default models
    DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"
    DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
    DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
    DEFAULT_MAX_TOKENS = 2048
    DEFAULT_TEMPERATURE = 0.0

    # Transcript retrieval
    TRANSCRIPT_LANGUAGES: List[str] = [
        lang.strip() for lang in os.getenv("TRANSCRIPT_LANGUAGES", "en").split(",") if lang.strip()
    ]

    # Pipeline tuning
    PASTE_DELAY_SECONDS = float(os.getenv("PASTE_DELAY_SECONDS", "0.1"))
    PIPELINE_TIMEOUT_SECONDS = _optional_float("PIPELINE_TIMEOUT_SECONDS")

    # Front-matter keys used by the auto-detect trigger
    SOURCE_KEY = "source"
    SUMMARIZED_KEY = "yt-summarized"

    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)

        if not (cls.GROQ_API_KEY or cls.OPENAI_API_KEY or cls.GEMINI_API_KEY):
            logging.warning(
                "No provider API key found in the environment. "
                "Set GROQ_API_KEY, OPENAI_API_KEY or GEMINI_API_KEY, or store one in the settings file."
            )


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    LOG_LEVEL = "INFO"


# Determine which configuration to use based on environment
def get_config():
    """Get the appropriate configuration based on environment."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        return ProductionConfig
    else:
        return DevelopmentConfig


# Create a config instance
config = get_config()
config.initialize()
logging.setLevel(config.LOG_LEVEL)
