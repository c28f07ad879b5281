"""Configuration management for QuestionRAG."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigurationError

env_path = Path(__file__).parent.parent / ".env"

if env_path.exists():
    load_dotenv(env_path)

BUNDLED_DATASET_PATH = Path(__file__).parent / "data" / "questions.json"


def _optional_float(name: str) -> float | None:
    value = os.getenv(name)
    return float(value) if value else None


def _optional_int(name: str) -> int | None:
    value = os.getenv(name)
    return int(value) if value else None


@dataclass(frozen=True)
class VectorStoreSettings:
    """Connection settings for the Weaviate REST API."""

    url: str
    api_key: str
    openai_api_key: str = ""
    timeout: float | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ChatSettings:
    """Connection and sampling settings for the chat completion endpoint."""

    api_key: str
    model: str = "gpt-3.5-turbo"
    base_url: str | None = None
    timeout: float | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    headers: dict[str, str] = field(default_factory=dict)


class Config:
    """Application configuration loaded from environment variables."""

    @classmethod
    def get_openai_api_key(cls) -> str:
        """Get OpenAI API key from environment variables.

        Returns:
            OpenAI API key from environment or empty string if not set.
        """
        return os.getenv("OPENAI_API_KEY", "")

    @classmethod
    def get_weaviate_url(cls) -> str:
        """Get the Weaviate host or URL from environment variables.

        Returns:
            Weaviate host from environment or empty string if not set.
        """
        return os.getenv("WEAVIATE_URL", "")

    @classmethod
    def get_weaviate_api_key(cls) -> str:
        """Get the Weaviate API key from environment variables.

        Returns:
            Weaviate API key from environment or empty string if not set.
        """
        return os.getenv("WEAVIATE_API_KEY", "")

    OPENAI_BASE_URL: str | None = os.getenv("OPENAI_BASE_URL")

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    OPENAI_LOG_LEVEL: str = os.getenv("OPENAI_LOG_LEVEL", "WARNING").upper()

    # Chat Model Configuration
    CHAT_MODEL: str = os.getenv("CHAT_MODEL", "gpt-3.5-turbo")
    CHAT_MAX_TOKENS: int | None = _optional_int("CHAT_MAX_TOKENS")
    CHAT_TEMPERATURE: float | None = _optional_float("CHAT_TEMPERATURE")

    # Vector Store Configuration
    QUESTION_CLASS: str = os.getenv("QUESTION_CLASS", "Question")
    VECTORIZER: str = os.getenv("VECTORIZER", "text2vec-openai")
    GENERATIVE_MODULE: str = os.getenv("GENERATIVE_MODULE", "generative-openai")
    REQUEST_TIMEOUT: float | None = _optional_float("REQUEST_TIMEOUT")

    # Ingestion Configuration
    BATCH_SIZE: int = int(os.getenv("BATCH_SIZE", "100"))
    BATCH_LEGACY_TRIGGER: bool = os.getenv(
        "BATCH_LEGACY_TRIGGER", "false"
    ).lower() in {"1", "true", "yes"}
    DATASET_SOURCE: str = os.getenv("DATASET_SOURCE", str(BUNDLED_DATASET_PATH))

    # API Header Configuration
    API_USER_AGENT: str = os.getenv("API_USER_AGENT", "QuestionRAG/1.0")

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration values.

        Raises:
            ConfigurationError: If any credential or host is not set.
        """
        required = {
            "WEAVIATE_URL": cls.get_weaviate_url(),
            "WEAVIATE_API_KEY": cls.get_weaviate_api_key(),
            "OPENAI_API_KEY": cls.get_openai_api_key(),
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            msg = (
                f"{', '.join(missing)} required. "
                "Please set it in .env file or environment."
            )
            raise ConfigurationError(msg)

    @classmethod
    def setup_logging(cls) -> None:
        """Setup basic logging configuration.

        Configure logging once at application startup with:
        - Console output for all levels
        - Simple, readable format
        - Configurable level via environment variable
        """
        logging.basicConfig(
            level=getattr(logging, cls.LOG_LEVEL, logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )

        third_party_level = getattr(logging, cls.OPENAI_LOG_LEVEL, logging.WARNING)
        for name in ("openai", "httpx", "urllib3"):
            logging.getLogger(name).setLevel(third_party_level)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger with the specified name.

        Args:
            name: Logger name (typically __name__)

        Returns:
            Logger instance
        """
        return logging.getLogger(name)

    @classmethod
    def get_api_headers(cls) -> dict[str, str]:
        """Build default headers for outbound API calls.

        Returns:
            Mapping of header names to values used on outbound HTTP requests.
        """
        headers: dict[str, str] = {}

        if cls.API_USER_AGENT:
            headers["User-Agent"] = cls.API_USER_AGENT

        return headers

    @classmethod
    def vector_store_settings(cls) -> VectorStoreSettings:
        """Build Weaviate client settings from the environment.

        Returns:
            Settings for ``WeaviateClient``.
        """
        return VectorStoreSettings(
            url=cls.get_weaviate_url(),
            api_key=cls.get_weaviate_api_key(),
            openai_api_key=cls.get_openai_api_key(),
            timeout=cls.REQUEST_TIMEOUT,
            headers=cls.get_api_headers(),
        )

    @classmethod
    def chat_settings(cls) -> ChatSettings:
        """Build chat client settings from the environment.

        Returns:
            Settings for ``ChatClient``.
        """
        return ChatSettings(
            api_key=cls.get_openai_api_key(),
            model=cls.CHAT_MODEL,
            base_url=cls.OPENAI_BASE_URL,
            timeout=cls.REQUEST_TIMEOUT,
            temperature=cls.CHAT_TEMPERATURE,
            max_tokens=cls.CHAT_MAX_TOKENS,
            headers=cls.get_api_headers(),
        )


config = Config()
