"""OpenAI chat completion client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import openai
from openai import OpenAI

from .config import config
from .errors import ConfigurationError, NetworkError, UpstreamError
from .models import ChatMessage

if TYPE_CHECKING:
    from .config import ChatSettings

logger = config.get_logger(__name__)


class ChatClient:
    """Single-turn chat completions with a system context and a user prompt."""

    def __init__(self, settings: ChatSettings) -> None:
        """Initialize the ChatClient from explicit settings.

        Args:
            settings: API key, model and sampling options.
        """
        self.settings = settings
        self.model = settings.model
        client_kwargs: dict[str, Any] = {
            "api_key": settings.api_key,
            "base_url": settings.base_url,
            "default_headers": settings.headers or None,
            "max_retries": 0,
        }
        if settings.timeout is not None:
            client_kwargs["timeout"] = settings.timeout
        self.client = OpenAI(**client_kwargs)

    def complete(self, system_context: str, user_prompt: str) -> ChatMessage:
        """Send one system message and one user message.

        Args:
            system_context: Text sent with the ``system`` role.
            user_prompt: Text sent with the ``user`` role.

        Returns:
            The first choice's message.

        Raises:
            ConfigurationError: If the provider rejects the API key.
            NetworkError: If the provider cannot be reached.
            UpstreamError: For any other rejected request.
        """
        options: dict[str, Any] = {}
        if self.settings.temperature is not None:
            options["temperature"] = self.settings.temperature
        if self.settings.max_tokens is not None:
            options["max_tokens"] = self.settings.max_tokens

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_context},
                    {"role": "user", "content": user_prompt},
                ],
                **options,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            logger.exception("Chat provider rejected credentials")
            raise ConfigurationError(str(exc)) from exc
        except openai.APIConnectionError as exc:
            logger.exception("Cannot reach chat provider")
            raise NetworkError(str(exc)) from exc
        except openai.APIStatusError as exc:
            logger.exception("Chat completion failed")
            raise UpstreamError(
                str(exc), status_code=exc.status_code, body=exc.response.text
            ) from exc

        message = response.choices[0].message
        result = ChatMessage(role=message.role, content=message.content or "")
        logger.info("Chat completion returned %d characters", len(result.content))
        return result
