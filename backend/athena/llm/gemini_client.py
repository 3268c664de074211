"""Gemini client wrapper for multi-turn chat."""

import asyncio
import logging
import os

from google import genai
from google.genai import types

from athena.errors import ExternalServiceError

logger = logging.getLogger(__name__)

# Upper bound on a single model call, in seconds
GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "60"))


class GeminiClient:
    """Wrapper around Google GenAI client for chat turns.

    One instance is built at application startup and handed to the model
    invoker. A missing API key is not fatal: the client still constructs and
    every call fails with ExternalServiceError, which callers turn into a
    fallback reply.
    """

    def __init__(self, api_key: str | None = None, timeout: float | None = None):
        """Initialize the client.

        Args:
            api_key: Google API key. If not provided, uses GOOGLE_API_KEY env var.
            timeout: Seconds to wait for a reply. Defaults to GEMINI_TIMEOUT_SECONDS.
        """
        self.api_key = api_key or os.getenv("GOOGLE_API_KEY")
        self.timeout = timeout if timeout is not None else GEMINI_TIMEOUT_SECONDS
        self._client: genai.Client | None = None

        if self.api_key:
            self._client = genai.Client(api_key=self.api_key)
        else:
            logger.warning(
                "GOOGLE_API_KEY is not set. Generative AI calls will fail until "
                "you provide a valid key in your environment."
            )

    @property
    def configured(self) -> bool:
        """Whether an API key is available."""
        return self._client is not None

    async def send_chat(
        self,
        model: str,
        history: list[types.Content],
        parts: list[types.Part],
    ) -> str:
        """Start a chat seeded with history and send one message.

        Args:
            model: Model variant name
            history: Prior turns, oldest first
            parts: Content parts of the current turn

        Returns:
            Reply text, possibly empty

        Raises:
            ExternalServiceError: If the call fails or times out
        """
        if self._client is None:
            raise ExternalServiceError("Gemini API key is not configured")

        try:
            chat = self._client.aio.chats.create(
                model=model,
                history=history,
            )
            response = await asyncio.wait_for(
                chat.send_message(parts),
                timeout=self.timeout,
            )
        except TimeoutError as e:
            raise ExternalServiceError(
                f"Gemini call timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            raise ExternalServiceError(f"Gemini call failed: {e}") from e

        return response.text or ""
