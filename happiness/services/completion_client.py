"""Client for the external text-completion service (Anthropic Messages API)."""

import logging

from anthropic import APIError, AsyncAnthropic

from happiness.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class CompletionError(Exception):
    """The completion service could not produce a usable response."""


class CompletionClient:
    """Sends a single-message prompt and returns the first text block."""

    def __init__(
        self,
        client: AsyncAnthropic | None = None,
        *,
        model: str | None = None,
        max_tokens: int | None = None,
    ):
        """Initialize Anthropic client. Retries are disabled; failures surface immediately."""
        self.client = client or AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            max_retries=0,
        )
        self.model = model or settings.llm_model
        self.max_tokens = max_tokens or settings.llm_max_tokens

    async def complete(self, prompt: str) -> str:
        """
        Request a completion for the prompt.

        Args:
            prompt: Fully assembled prompt, sent as one user-role message

        Returns:
            Text of the first content block

        Raises:
            CompletionError: on network failure, non-success status,
                or a response without a text block
        """
        try:
            message = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as e:
            logger.error("Completion request failed: %s", e)
            raise CompletionError("Completion service request failed") from e

        content = getattr(message, "content", None)
        if not content:
            raise CompletionError("Completion response had no content")

        text = getattr(content[0], "text", None)
        if not isinstance(text, str):
            raise CompletionError("Completion response first block has no text")

        return text


# Singleton instance
default_completion_client = CompletionClient()


def get_completion_client() -> CompletionClient:
    """FastAPI dependency returning the shared completion client."""
    return default_completion_client
