"""
Claude (Anthropic) provider implementation

Uses the Anthropic SDK messages API.
"""

import os
from typing import Optional

import anthropic

from ..config import config
from .base import (
    ModelProvider, ModelResponse, ProviderError, RateLimitError,
    AuthenticationError
)


class ClaudeProvider(ModelProvider):
    """
    Anthropic Claude provider.

    API key is read from:
    1. Constructor argument
    2. ANTHROPIC_API_KEY environment variable
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: Optional[str] = None,
    ):
        self._api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        self._default_model = default_model or config.generation.PROVIDER_DEFAULTS["claude"]
        self._client: Optional[anthropic.AsyncAnthropic] = None

    def _get_client(self) -> anthropic.AsyncAnthropic:
        """Create the SDK client on first use."""
        if self._client is None:
            if not self._api_key:
                raise AuthenticationError(
                    "No Anthropic API key provided. Set ANTHROPIC_API_KEY or pass api_key to constructor."
                )
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self._client

    @property
    def name(self) -> str:
        return "claude"

    @property
    def default_model(self) -> str:
        return self._default_model

    async def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        **kwargs
    ) -> ModelResponse:
        """Send one user message and join the text blocks of the reply."""
        client = self._get_client()

        request = {
            "model": model or self._default_model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
            # Anthropic caps temperature at 1.0
            "temperature": min(1.0, max(0.0, temperature)),
        }
        if system:
            request["system"] = system

        try:
            response = await client.messages.create(**request)
        except anthropic.RateLimitError as e:
            raise RateLimitError(f"Claude rate limit exceeded: {e}", status_code=429) from e
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            raise AuthenticationError(f"Claude authentication failed: {e}", status_code=e.status_code) from e
        except anthropic.APIStatusError as e:
            raise ProviderError(f"Claude API error: {e}", status_code=e.status_code) from e
        except anthropic.APIError as e:
            raise ProviderError(f"Claude API error: {e}") from e

        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )

        return ModelResponse(
            content=text,
            model=response.model,
            provider=self.name,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
            stop_reason=response.stop_reason,
            raw_response=response,
        )
