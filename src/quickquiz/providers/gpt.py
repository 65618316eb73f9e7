"""
OpenAI (GPT) provider implementation

Uses the OpenAI SDK chat completions API. gpt-4o-mini is the default,
which is what quiz generation was tuned against.
"""

import os
from typing import Optional

import openai

from ..config import config
from .base import (
    ModelProvider, ModelResponse, ProviderError, RateLimitError,
    AuthenticationError
)


class OpenAIProvider(ModelProvider):
    """
    OpenAI chat completions provider.

    API key is read from:
    1. Constructor argument
    2. OPENAI_API_KEY environment variable
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (falls back to env var)
            default_model: Default model (defaults to config.generation.PROVIDER_DEFAULTS)
            base_url: Optional API base URL for compatible endpoints
        """
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        self._default_model = default_model or config.generation.PROVIDER_DEFAULTS["openai"]
        self._base_url = base_url
        self._client: Optional[openai.AsyncOpenAI] = None

    def _get_client(self) -> openai.AsyncOpenAI:
        """Create the SDK client on first use."""
        if self._client is None:
            if not self._api_key:
                raise AuthenticationError(
                    "No OpenAI API key provided. Set OPENAI_API_KEY or pass api_key to constructor."
                )
            self._client = openai.AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)
        return self._client

    @property
    def name(self) -> str:
        return "openai"

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
        """Generate a response using the chat completions API."""
        client = self._get_client()

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await client.chat.completions.create(
                model=model or self._default_model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.RateLimitError as e:
            raise RateLimitError(f"OpenAI rate limit exceeded: {e}", status_code=429) from e
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise AuthenticationError(f"OpenAI authentication failed: {e}", status_code=e.status_code) from e
        except openai.APIStatusError as e:
            raise ProviderError(f"OpenAI API error: {e}", status_code=e.status_code) from e
        except openai.APIError as e:
            raise ProviderError(f"OpenAI API error: {e}") from e

        # content is None when the model refuses or returns nothing
        content = ""
        stop_reason = None
        if response.choices:
            choice = response.choices[0]
            content = choice.message.content or ""
            stop_reason = choice.finish_reason

        usage = {}
        if response.usage:
            usage = {
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens,
            }

        return ModelResponse(
            content=content,
            model=response.model,
            provider=self.name,
            usage=usage,
            stop_reason=stop_reason,
            raw_response=response,
        )
