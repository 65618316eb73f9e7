"""
Base protocol for text generation providers

Quiz generation needs one thing from a provider: send a prompt, get text
back. Everything else (parsing, repair, fallback) happens downstream.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Any

# Stop reasons meaning the model ran out of room, per provider
TRUNCATION_STOP_REASONS = frozenset({"max_tokens", "length"})


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ProviderError):
    """Rate limit exceeded."""
    pass


class AuthenticationError(ProviderError):
    """Missing or rejected API key."""
    pass


@dataclass
class ModelResponse:
    """Text returned by a provider for one prompt."""
    content: str
    model: str
    provider: str
    usage: dict = field(default_factory=dict)
    stop_reason: Optional[str] = None
    raw_response: Optional[Any] = None

    @property
    def input_tokens(self) -> int:
        return self.usage.get("input_tokens", 0)

    @property
    def output_tokens(self) -> int:
        return self.usage.get("output_tokens", 0)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def truncated(self) -> bool:
        """Whether generation stopped at the token limit."""
        return self.stop_reason in TRUNCATION_STOP_REASONS


class ModelProvider(ABC):
    """
    Abstract base class for text generation providers.

    A provider answers a single prompt per call. Implementations translate
    their SDK's failures into ProviderError and its subclasses so callers
    never see SDK exception types.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name ('openai', 'claude', 'mock')."""
        pass

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Model used when the caller does not pick one."""
        pass

    @abstractmethod
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
        """
        Answer a prompt.

        Args:
            prompt: The user prompt
            system: Optional system prompt
            model: Model ID (uses default if not specified)
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            ModelResponse with the generated text

        Raises:
            AuthenticationError: When no usable API key is available
            RateLimitError: When the service throttles the request
            ProviderError: On any other service failure
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.default_model!r})"
