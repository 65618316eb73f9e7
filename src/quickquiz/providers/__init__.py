"""
Text generation providers for quickquiz

Supports multiple AI providers with a common interface.
Providers: OpenAI (GPT), Claude (Anthropic), Mock
"""

from .base import (
    ModelProvider, ModelResponse, ProviderError, RateLimitError,
    AuthenticationError
)
from .gpt import OpenAIProvider
from .claude import ClaudeProvider
from .mock import MockProvider

__all__ = [
    # Base classes and types
    "ModelProvider",
    "ModelResponse",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    # Providers
    "OpenAIProvider",
    "ClaudeProvider",
    "MockProvider",
]


def get_provider(name: str, **kwargs) -> ModelProvider:
    """
    Factory function to get a provider by name.

    Args:
        name: Provider name ('openai', 'claude', 'mock')
        **kwargs: Provider-specific options

    Returns:
        Configured ModelProvider instance

    Raises:
        ValueError: If provider name is unknown
    """
    providers = {
        "openai": OpenAIProvider,
        "claude": ClaudeProvider,
        "mock": MockProvider,
    }

    if name not in providers:
        raise ValueError(f"Unknown provider: {name}. Valid options: {list(providers.keys())}")

    return providers[name](**kwargs)
