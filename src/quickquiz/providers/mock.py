"""
Mock provider for testing

Returns configurable responses without making API calls.
"""

import asyncio
import json
import random
import re
from dataclasses import dataclass
from typing import Optional, Callable

from ..config import config
from .base import ModelProvider, ModelResponse, ProviderError


def generate_mock_quiz(topic: str, question_count: int = 2, option_count: int = 4) -> dict:
    """
    Generate a mock quiz document in the shape the generation prompt asks for.

    Args:
        topic: Quiz topic
        question_count: Number of questions
        option_count: Number of options per question

    Returns:
        Dict with a "questions" list
    """
    questions = []
    for i in range(question_count):
        options = [f"{topic} answer {i + 1}.{j + 1}" for j in range(option_count)]
        questions.append({
            "question": f"Sample question {i + 1} about {topic}?",
            "options": options,
            "correct_answer": options[i % option_count],
        })
    return {"questions": questions}


def parse_prompt_counts(prompt: str) -> tuple[str, int, int]:
    """Pull (topic, question count, option count) back out of a generation prompt."""
    questions = re.search(r"EXACTLY (\d+) questions", prompt)
    options = re.search(r"EXACTLY (\d+) answer choices", prompt)
    topic = re.search(r"The quiz topic is: (.+?)\.?\s*$", prompt.strip())
    return (
        topic.group(1) if topic else "general knowledge",
        int(questions.group(1)) if questions else 2,
        int(options.group(1)) if options else 4,
    )


@dataclass
class MockProvider(ModelProvider):
    """
    Mock provider for testing.

    Can be configured with custom response generators or fixed responses.
    """

    _name: str = "mock"
    _default_model: str = config.generation.PROVIDER_DEFAULTS["mock"]
    fixed_response: Optional[str] = None
    response_generator: Optional[Callable[[str], str]] = None
    delay_seconds: float = 0.0
    fail_rate: float = 0.0  # Probability of raising an error
    token_count: int = 100
    fenced: bool = True  # Wrap default output in a markdown fence like real models do
    stop_reason: Optional[str] = "end_turn"

    @property
    def name(self) -> str:
        return self._name

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
        """Generate a mock response."""
        # Simulate delay
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        # Simulate failures
        if self.fail_rate > 0 and random.random() < self.fail_rate:
            raise ProviderError("Simulated mock provider failure")

        if self.fixed_response is not None:
            content = self.fixed_response
        elif self.response_generator is not None:
            content = self.response_generator(prompt)
        else:
            content = self._default_response(prompt)

        return ModelResponse(
            content=content,
            model=model or self._default_model,
            provider=self.name,
            usage={
                "input_tokens": len(prompt.split()) * 2,
                "output_tokens": self.token_count,
            },
            stop_reason=self.stop_reason,
        )

    def _default_response(self, prompt: str) -> str:
        """Answer a quiz generation prompt with a quiz of the requested shape."""
        topic, question_count, option_count = parse_prompt_counts(prompt)
        body = json.dumps(generate_mock_quiz(topic, question_count, option_count), indent=2)
        if self.fenced:
            return f"```json\n{body}\n```"
        return body


def create_malformed_mock() -> MockProvider:
    """Create a mock provider whose output can never be parsed."""
    return MockProvider(fixed_response="Sorry, I can't help with making a quiz right now.")
