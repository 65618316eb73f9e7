"""
Quiz generator

Asks the text generation provider for a quiz and normalizes the answer,
falling back to a placeholder quiz when the answer cannot be repaired.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..config import config, GenerationConfig
from ..errors import GenerationFailed, IngestionError, MalformedDocument
from ..providers.base import ModelProvider, ProviderError
from .fallback import synthesize
from .normalizer import try_normalize
from .prompts import QUIZ_SYSTEM_PROMPT, format_quiz_prompt
from .schema import QuizSpec, QuizDocument, Malformed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedQuiz:
    """Result of one generation attempt."""
    prompt: str
    document: QuizDocument
    used_fallback: bool = False
    fallback_reason: Optional[str] = None
    usage: dict = field(default_factory=dict)

    @property
    def fallback_error(self) -> Optional[IngestionError]:
        """Why the placeholder quiz was used, as a non-fatal error entry."""
        if not self.used_fallback:
            return None
        return MalformedDocument(self.fallback_reason or "unknown").to_error()


class QuizGenerator:
    """
    Generates quiz documents from a QuizSpec.

    Malformed output never escapes this class: it is replaced by a
    synthesized placeholder quiz of the same shape.
    """

    def __init__(
        self,
        provider: ModelProvider,
        model: Optional[str] = None,
        settings: Optional[GenerationConfig] = None,
    ):
        """
        Initialize generator.

        Args:
            provider: AI model provider
            model: Optional model override
            settings: Token limit and temperature (defaults to config.generation)
        """
        self.provider = provider
        self.model = model
        self.settings = settings or config.generation

    async def generate(self, spec: QuizSpec) -> GeneratedQuiz:
        """
        Generate and normalize a quiz.

        Args:
            spec: Quiz parameters

        Returns:
            GeneratedQuiz with a structurally valid document

        Raises:
            GenerationFailed: If the provider errors or returns no content
        """
        prompt = format_quiz_prompt(spec.topic, spec.question_count, spec.option_count)

        try:
            response = await self.provider.generate(
                prompt=prompt,
                system=QUIZ_SYSTEM_PROMPT,
                model=self.model,
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
            )
        except ProviderError as e:
            raise GenerationFailed(f"Quiz generation failed: {e}") from e

        if not response.content or not response.content.strip():
            raise GenerationFailed("Quiz generation returned no content")

        if response.truncated:
            logger.warning(
                f"Generation stopped at the token limit ({self.settings.max_tokens}), "
                f"quiz text is probably cut off"
            )

        usage = {
            "input_tokens": response.input_tokens,
            "output_tokens": response.output_tokens,
        }

        outcome = try_normalize(response.content, spec.option_count)
        if isinstance(outcome, Malformed):
            logger.warning(f"Generated quiz was malformed ({outcome.reason}), using placeholder quiz")
            return GeneratedQuiz(
                prompt=prompt,
                document=synthesize(spec.topic, spec.question_count, spec.option_count),
                used_fallback=True,
                fallback_reason=outcome.reason,
                usage=usage,
            )

        document = outcome.document
        if len(document) != spec.question_count:
            logger.warning(f"Asked for {spec.question_count} questions, generator returned {len(document)}")

        logger.debug(f"Generated {len(document)} questions about {spec.topic!r}")
        return GeneratedQuiz(prompt=prompt, document=document, usage=usage)
