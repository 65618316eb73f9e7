"""
Quiz Pipeline

End-to-end flow from quiz parameters to persisted records:
1. Check the session credential (before any network call)
2. Build the prompt and generate a quiz
3. Normalize it, falling back to a placeholder quiz if it is unusable
4. Ingest it into the remote store
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import config, Config
from .errors import IngestionError
from .ingest import IngestionOrchestrator, IngestionResult, QuizMeta
from .providers import get_provider
from .providers.base import ModelProvider
from .quiz.generator import QuizGenerator, GeneratedQuiz
from .quiz.schema import QuizSpec
from .session import SessionContext
from .store.base import RemoteStore
from .store.memory import InMemoryStore
from .store.rest import HttpQuizStore

logger = logging.getLogger(__name__)


class PipelineStatus(str, Enum):
    """Overall outcome of a pipeline run."""
    COMPLETE = "complete"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class PipelineResult:
    """Everything a caller needs to report a pipeline run."""
    spec: QuizSpec
    generated: GeneratedQuiz
    ingestion: IngestionResult

    @property
    def status(self) -> PipelineStatus:
        if not self.ingestion.success:
            return PipelineStatus.FAILED
        if self.ingestion.errors or self.ingestion.skipped_questions:
            return PipelineStatus.PARTIAL
        return PipelineStatus.COMPLETE

    @property
    def errors(self) -> list[IngestionError]:
        return self.ingestion.errors

    @property
    def warnings(self) -> list[IngestionError]:
        """Recovered problems that did not stop ingestion."""
        fallback = self.generated.fallback_error
        return [fallback] if fallback else []

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "spec": self.spec.to_dict(),
            "used_fallback": self.generated.used_fallback,
            "fallback_reason": self.generated.fallback_reason,
            "usage": self.generated.usage,
            "document": self.generated.document.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
            **self.ingestion.to_dict(),
        }


class QuizPipeline:
    """
    Runs generation and ingestion for one quiz.

    When no store is given, an HttpQuizStore is opened for the session and
    closed when the run finishes.
    """

    def __init__(
        self,
        provider: Optional[ModelProvider] = None,
        store: Optional[RemoteStore] = None,
        model: Optional[str] = None,
        use_mock: bool = False,
        cfg: Optional[Config] = None,
    ):
        """
        Initialize pipeline.

        Args:
            provider: Text generation provider (defaults to the configured provider)
            store: Remote store (defaults to the REST store for the session)
            model: Optional model override (defaults to the configured model for the provider)
            use_mock: Use the mock provider and an in-memory store
            cfg: Settings to run with (defaults to Config.mock_mode() with use_mock, else config)
        """
        if cfg is None:
            cfg = Config.mock_mode() if use_mock else config
        if use_mock:
            store = store or InMemoryStore()
        if provider is None:
            provider = get_provider(cfg.generation.provider)

        self.cfg = cfg
        self.provider = provider
        self.store = store
        self.model = model or cfg.generation.get_model(provider.name) or None
        self.generator = QuizGenerator(provider, model=self.model, settings=cfg.generation)

    async def generate(self, spec: QuizSpec) -> GeneratedQuiz:
        """Generate and normalize a quiz without persisting it."""
        return await self.generator.generate(spec)

    async def run(self, spec: QuizSpec, session: SessionContext) -> PipelineResult:
        """
        Generate a quiz and persist it.

        Args:
            spec: Quiz parameters
            session: Session with credential and store endpoint

        Returns:
            PipelineResult; a failed quiz creation shows up as status FAILED
            with a single fatal error

        Raises:
            MissingCredential: If the session has no credential
            GenerationFailed: If the provider produced nothing usable
        """
        session.require_credential()

        generated = await self.generate(spec)
        if generated.used_fallback:
            logger.warning(f"Persisting placeholder quiz for {spec.topic!r}: {generated.fallback_reason}")

        store = self.store
        owns_store = store is None
        if owns_store:
            store = HttpQuizStore(session)

        try:
            orchestrator = IngestionOrchestrator(
                store,
                max_concurrent_questions=self.cfg.ingest.max_concurrent_questions,
                max_concurrent_options=self.cfg.ingest.max_concurrent_options,
            )
            ingestion = await orchestrator.ingest(generated.document, QuizMeta.from_spec(spec))
        finally:
            if owns_store:
                await store.aclose()

        result = PipelineResult(spec=spec, generated=generated, ingestion=ingestion)
        logger.info(
            f"Quiz pipeline {result.status.value}: quiz={ingestion.quiz_id} "
            f"questions={len(ingestion.questions)} options={len(ingestion.options)} errors={len(ingestion.errors)}"
        )
        return result


# Convenience function for quick runs
async def quick_create(
    title: str,
    topic: str,
    description: str = "",
    question_count: int = 2,
    option_count: int = 2,
    credential: Optional[str] = None,
    use_mock: bool = True,
) -> PipelineResult:
    """
    Create a quiz with minimal setup.

    Args:
        title: Quiz title
        topic: Quiz topic
        description: Quiz description (defaults to the topic summary)
        question_count: Number of questions
        option_count: Options per question
        credential: Session credential (defaults to QUICKQUIZ_TOKEN, or a placeholder in mock mode)
        use_mock: Use mock provider and in-memory store (True for testing)

    Returns:
        PipelineResult
    """
    spec = QuizSpec(
        title=title,
        description=description or f"A quiz about {topic}",
        topic=topic,
        question_count=question_count,
        option_count=option_count,
    )

    session = SessionContext.from_env()
    if credential:
        session = SessionContext(credential=credential, base_url=session.base_url)
    elif use_mock and not session.has_credential:
        session = SessionContext(credential="mock-session", base_url=session.base_url)

    pipeline = QuizPipeline(use_mock=use_mock)
    return await pipeline.run(spec, session)
