"""
Ingestion Orchestrator

Persists a quiz document as dependent records in the remote store:
1. One quiz (must yield an id, otherwise nothing else is attempted)
2. One question per record, each needing the quiz id
3. One option per option text, each needing its question id and tagged
   correct by exact string equality with the record's correct answer

Sibling questions, and sibling options, run concurrently under bounded
limits. A failed create is terminal for its branch only; there are no retries.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import config
from .errors import (
    ErrorKind, IngestionError, QuizCreationFailed, StoreError, UnexpectedRemoteStatus
)
from .quiz.prompts import format_quiz_summary
from .quiz.schema import QuizSpec, QuizDocument, QuestionRecord
from .store.base import (
    RemoteStore, StoreResponse, QuizRequest, QuestionRequest, OptionRequest, Identifier
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuizMeta:
    """Quiz-level fields sent with the create-quiz request."""
    title: str
    description: str
    topic: str
    question_count: int
    option_count: int
    prompt: str

    @classmethod
    def from_spec(cls, spec: QuizSpec) -> "QuizMeta":
        return cls(
            title=spec.title,
            description=spec.description,
            topic=spec.topic,
            question_count=spec.question_count,
            option_count=spec.option_count,
            prompt=format_quiz_summary(spec.topic),
        )


@dataclass(frozen=True)
class PersistedQuiz:
    id: Identifier
    title: str


@dataclass(frozen=True)
class PersistedQuestion:
    id: Identifier
    quiz_id: Identifier
    text: str
    question_index: int


@dataclass(frozen=True)
class PersistedOption:
    id: Identifier
    question_id: Identifier
    text: str
    is_correct: bool
    question_index: int
    option_index: int


@dataclass
class IngestionResult:
    """Created records plus every failure collected along the way."""
    quiz: Optional[PersistedQuiz] = None
    questions: list[PersistedQuestion] = field(default_factory=list)
    options: list[PersistedOption] = field(default_factory=list)
    errors: list[IngestionError] = field(default_factory=list)
    skipped_questions: list[int] = field(default_factory=list)

    @property
    def quiz_id(self) -> Optional[Identifier]:
        return self.quiz.id if self.quiz else None

    @property
    def success(self) -> bool:
        """Overall success means the quiz itself was created."""
        return self.quiz_id is not None

    @property
    def fatal_error(self) -> Optional[IngestionError]:
        for error in self.errors:
            if error.fatal:
                return error
        return None

    def raise_for_fatal(self) -> None:
        """
        Raise if the quiz could not be created.

        Raises:
            QuizCreationFailed: When the result holds a fatal error
        """
        error = self.fatal_error
        if error is not None:
            raise QuizCreationFailed(error)

    def to_dict(self) -> dict:
        return {
            "quiz_id": self.quiz_id,
            "success": self.success,
            "questions_created": len(self.questions),
            "options_created": len(self.options),
            "skipped_questions": list(self.skipped_questions),
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass
class _QuestionBranch:
    """Outcome of one question and its options."""
    question: Optional[PersistedQuestion] = None
    options: list[PersistedOption] = field(default_factory=list)
    errors: list[IngestionError] = field(default_factory=list)
    skipped: bool = False


def _store_failure(kind: ErrorKind, error: StoreError, **where) -> IngestionError:
    """Translate a raised store failure into an error entry."""
    if isinstance(error, UnexpectedRemoteStatus):
        return IngestionError(
            kind=kind,
            message=str(error),
            status_code=error.status_code,
            cause=ErrorKind.UNEXPECTED_REMOTE_STATUS,
            **where,
        )
    return IngestionError(kind=kind, message=str(error), **where)


def _missing_id(kind: ErrorKind, what: str, response: StoreResponse, **where) -> IngestionError:
    """Error entry for an answered response that carries no identifier."""
    if response.created:
        message = f"{what} created but no identifier was returned"
    else:
        message = f"{what} was rejected by the store"
    return IngestionError(
        kind=kind,
        message=message,
        status_code=response.status_code,
        validation_messages=response.validation_messages(),
        **where,
    )


class IngestionOrchestrator:
    """
    Orchestrates creation of a quiz, its questions and their options.

    Ordering is structural: a question is only requested once the quiz id
    is known, an option only once its question id is known.
    """

    def __init__(
        self,
        store: RemoteStore,
        max_concurrent_questions: Optional[int] = None,
        max_concurrent_options: Optional[int] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            store: Remote store to create records in
            max_concurrent_questions: Question creates in flight (defaults to config)
            max_concurrent_options: Option creates in flight across all questions (defaults to config)

        Raises:
            ValueError: If a limit is below 1
        """
        if max_concurrent_questions is None:
            max_concurrent_questions = config.ingest.max_concurrent_questions
        if max_concurrent_options is None:
            max_concurrent_options = config.ingest.max_concurrent_options
        if max_concurrent_questions < 1 or max_concurrent_options < 1:
            raise ValueError(
                f"Concurrency limits must be at least 1, got questions={max_concurrent_questions} "
                f"options={max_concurrent_options}"
            )

        self.store = store
        self.max_concurrent_questions = max_concurrent_questions
        self.max_concurrent_options = max_concurrent_options

    async def ingest(self, document: QuizDocument, meta: QuizMeta) -> IngestionResult:
        """
        Persist a quiz document.

        Args:
            document: Normalized quiz document
            meta: Quiz-level fields

        Returns:
            IngestionResult with created records and collected errors. If the
            quiz itself was not created the result holds exactly one fatal
            error and nothing else.
        """
        request = QuizRequest(
            title=meta.title,
            description=meta.description,
            topic=meta.topic,
            question_count=meta.question_count,
            option_count=meta.option_count,
            prompt=meta.prompt,
            quiz_json=document.to_json(),
        )

        try:
            response = await self.store.create_quiz(request)
        except StoreError as e:
            logger.error(f"Quiz creation failed: {e}")
            return IngestionResult(errors=[_store_failure(ErrorKind.QUIZ_CREATION_FAILED, e)])

        quiz_id = response.identifier("quizId")
        if quiz_id is None:
            error = _missing_id(ErrorKind.QUIZ_CREATION_FAILED, "Quiz", response)
            logger.error(f"Quiz creation failed: {error.describe()}")
            return IngestionResult(errors=[error])

        logger.debug(f"Created quiz {quiz_id} ({meta.title!r}), adding {len(document)} questions")

        question_limit = asyncio.Semaphore(self.max_concurrent_questions)
        option_limit = asyncio.Semaphore(self.max_concurrent_options)

        branches = await asyncio.gather(*[
            self._ingest_question(quiz_id, index, record, question_limit, option_limit)
            for index, record in enumerate(document.questions)
        ])

        # Assemble in document order regardless of completion order
        result = IngestionResult(quiz=PersistedQuiz(id=quiz_id, title=meta.title))
        for index, branch in enumerate(branches):
            if branch.skipped:
                result.skipped_questions.append(index)
            if branch.question:
                result.questions.append(branch.question)
            result.options.extend(branch.options)
            result.errors.extend(branch.errors)

        return result

    async def _ingest_question(
        self,
        quiz_id: Identifier,
        index: int,
        record: QuestionRecord,
        question_limit: asyncio.Semaphore,
        option_limit: asyncio.Semaphore,
    ) -> _QuestionBranch:
        """Create one question, then its options."""
        if not record.options:
            logger.warning(f"Question {index + 1} has no options after normalization, skipping it")
            return _QuestionBranch(skipped=True)

        request = QuestionRequest(quiz_id=quiz_id, question_text=record.text)
        async with question_limit:
            try:
                response = await self.store.create_question(request)
            except StoreError as e:
                logger.error(f"Question {index + 1} creation failed: {e}")
                return _QuestionBranch(errors=[
                    _store_failure(ErrorKind.QUESTION_CREATION_FAILED, e, question_index=index)
                ])

        question_id = response.identifier("questionId")
        if question_id is None:
            error = _missing_id(ErrorKind.QUESTION_CREATION_FAILED, "Question", response, question_index=index)
            logger.error(f"Question {index + 1} creation failed: {error.describe()}")
            return _QuestionBranch(errors=[error])

        question = PersistedQuestion(id=question_id, quiz_id=quiz_id, text=record.text, question_index=index)

        outcomes = await asyncio.gather(*[
            self._ingest_option(question_id, index, option_index, text, record, option_limit)
            for option_index, text in enumerate(record.options)
        ])

        branch = _QuestionBranch(question=question)
        for persisted, error in outcomes:
            if persisted:
                branch.options.append(persisted)
            if error:
                branch.errors.append(error)
        return branch

    async def _ingest_option(
        self,
        question_id: Identifier,
        question_index: int,
        option_index: int,
        text: str,
        record: QuestionRecord,
        option_limit: asyncio.Semaphore,
    ) -> tuple[Optional[PersistedOption], Optional[IngestionError]]:
        """Create one option of an already created question."""
        is_correct = record.is_correct(text)
        request = OptionRequest(question_id=question_id, option_text=text, is_correct=is_correct)
        where = {"question_index": question_index, "option_index": option_index}

        async with option_limit:
            try:
                response = await self.store.create_option(request)
            except StoreError as e:
                logger.error(f"Option {option_index + 1} of question {question_index + 1} failed: {e}")
                return None, _store_failure(ErrorKind.OPTION_CREATION_FAILED, e, **where)

        option_id = response.identifier("optionId")
        if option_id is None:
            error = _missing_id(ErrorKind.OPTION_CREATION_FAILED, "Option", response, **where)
            logger.error(f"Option {option_index + 1} of question {question_index + 1} failed: {error.describe()}")
            return None, error

        return PersistedOption(
            id=option_id,
            question_id=question_id,
            text=text,
            is_correct=is_correct,
            question_index=question_index,
            option_index=option_index,
        ), None


async def ingest(
    document: QuizDocument,
    quiz_meta: QuizMeta,
    store: RemoteStore,
    **kwargs,
) -> IngestionResult:
    """Convenience wrapper around IngestionOrchestrator.ingest()."""
    return await IngestionOrchestrator(store, **kwargs).ingest(document, quiz_meta)
