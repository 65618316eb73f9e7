"""
Error kinds and exceptions for the quiz pipeline

Failures are either raised (fatal, stop the pipeline) or collected as
IngestionError entries in an ordered list and rendered by the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Kinds of failure the pipeline reports."""
    MALFORMED_DOCUMENT = "malformed_document"
    MISSING_CREDENTIAL = "missing_credential"
    GENERATION_FAILED = "generation_failed"
    QUIZ_CREATION_FAILED = "quiz_creation_failed"
    QUESTION_CREATION_FAILED = "question_creation_failed"
    OPTION_CREATION_FAILED = "option_creation_failed"
    UNEXPECTED_REMOTE_STATUS = "unexpected_remote_status"


FATAL_KINDS = frozenset({
    ErrorKind.MISSING_CREDENTIAL,
    ErrorKind.GENERATION_FAILED,
    ErrorKind.QUIZ_CREATION_FAILED,
})


@dataclass(frozen=True)
class IngestionError:
    """A single reportable failure."""
    kind: ErrorKind
    message: str
    question_index: Optional[int] = None
    option_index: Optional[int] = None
    status_code: Optional[int] = None
    validation_messages: tuple[str, ...] = field(default_factory=tuple)
    cause: Optional[ErrorKind] = None  # Underlying failure, when narrower than kind

    @property
    def fatal(self) -> bool:
        """Whether this error halts the whole pipeline."""
        return self.kind in FATAL_KINDS

    def describe(self) -> str:
        """One-line human readable description."""
        where = []
        if self.question_index is not None:
            where.append(f"question {self.question_index + 1}")
        if self.option_index is not None:
            where.append(f"option {self.option_index + 1}")

        text = self.message
        if where:
            text = f"{', '.join(where).capitalize()}: {text}"
        if self.validation_messages:
            text += f" ({'; '.join(self.validation_messages)})"
        return text

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "question_index": self.question_index,
            "option_index": self.option_index,
            "status_code": self.status_code,
            "validation_messages": list(self.validation_messages),
            "cause": self.cause.value if self.cause else None,
        }


class QuickQuizError(Exception):
    """
    Base exception for quickquiz errors.

    Subclasses that end a pipeline run name the ErrorKind they report as,
    so callers render them through the same IngestionError as collected
    failures.
    """
    kind: Optional[ErrorKind] = None

    def to_error(self) -> IngestionError:
        """This exception as a reportable error entry."""
        return IngestionError(kind=self.kind, message=str(self))


class MalformedDocument(QuickQuizError):
    """Generated text could not be parsed into a quiz document."""
    kind = ErrorKind.MALFORMED_DOCUMENT

    def __init__(self, reason: str):
        super().__init__(f"Malformed quiz document: {reason}")
        self.reason = reason


class MissingCredential(QuickQuizError):
    """No session credential available."""
    kind = ErrorKind.MISSING_CREDENTIAL


class GenerationFailed(QuickQuizError):
    """The text generation service produced nothing usable."""
    kind = ErrorKind.GENERATION_FAILED


class QuizCreationFailed(QuickQuizError):
    """The quiz create call did not yield an identifier."""
    kind = ErrorKind.QUIZ_CREATION_FAILED

    def __init__(self, error: IngestionError):
        super().__init__(error.describe())
        self.error = error

    def to_error(self) -> IngestionError:
        return self.error


class StoreError(QuickQuizError):
    """
    A remote store request could not be completed.

    Never reported on its own: ingestion files it under the kind of the
    create call it interrupted.
    """
    pass


class UnexpectedRemoteStatus(StoreError):
    """Remote store answered outside the recognized status classes."""
    kind = ErrorKind.UNEXPECTED_REMOTE_STATUS

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"Unexpected status code: {status_code}")
        self.status_code = status_code
        self.body = body

    def to_error(self) -> IngestionError:
        return IngestionError(kind=self.kind, message=str(self), status_code=self.status_code)
