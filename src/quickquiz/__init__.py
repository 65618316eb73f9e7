"""
quickquiz: AI-generated multiple-choice quizzes, repaired and persisted.

Turns unreliable model output into a guaranteed-shape quiz document and
creates it as quiz, question and option records in a remote store.
"""

__version__ = "0.1.0"

from .config import config
from .errors import (
    ErrorKind,
    IngestionError,
    QuickQuizError,
    MalformedDocument,
    MissingCredential,
    GenerationFailed,
    QuizCreationFailed,
    StoreError,
    UnexpectedRemoteStatus,
)
from .quiz import (
    QuizSpec,
    QuestionRecord,
    QuizDocument,
    normalize,
    try_normalize,
    synthesize,
    format_quiz_prompt,
    QuizGenerator,
)
from .session import SessionContext
from .ingest import IngestionOrchestrator, IngestionResult, QuizMeta, ingest
from .pipeline import QuizPipeline, PipelineResult, PipelineStatus, quick_create

__all__ = [
    # Config
    "config",
    # Errors
    "ErrorKind",
    "IngestionError",
    "QuickQuizError",
    "MalformedDocument",
    "MissingCredential",
    "GenerationFailed",
    "QuizCreationFailed",
    "StoreError",
    "UnexpectedRemoteStatus",
    # Quiz documents
    "QuizSpec",
    "QuestionRecord",
    "QuizDocument",
    "normalize",
    "try_normalize",
    "synthesize",
    "format_quiz_prompt",
    "QuizGenerator",
    # Session
    "SessionContext",
    # Ingestion
    "IngestionOrchestrator",
    "IngestionResult",
    "QuizMeta",
    "ingest",
    # Pipeline
    "QuizPipeline",
    "PipelineResult",
    "PipelineStatus",
    "quick_create",
]
