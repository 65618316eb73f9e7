"""
Remote quiz stores

The REST adapter used in production and an in-memory store for tests and
offline runs.
"""

from .base import (
    RemoteStore,
    StoreResponse,
    QuizRequest,
    QuestionRequest,
    OptionRequest,
    ANSWERED_STATUSES,
)
from .rest import HttpQuizStore
from .memory import InMemoryStore

__all__ = [
    "RemoteStore",
    "StoreResponse",
    "QuizRequest",
    "QuestionRequest",
    "OptionRequest",
    "ANSWERED_STATUSES",
    "HttpQuizStore",
    "InMemoryStore",
]
