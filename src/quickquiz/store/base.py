"""
Remote store protocol

Three create operations, each a request/response exchange. Two response
classes count as answered: created (201) and validation error (400).
Anything else is raised as UnexpectedRemoteStatus by the adapter.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Union

CREATED = 201
VALIDATION_ERROR = 400
ANSWERED_STATUSES = (CREATED, VALIDATION_ERROR)

Identifier = Union[int, str]


@dataclass(frozen=True)
class QuizRequest:
    """Create-quiz request body."""
    title: str
    description: str
    topic: str
    question_count: int
    option_count: int
    prompt: str
    quiz_json: str

    def to_payload(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "topic": self.topic,
            "numberOfQuestions": self.question_count,
            "numberOfOptions": self.option_count,
            "prompt": self.prompt,
            "quizJSON": self.quiz_json,
        }


@dataclass(frozen=True)
class QuestionRequest:
    """Create-question request body."""
    quiz_id: Identifier
    question_text: str

    def to_payload(self) -> dict:
        return {"quizId": self.quiz_id, "questionText": self.question_text}


@dataclass(frozen=True)
class OptionRequest:
    """Create-option request body."""
    question_id: Identifier
    option_text: str
    is_correct: bool

    def to_payload(self) -> dict:
        return {
            "questionId": self.question_id,
            "optionText": self.option_text,
            "isCorrect": self.is_correct,
        }


@dataclass(frozen=True)
class StoreResponse:
    """An answered response from the remote store."""
    status_code: int
    data: Any = None

    @property
    def created(self) -> bool:
        return self.status_code == CREATED

    def identifier(self, key: str) -> Optional[Identifier]:
        """
        Store-assigned identifier under key, if the response carries one.

        Zero, blank strings and booleans do not count as identifiers.
        """
        if not isinstance(self.data, dict):
            return None
        value = self.data.get(key)
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value or None
        if isinstance(value, str):
            return value if value.strip() else None
        return None

    def validation_messages(self) -> tuple[str, ...]:
        """Messages from a structured validation-error payload."""
        data = self.data
        if isinstance(data, str):
            return (data,) if data.strip() else ()
        if isinstance(data, dict):
            for key in ("messages", "errors", "message"):
                if key in data:
                    data = data[key]
                    break
            else:
                return ()
            if isinstance(data, str):
                return (data,)
        if isinstance(data, list):
            return tuple(str(m) for m in data if m is not None)
        return ()


class RemoteStore(ABC):
    """
    Abstract base class for quiz stores.

    Implementations return a StoreResponse for answered requests and raise
    StoreError (or UnexpectedRemoteStatus) for everything else.
    """

    @abstractmethod
    async def create_quiz(self, request: QuizRequest) -> StoreResponse:
        """Create a quiz record; the id comes back under 'quizId'."""
        pass

    @abstractmethod
    async def create_question(self, request: QuestionRequest) -> StoreResponse:
        """Create a question record; the id comes back under 'questionId'."""
        pass

    @abstractmethod
    async def create_option(self, request: OptionRequest) -> StoreResponse:
        """Create an option record; the id comes back under 'optionId'."""
        pass

    async def aclose(self) -> None:
        """Release any held resources."""
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
