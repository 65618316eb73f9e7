"""
In-memory remote store

Behaves like the quiz REST API without a network: assigns sequential ids,
answers validation failures with 400 payloads, and can be told to fail
specific records for testing.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Literal, Optional

from ..errors import StoreError, UnexpectedRemoteStatus
from .base import (
    RemoteStore, StoreResponse, QuizRequest, QuestionRequest, OptionRequest,
    CREATED, VALIDATION_ERROR
)

FailureMode = Literal["validation", "status", "transport", "no_id"]


@dataclass
class InMemoryStore(RemoteStore):
    """
    In-memory quiz store.

    fail_on maps a quiz title, question text or option text to the way its
    create call should fail.
    """

    fail_on: dict[str, FailureMode] = field(default_factory=dict)
    delay_seconds: float = 0.0
    quizzes: dict[int, dict] = field(default_factory=dict)
    questions: dict[int, dict] = field(default_factory=dict)
    options: dict[int, dict] = field(default_factory=dict)
    calls: list[tuple[str, dict]] = field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0
    _next_id: int = 0

    def _assign_id(self) -> int:
        self._next_id += 1
        return self._next_id

    async def _enter(self, kind: str, payload: dict, key: str) -> Optional[StoreResponse]:
        """Record the call, simulate latency, and apply any configured failure."""
        self.calls.append((kind, payload))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            # Yield so concurrent callers actually interleave
            await asyncio.sleep(self.delay_seconds)
        finally:
            self.in_flight -= 1

        mode = self.fail_on.get(key)
        if mode == "transport":
            raise StoreError(f"Connection refused while creating {kind}")
        if mode == "status":
            raise UnexpectedRemoteStatus(500, "Internal Server Error")
        if mode == "validation":
            return StoreResponse(VALIDATION_ERROR, [f"Rejected {kind}: {key}"])
        if mode == "no_id":
            return StoreResponse(CREATED, {})
        return None

    async def create_quiz(self, request: QuizRequest) -> StoreResponse:
        payload = request.to_payload()
        failure = await self._enter("quiz", payload, request.title)
        if failure is not None:
            return failure

        messages = []
        if not request.title.strip():
            messages.append("Quiz title cannot be null or empty.")
        if not request.description.strip():
            messages.append("Quiz description cannot be null or empty.")
        if not request.quiz_json.strip():
            messages.append("Quiz JSON content cannot be null or empty.")
        if messages:
            return StoreResponse(VALIDATION_ERROR, messages)

        quiz_id = self._assign_id()
        record = {"quizId": quiz_id, **payload}
        self.quizzes[quiz_id] = record
        return StoreResponse(CREATED, dict(record))

    async def create_question(self, request: QuestionRequest) -> StoreResponse:
        payload = request.to_payload()
        failure = await self._enter("question", payload, request.question_text)
        if failure is not None:
            return failure

        if request.quiz_id not in self.quizzes:
            return StoreResponse(VALIDATION_ERROR, [f"Quiz {request.quiz_id} does not exist."])
        if not request.question_text.strip():
            return StoreResponse(VALIDATION_ERROR, ["Question text cannot be null or empty."])

        question_id = self._assign_id()
        record = {"questionId": question_id, **payload}
        self.questions[question_id] = record
        return StoreResponse(CREATED, dict(record))

    async def create_option(self, request: OptionRequest) -> StoreResponse:
        payload = request.to_payload()
        failure = await self._enter("option", payload, request.option_text)
        if failure is not None:
            return failure

        if request.question_id not in self.questions:
            return StoreResponse(VALIDATION_ERROR, [f"Question {request.question_id} does not exist."])
        if not request.option_text.strip():
            return StoreResponse(VALIDATION_ERROR, ["Option text cannot be null or empty."])

        option_id = self._assign_id()
        record = {"optionId": option_id, **payload}
        self.options[option_id] = record
        return StoreResponse(CREATED, dict(record))

    def options_for(self, question_id: int) -> list[dict]:
        """Stored options of a question, in creation order."""
        return [o for o in self.options.values() if o["questionId"] == question_id]
