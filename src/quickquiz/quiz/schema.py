"""
Quiz schema and data structures

Defines the quiz parameters, the normalized quiz document, and the
explicit outcome of turning generated text into a document.
"""

import json
from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class QuizSpec:
    """
    Parameters for a quiz to generate.

    Immutable once handed to the pipeline.
    """
    title: str
    description: str
    topic: str
    question_count: int = 2
    option_count: int = 2

    def __post_init__(self):
        if self.question_count < 1:
            raise ValueError(f"question_count must be at least 1, got {self.question_count}")
        if self.option_count < 1:
            raise ValueError(f"option_count must be at least 1, got {self.option_count}")

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "topic": self.topic,
            "question_count": self.question_count,
            "option_count": self.option_count,
        }


@dataclass(frozen=True)
class QuestionRecord:
    """One question with its fixed-size option list and correct answer."""
    text: str
    options: tuple[str, ...]
    correct_answer: str

    @property
    def correct_index(self) -> int:
        """Position of the correct answer in options."""
        return self.options.index(self.correct_answer)

    def is_correct(self, option_text: str) -> bool:
        """Exact string comparison against the designated answer."""
        return option_text == self.correct_answer

    def to_dict(self) -> dict:
        return {
            "question": self.text,
            "options": list(self.options),
            "correct_answer": self.correct_answer,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuestionRecord":
        return cls(
            text=data["question"],
            options=tuple(data["options"]),
            correct_answer=data["correct_answer"],
        )


@dataclass(frozen=True)
class QuizDocument:
    """
    Normalized quiz document.

    Produced once per generation attempt and never mutated afterwards.
    """
    questions: tuple[QuestionRecord, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self):
        return iter(self.questions)

    def to_dict(self) -> dict:
        return {"questions": [q.to_dict() for q in self.questions]}

    @classmethod
    def from_dict(cls, data: dict) -> "QuizDocument":
        return cls(questions=tuple(QuestionRecord.from_dict(q) for q in data.get("questions", [])))

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class Valid:
    """Generated text was repaired into a document."""
    document: QuizDocument

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Malformed:
    """Generated text could not be turned into a document."""
    reason: str

    @property
    def ok(self) -> bool:
        return False


ParseOutcome = Union[Valid, Malformed]
