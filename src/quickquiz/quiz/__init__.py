"""
Quiz generation and normalization

Prompt building, repair of generated quiz documents, and the placeholder
fallback used when repair is impossible.
"""

from .schema import (
    QuizSpec,
    QuestionRecord,
    QuizDocument,
    ParseOutcome,
    Valid,
    Malformed,
)
from .prompts import format_quiz_prompt, format_quiz_summary
from .normalizer import normalize, try_normalize
from .fallback import synthesize
from .generator import QuizGenerator, GeneratedQuiz

__all__ = [
    "QuizSpec",
    "QuestionRecord",
    "QuizDocument",
    "ParseOutcome",
    "Valid",
    "Malformed",
    "format_quiz_prompt",
    "format_quiz_summary",
    "normalize",
    "try_normalize",
    "synthesize",
    "QuizGenerator",
    "GeneratedQuiz",
]
