"""
Quiz document normalizer

Turns unreliable generated text into a quiz document that is guaranteed to
have the requested shape. For every question, after normalization:

- options has exactly option_count entries
- options has no duplicates (exact, case-sensitive)
- correct_answer is one of the options

Correctness membership and cardinality are enforced mechanically here;
the generator is never asked again.
"""

import json
import logging
import re
from typing import Any, Optional

from ..errors import MalformedDocument
from .fallback import placeholder_option
from .schema import QuizDocument, QuestionRecord, ParseOutcome, Valid, Malformed

logger = logging.getLogger(__name__)

# Broken generations sometimes contain raw control characters
_CONTROL_CHARS = re.compile(r"[\x00-\x19]+")


def extract_json_text(raw: str) -> Optional[str]:
    """
    Keep only the outermost { ... } pair, dropping any surrounding code
    fence or commentary. Backticks inside the object are content.

    Returns:
        The candidate JSON object text, or None if there is no object at all
    """
    s = _CONTROL_CHARS.sub(" ", raw or "")

    start = s.find("{")
    end = s.rfind("}")
    if start == -1 or end < start:
        return None
    return s[start:end + 1]


def repair_options(entry: dict, option_count: int, question_index: int) -> tuple[list[str], str]:
    """
    Repair one question's options and correct answer.

    Args:
        entry: Raw question object from the generated document
        option_count: Required number of options
        question_index: 0-based position of the question (for placeholder labels)

    Returns:
        Tuple of (options, correct_answer)
    """
    raw_options = entry.get("options")
    if not isinstance(raw_options, list):
        raw_options = []

    # Strings only, trimmed, no empties
    options = [o.strip() for o in raw_options if isinstance(o, str)]
    options = [o for o in options if o]

    correct = entry.get("correct_answer")
    correct = correct.strip() if isinstance(correct, str) else ""

    # The generator sometimes leaves the right answer out of its own list
    if correct and correct not in options:
        logger.debug(f"Question {question_index + 1}: correct answer missing from options, inserting it")
        options.insert(0, correct)

    # Deduplicate while preserving order
    seen = set()
    unique = []
    for o in options:
        if o not in seen:
            seen.add(o)
            unique.append(o)
    options = unique

    if len(options) > option_count:
        logger.debug(f"Question {question_index + 1}: truncating {len(options)} options to {option_count}")
        options = options[:option_count]

    position = len(options)
    while len(options) < option_count:
        label = placeholder_option(position, question_index)
        position += 1
        if label not in options:
            options.append(label)

    # Membership wins over truncation order
    if correct and correct not in options:
        logger.warning(f"Question {question_index + 1}: correct answer was truncated away, forcing it into slot 1")
        options[0] = correct

    if not correct:
        logger.warning(f"Question {question_index + 1}: no correct answer given, defaulting to the first option")
        correct = options[0]

    return options, correct


def try_normalize(raw_text: str, option_count: int) -> ParseOutcome:
    """
    Normalize generated text without raising.

    Args:
        raw_text: Raw output of the text generation service
        option_count: Required number of options per question

    Returns:
        Valid(document) or Malformed(reason)
    """
    if option_count < 1:
        raise ValueError(f"option_count must be at least 1, got {option_count}")

    text = extract_json_text(raw_text)
    if text is None:
        return Malformed("No JSON object found in generated text")

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        return Malformed(f"Generated text is not valid JSON: {e}")

    if not isinstance(data, dict):
        return Malformed("Generated JSON must be an object")

    entries = data.get("questions")
    if not isinstance(entries, list):
        return Malformed("Generated JSON has no 'questions' array")
    if not entries:
        return Malformed("Generated JSON has an empty 'questions' array")

    questions = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning(f"Question {index + 1} is not an object, skipping it")
            continue

        text_value = entry.get("question")
        question_text = text_value.strip() if isinstance(text_value, str) else ""

        options, correct = repair_options(entry, option_count, index)
        questions.append(QuestionRecord(
            text=question_text,
            options=tuple(options),
            correct_answer=correct,
        ))

    if not questions:
        return Malformed("No question objects found in 'questions' array")

    return Valid(QuizDocument(questions=tuple(questions)))


def normalize(raw_text: str, option_count: int) -> QuizDocument:
    """
    Normalize generated text into a quiz document.

    Raises:
        MalformedDocument: When no usable document can be recovered
    """
    outcome = try_normalize(raw_text, option_count)
    if isinstance(outcome, Malformed):
        raise MalformedDocument(outcome.reason)
    return outcome.document
