"""
Fallback quiz synthesizer

Builds a clearly-labelled placeholder quiz of the requested shape, so the
pipeline always has something structurally valid to persist when the
generated text is unusable.
"""

from .schema import QuizDocument, QuestionRecord


def position_label(position: int) -> str:
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA', ..."""
    label = ""
    n = position + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


def placeholder_option(position: int, question_index: int) -> str:
    """Placeholder distractor text for a slot of a (0-based) question."""
    return f"Placeholder option {position_label(position)} for question {question_index + 1}"


def placeholder_question(question_index: int, topic: str) -> str:
    return f"Placeholder question {question_index + 1} about {topic}"


def synthesize(topic: str, question_count: int, option_count: int) -> QuizDocument:
    """
    Build a placeholder quiz document.

    Every question gets option_count distinct placeholder options and the
    first one is designated correct.

    Args:
        topic: Quiz topic, used in the question text
        question_count: Number of questions
        option_count: Number of options per question

    Returns:
        QuizDocument with question_count questions

    Raises:
        ValueError: If either count is below 1
    """
    if question_count < 1 or option_count < 1:
        raise ValueError(
            f"question_count and option_count must be at least 1, got {question_count} and {option_count}"
        )

    questions = []
    for i in range(question_count):
        options = tuple(placeholder_option(j, i) for j in range(option_count))
        questions.append(QuestionRecord(
            text=placeholder_question(i, topic),
            options=options,
            correct_answer=options[0],
        ))
    return QuizDocument(questions=tuple(questions))
