"""
Prompt templates for quiz generation

The generation prompt asks for the whole output to be a single JSON
document of a fixed shape. The normalizer assumes the model follows it
loosely, not exactly.
"""

QUIZ_SYSTEM_PROMPT = "You are a helpful assistant."

QUIZ_GENERATE_PROMPT = """You are generating a multiple-choice quiz in STRICT JSON ONLY (no markdown, no backticks).

Requirements:
- The quiz must have EXACTLY {question_count} questions.
- Each question must have:
  - "question": string
  - "options": an array of EXACTLY {option_count} answer choices (no more, no fewer).
  - "correct_answer": a string that MUST be one of the elements in "options".

Rules:
- If you are unsure about distractor answers, invent plausible incorrect options, but always return exactly {option_count} options.
- Do NOT include explanations.
- The top-level JSON must be:
  {{
    "questions": [
      {{
        "question": "...",
        "options": [{option_placeholders}],
        "correct_answer": "..."
      }},
      ...
    ]
  }}

The quiz topic is: {topic}."""

QUIZ_SUMMARY_PROMPT = "This is a quiz about {topic}."


def format_quiz_prompt(topic: str, question_count: int, option_count: int) -> str:
    """
    Format the quiz generation prompt.

    Args:
        topic: Subject of the quiz
        question_count: Number of questions to ask for
        option_count: Number of options per question to ask for

    Returns:
        Formatted prompt string
    """
    return QUIZ_GENERATE_PROMPT.format(
        topic=topic.strip(),
        question_count=question_count,
        option_count=option_count,
        option_placeholders=", ".join('"..."' for _ in range(option_count)),
    )


def format_quiz_summary(topic: str) -> str:
    """Short description stored alongside the quiz record."""
    return QUIZ_SUMMARY_PROMPT.format(topic=topic.strip())
