"""
Command-line interface for quickquiz

Generates a quiz with an AI model, repairs it, and creates it in the
remote quiz store.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .config import config, Config
from .errors import GenerationFailed, MissingCredential, MalformedDocument, IngestionError
from .ingest import IngestionResult
from .pipeline import QuizPipeline, PipelineResult, PipelineStatus
from .providers import get_provider
from .quiz.fallback import synthesize
from .quiz.normalizer import try_normalize
from .quiz.prompts import format_quiz_prompt
from .quiz.schema import QuizSpec, Malformed
from .session import SessionContext

GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
RESET = "\033[0m"


def format_errors(errors: list[IngestionError]) -> str:
    """Render per-item failures as a list."""
    lines = ["The following errors were found:"]
    for error in errors:
        lines.append(f"  - {error.describe()}")
    return "\n".join(lines)


def format_blocking(message: str) -> str:
    """Render a fatal error as a single message."""
    return f"{RED}✗ {message}{RESET}"


def format_result_terminal(result: PipelineResult) -> str:
    """Format a pipeline result for terminal display."""
    ingestion: IngestionResult = result.ingestion

    if result.status == PipelineStatus.FAILED:
        fatal = ingestion.fatal_error
        return format_blocking(fatal.describe() if fatal else "Quiz could not be created")

    color = GREEN if result.status == PipelineStatus.COMPLETE else YELLOW
    lines = [
        f"{color}✓ Quiz created (id {ingestion.quiz_id}): {result.spec.title}{RESET}",
        f"  Topic: {result.spec.topic}",
        f"  Questions: {len(ingestion.questions)}/{len(result.generated.document)}",
        f"  Options: {len(ingestion.options)}",
    ]
    for warning in result.warnings:
        lines.append(f"{YELLOW}  Placeholder questions were saved instead of the generated quiz{RESET}")
        lines.append(f"    {warning.describe()}")
    if ingestion.skipped_questions:
        skipped = ", ".join(str(i + 1) for i in ingestion.skipped_questions)
        lines.append(f"  Skipped questions without options: {skipped}")

    lines.append("")
    for question in ingestion.questions:
        lines.append(f"  {question.question_index + 1}. {question.text}")
        for option in ingestion.options:
            if option.question_id == question.id:
                mark = "*" if option.is_correct else " "
                lines.append(f"     [{mark}] {option.text}")

    if ingestion.errors:
        lines.append("")
        lines.append(format_errors(ingestion.errors))

    return "\n".join(lines)


def read_raw_text(source: str) -> str:
    """Read raw generated text from a file path, or stdin for '-'."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="quickquiz",
        description="Generate multiple-choice quizzes with AI and save them to the quiz store",
        epilog='Example: quickquiz create "Planets" --topic "the solar system" --questions 5 --options 4'
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Prompt command
    prompt_parser = subparsers.add_parser("prompt", help="Print the generation prompt")
    prompt_parser.add_argument("--topic", required=True, help="Quiz topic")
    prompt_parser.add_argument("--questions", type=int, default=2, help="Number of questions (default: 2)")
    prompt_parser.add_argument("--options", type=int, default=2, help="Options per question (default: 2)")

    # Normalize command
    normalize_parser = subparsers.add_parser("normalize", help="Repair raw generated quiz text")
    normalize_parser.add_argument("source", help="File with raw generated text, or - for stdin")
    normalize_parser.add_argument("--options", type=int, required=True, help="Options per question")
    normalize_parser.add_argument(
        "--fallback-topic",
        help="Emit a placeholder quiz about this topic if the text cannot be repaired"
    )
    normalize_parser.add_argument(
        "--questions",
        type=int,
        default=2,
        help="Questions in the placeholder quiz (default: 2)"
    )

    # Create command
    create_parser = subparsers.add_parser("create", help="Generate a quiz and save it")
    create_parser.add_argument("title", help="Quiz title")
    create_parser.add_argument("--topic", required=True, help="Quiz topic or subject")
    create_parser.add_argument("--description", help="Quiz description (default: based on topic)")
    create_parser.add_argument("--questions", type=int, default=2, help="Number of questions (default: 2)")
    create_parser.add_argument("--options", type=int, default=2, help="Options per question (default: 2)")
    create_parser.add_argument(
        "--provider",
        choices=["openai", "claude", "mock"],
        help=f"Text generation provider (default: {config.generation.provider}; cannot be combined with --mock)"
    )
    create_parser.add_argument("--model", help="Model override")
    create_parser.add_argument("--token", help="Session credential (default: $QUICKQUIZ_TOKEN)")
    create_parser.add_argument("--api-url", help="Quiz store base URL (default: $QUICKQUIZ_API_URL)")
    create_parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock AI and an in-memory store (no API keys or server needed)"
    )
    create_parser.add_argument(
        "--sequential",
        action="store_true",
        help="Create one question and one option at a time"
    )
    create_parser.add_argument("--json", action="store_true", help="Output result as JSON")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "prompt":
        print(format_quiz_prompt(args.topic, args.questions, args.options))

    elif args.command == "normalize":
        try:
            raw = read_raw_text(args.source)
        except OSError as e:
            print(f"Could not read {args.source}: {e}", file=sys.stderr)
            sys.exit(1)

        try:
            outcome = try_normalize(raw, args.options)
        except ValueError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)

        if isinstance(outcome, Malformed):
            error = MalformedDocument(outcome.reason).to_error()
            if not args.fallback_topic:
                print(format_blocking(error.describe()), file=sys.stderr)
                sys.exit(1)
            print(f"{error.describe()}, using placeholder quiz", file=sys.stderr)
            try:
                document = synthesize(args.fallback_topic, args.questions, args.options)
            except ValueError as e:
                print(str(e), file=sys.stderr)
                sys.exit(1)
        else:
            document = outcome.document

        print(json.dumps(document.to_dict(), indent=2))

    elif args.command == "create":
        if args.mock and args.provider not in (None, "mock"):
            create_parser.error(f"--mock always uses the mock provider, drop --provider {args.provider}")

        cfg = Config.mock_mode() if args.mock else Config()
        if args.sequential:
            cfg.ingest = Config.sequential_mode().ingest

        try:
            spec = QuizSpec(
                title=args.title,
                description=args.description or f"A quiz about {args.topic}",
                topic=args.topic,
                question_count=args.questions,
                option_count=args.options,
            )
        except ValueError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)

        env_session = SessionContext.from_env()
        credential = args.token or env_session.credential
        if args.mock and not credential:
            credential = "mock-session"
        session = SessionContext(credential=credential, base_url=args.api_url or env_session.base_url)

        async def run_create():
            provider = get_provider(args.provider) if args.provider and not args.mock else None
            pipeline = QuizPipeline(provider=provider, model=args.model, use_mock=args.mock, cfg=cfg)
            return await pipeline.run(spec, session)

        try:
            result = asyncio.run(run_create())
        except (MissingCredential, GenerationFailed) as e:
            print(format_blocking(e.to_error().describe()), file=sys.stderr)
            sys.exit(1)

        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            print(format_result_terminal(result))

        if result.status == PipelineStatus.FAILED:
            sys.exit(1)


if __name__ == "__main__":
    main()
