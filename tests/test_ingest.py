"""
Tests for the ingestion orchestrator.
"""

import pytest

from quickquiz.errors import ErrorKind, QuizCreationFailed
from quickquiz.ingest import IngestionOrchestrator, IngestionResult, QuizMeta, ingest
from quickquiz.quiz.fallback import synthesize
from quickquiz.quiz.schema import QuizSpec, QuizDocument, QuestionRecord
from quickquiz.store.base import StoreResponse
from quickquiz.store.memory import InMemoryStore


META = QuizMeta(
    title="Basics",
    description="A little of everything",
    topic="general knowledge",
    question_count=2,
    option_count=2,
    prompt="This is a quiz about general knowledge.",
)


@pytest.fixture
def document():
    return QuizDocument(questions=(
        QuestionRecord(text="2+2?", options=("4", "5"), correct_answer="4"),
        QuestionRecord(text="Capital of France?", options=("Lyon", "Paris"), correct_answer="Paris"),
    ))


@pytest.fixture
def store():
    return InMemoryStore()


class TestQuizMeta:
    """Tests for QuizMeta."""

    def test_from_spec(self):
        """Test meta fields come from the QuizSpec plus a summary prompt."""
        spec = QuizSpec(title="T", description="D", topic="bees", question_count=3, option_count=5)
        meta = QuizMeta.from_spec(spec)

        assert meta.title == "T"
        assert meta.question_count == 3
        assert meta.option_count == 5
        assert meta.prompt == "This is a quiz about bees."


class TestSuccessfulIngest:
    """Tests for the happy path."""

    @pytest.mark.asyncio
    async def test_all_records_created(self, document, store):
        """Test one quiz, every question and every option are created."""
        result = await IngestionOrchestrator(store).ingest(document, META)

        assert result.success
        assert result.quiz_id == 1
        assert result.errors == []
        assert len(result.questions) == 2
        assert len(result.options) == 4
        assert len(store.quizzes) == 1
        assert len(store.questions) == 2
        assert len(store.options) == 4

    @pytest.mark.asyncio
    async def test_quiz_payload(self, document, store):
        """Test the quiz request carries the metadata and the document."""
        await IngestionOrchestrator(store).ingest(document, META)

        kind, payload = store.calls[0]
        assert kind == "quiz"
        assert payload["title"] == "Basics"
        assert payload["numberOfQuestions"] == 2
        assert payload["numberOfOptions"] == 2
        assert payload["prompt"] == META.prompt
        assert payload["quizJSON"] == document.to_json()

    @pytest.mark.asyncio
    async def test_correct_flags(self, document, store):
        """Test exactly the designated answer is tagged correct."""
        result = await IngestionOrchestrator(store).ingest(document, META)

        flags = {o.text: o.is_correct for o in result.options}
        assert flags == {"4": True, "5": False, "Lyon": False, "Paris": True}

        stored = {o["optionText"]: o["isCorrect"] for o in store.options.values()}
        assert stored == flags

    @pytest.mark.asyncio
    async def test_one_correct_per_question(self, store):
        """Test well-formed documents give one correct option per question."""
        result = await IngestionOrchestrator(store).ingest(synthesize("owls", 4, 3), META)

        for question in result.questions:
            stored = store.options_for(question.id)
            assert len(stored) == 3
            assert sum(o["isCorrect"] for o in stored) == 1

    @pytest.mark.asyncio
    async def test_options_reference_their_question(self, document, store):
        """Test every option points at its own question's id."""
        result = await IngestionOrchestrator(store).ingest(document, META)

        by_index = {q.question_index: q.id for q in result.questions}
        for option in result.options:
            assert option.question_id == by_index[option.question_index]

        for question in result.questions:
            assert question.quiz_id == result.quiz_id

    @pytest.mark.asyncio
    async def test_results_in_document_order(self, store):
        """Test results are ordered by document position, not completion."""
        store.delay_seconds = 0.001
        result = await IngestionOrchestrator(store).ingest(synthesize("frogs", 5, 3), META)

        assert [q.question_index for q in result.questions] == [0, 1, 2, 3, 4]
        assert [(o.question_index, o.option_index) for o in result.options] == [
            (q, o) for q in range(5) for o in range(3)
        ]

    @pytest.mark.asyncio
    async def test_convenience_function(self, document, store):
        """Test the module-level ingest()."""
        result = await ingest(document, META, store, max_concurrent_questions=1)

        assert result.success
        assert len(result.options) == 4

    @pytest.mark.asyncio
    async def test_to_dict(self, document, store):
        """Test result serialization."""
        result = await IngestionOrchestrator(store).ingest(document, META)
        data = result.to_dict()

        assert data["quiz_id"] == 1
        assert data["success"] is True
        assert data["questions_created"] == 2
        assert data["options_created"] == 4
        assert data["errors"] == []


class TestQuizCreationFailure:
    """Tests for failures of the quiz create call."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode", ["validation", "status", "transport", "no_id"])
    async def test_nothing_else_attempted(self, document, mode):
        """Test a failed quiz create stops ingestion with one fatal error."""
        store = InMemoryStore(fail_on={"Basics": mode})
        result = await IngestionOrchestrator(store).ingest(document, META)

        assert not result.success
        assert result.quiz is None
        assert result.questions == []
        assert result.options == []
        assert len(result.errors) == 1
        assert result.errors[0].kind == ErrorKind.QUIZ_CREATION_FAILED
        assert result.errors[0].fatal
        assert [kind for kind, _ in store.calls] == ["quiz"]

    @pytest.mark.asyncio
    async def test_created_without_id(self, document):
        """Test a 201 without an identifier is reported as such."""
        store = InMemoryStore(fail_on={"Basics": "no_id"})
        result = await IngestionOrchestrator(store).ingest(document, META)

        assert result.errors[0].message == "Quiz created but no identifier was returned"
        assert result.errors[0].status_code == 201

    @pytest.mark.asyncio
    async def test_validation_messages_kept(self, document):
        """Test 400 messages are carried on the error."""
        store = InMemoryStore(fail_on={"Basics": "validation"})
        result = await IngestionOrchestrator(store).ingest(document, META)

        error = result.errors[0]
        assert error.message == "Quiz was rejected by the store"
        assert error.status_code == 400
        assert error.validation_messages == ("Rejected quiz: Basics",)

    @pytest.mark.asyncio
    async def test_unexpected_status(self, document):
        """Test other statuses are reported with their code."""
        store = InMemoryStore(fail_on={"Basics": "status"})
        result = await IngestionOrchestrator(store).ingest(document, META)

        assert result.errors[0].message == "Unexpected status code: 500"
        assert result.errors[0].status_code == 500

    @pytest.mark.asyncio
    async def test_store_side_validation(self, document, store):
        """Test the store's own validation rejects an empty description."""
        meta = QuizMeta(title="T", description="  ", topic="x", question_count=2, option_count=2, prompt="p")
        result = await IngestionOrchestrator(store).ingest(document, meta)

        assert not result.success
        assert "Quiz description cannot be null or empty." in result.errors[0].validation_messages

    @pytest.mark.asyncio
    async def test_raise_for_fatal(self, document):
        """Test raise_for_fatal surfaces the fatal error."""
        store = InMemoryStore(fail_on={"Basics": "transport"})
        result = await IngestionOrchestrator(store).ingest(document, META)

        with pytest.raises(QuizCreationFailed) as exc_info:
            result.raise_for_fatal()

        assert exc_info.value.error.kind == ErrorKind.QUIZ_CREATION_FAILED

    def test_raise_for_fatal_noop(self):
        """Test nothing is raised without a fatal error."""
        IngestionResult().raise_for_fatal()


class TestPartialFailures:
    """Tests for per-question and per-option failures."""

    @pytest.mark.asyncio
    async def test_failed_question_skips_its_options(self, document):
        """Test options of a failed question are never attempted."""
        store = InMemoryStore(fail_on={"2+2?": "validation"})
        result = await IngestionOrchestrator(store).ingest(document, META)

        assert result.success
        assert len(result.questions) == 1
        assert [o.text for o in result.options] == ["Lyon", "Paris"]

        option_texts = [p["optionText"] for kind, p in store.calls if kind == "option"]
        assert "4" not in option_texts
        assert "5" not in option_texts

        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.kind == ErrorKind.QUESTION_CREATION_FAILED
        assert error.question_index == 0
        assert error.validation_messages == ("Rejected question: 2+2?",)
        assert not error.fatal

    @pytest.mark.asyncio
    async def test_failed_option_isolated(self, document):
        """Test one option failing leaves its siblings alone."""
        store = InMemoryStore(fail_on={"5": "status"})
        result = await IngestionOrchestrator(store).ingest(document, META)

        assert result.success
        assert len(result.questions) == 2
        assert sorted(o.text for o in result.options) == ["4", "Lyon", "Paris"]

        error = result.errors[0]
        assert error.kind == ErrorKind.OPTION_CREATION_FAILED
        assert error.question_index == 0
        assert error.option_index == 1
        assert error.status_code == 500
        assert error.describe() == "Question 1, option 2: Unexpected status code: 500"
        assert error.cause == ErrorKind.UNEXPECTED_REMOTE_STATUS

    @pytest.mark.asyncio
    async def test_option_transport_error(self, document):
        """Test transport failures are collected with their message."""
        store = InMemoryStore(fail_on={"Paris": "transport"})
        result = await IngestionOrchestrator(store).ingest(document, META)

        error = result.errors[0]
        assert error.kind == ErrorKind.OPTION_CREATION_FAILED
        assert error.question_index == 1
        assert "Connection refused" in error.message
        assert error.cause is None

    @pytest.mark.asyncio
    async def test_errors_in_document_order(self, store):
        """Test collected errors follow document order."""
        document = synthesize("bats", 4, 2)
        store.fail_on = {
            "Placeholder option B for question 3": "validation",
            "Placeholder option A for question 1": "status",
            "Placeholder question 4 about bats": "no_id",
        }
        result = await IngestionOrchestrator(store).ingest(document, META)

        assert [(e.question_index, e.option_index) for e in result.errors] == [(0, 0), (2, 1), (3, None)]
        assert [e.kind for e in result.errors] == [
            ErrorKind.OPTION_CREATION_FAILED,
            ErrorKind.OPTION_CREATION_FAILED,
            ErrorKind.QUESTION_CREATION_FAILED,
        ]

    @pytest.mark.asyncio
    async def test_question_without_options_skipped(self, store):
        """Test a question with no options is not created."""
        document = QuizDocument(questions=(
            QuestionRecord(text="Empty?", options=(), correct_answer=""),
            QuestionRecord(text="Full?", options=("a",), correct_answer="a"),
        ))
        result = await IngestionOrchestrator(store).ingest(document, META)

        assert result.skipped_questions == [0]
        assert result.errors == []
        assert [q.text for q in result.questions] == ["Full?"]
        assert all(p["questionText"] != "Empty?" for kind, p in store.calls if kind == "question")

    @pytest.mark.asyncio
    async def test_unrecognized_identifiers(self, document):
        """Test zero and boolean ids do not count as created."""

        class OddIdStore(InMemoryStore):
            async def create_question(self, request):
                await super().create_question(request)
                return StoreResponse(201, {"questionId": 0})

        result = await IngestionOrchestrator(OddIdStore()).ingest(document, META)

        assert result.success
        assert result.questions == []
        assert result.options == []
        assert len(result.errors) == 2
        assert all(e.message == "Question created but no identifier was returned" for e in result.errors)


class TestConcurrency:
    """Tests for bounded concurrency."""

    @pytest.mark.asyncio
    async def test_sequential_limits(self):
        """Test limits of one allow at most one question and one option create at a time."""
        store = InMemoryStore(delay_seconds=0.001)
        orchestrator = IngestionOrchestrator(store, max_concurrent_questions=1, max_concurrent_options=1)

        result = await orchestrator.ingest(synthesize("moss", 4, 3), META)

        assert len(result.options) == 12
        assert store.max_in_flight <= 2

    @pytest.mark.asyncio
    async def test_limits_respected(self):
        """Test in-flight creates never exceed the combined limits."""
        store = InMemoryStore(delay_seconds=0.001)
        orchestrator = IngestionOrchestrator(store, max_concurrent_questions=2, max_concurrent_options=3)

        result = await orchestrator.ingest(synthesize("ferns", 8, 4), META)

        assert len(result.options) == 32
        assert store.max_in_flight <= 5

    @pytest.mark.asyncio
    async def test_siblings_run_concurrently(self):
        """Test sibling creates overlap when limits allow."""
        store = InMemoryStore(delay_seconds=0.005)
        orchestrator = IngestionOrchestrator(store, max_concurrent_questions=4, max_concurrent_options=8)

        await orchestrator.ingest(synthesize("kelp", 4, 4), META)

        assert store.max_in_flight > 1

    def test_limits_default_from_config(self, store):
        """Test missing limits fall back to configuration."""
        from quickquiz.config import config

        orchestrator = IngestionOrchestrator(store)

        assert orchestrator.max_concurrent_questions == config.ingest.max_concurrent_questions
        assert orchestrator.max_concurrent_options == config.ingest.max_concurrent_options

    @pytest.mark.parametrize("questions,options", [(0, 8), (4, 0), (-1, -1)])
    def test_limits_below_one_rejected(self, store, questions, options):
        """Test a limit below one is an error rather than a silent clamp."""
        with pytest.raises(ValueError, match="at least 1"):
            IngestionOrchestrator(store, max_concurrent_questions=questions, max_concurrent_options=options)
