import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient

from quizshare.core.models import Question, QuestionDraft, Quiz, QuizDraft, QuizResult
from quizshare.core.qr_codes import PlaceholderQrEncoder, ScannableQrEncoder
from quizshare.core.quiz_manager import QuizManager
from quizshare.core.storage.memory_store import InMemoryQuizStore, InMemoryResultStore
from quizshare.server.api_server import create_api_app

PUBLIC_ORIGIN = "http://quiz.test"


class FakeClock:
    """Manually advanced replacement for ``time.monotonic``."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_question(index: int, correct: int = 0) -> Question:
    return Question(
        id=f"q{index}",
        text=f"Question {index}?",
        options=[f"Option {index}.{n}" for n in range(4)],
        correct_option_index=correct,
    )


def make_result(
    score: int,
    time_elapsed: int,
    user_name: str = "Player",
    quiz_id: str = "quiz-1",
    total_questions: int = 10,
    result_id: str | None = None,
) -> QuizResult:
    return QuizResult(
        id=result_id or f"{user_name}-{score}-{time_elapsed}",
        quiz_id=quiz_id,
        user_name=user_name,
        answers=[0] * total_questions,
        score=score,
        total_questions=total_questions,
        time_elapsed=time_elapsed,
        submitted_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_quiz():
    """Three questions whose correct options are 1, 2 and 3."""
    return Quiz(
        id="quiz-1",
        title="Capitals",
        description="A short *geography* quiz",
        questions=[make_question(1, correct=1), make_question(2, correct=2), make_question(3, correct=3)],
        created_at=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_draft():
    return QuizDraft(
        title="  Capitals  ",
        description="European capitals",
        questions=[
            QuestionDraft(text="Capital of France?", options=["London", "Paris", "Berlin", "Madrid"], correct_option_index=1),
            QuestionDraft(text="Capital of Spain?", options=["Madrid", "Rome", "Lisbon", "Oslo"], correct_option_index=0),
        ],
    )


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def quiz_store():
    return InMemoryQuizStore()


@pytest.fixture
def result_store():
    return InMemoryResultStore()


@pytest.fixture
def quiz_manager(quiz_store, result_store, fake_clock):
    return QuizManager(
        quiz_store=quiz_store,
        result_store=result_store,
        qr_encoder=ScannableQrEncoder(),
        clock=fake_clock,
    )


@pytest.fixture
def placeholder_manager(quiz_store, result_store, fake_clock):
    return QuizManager(
        quiz_store=quiz_store,
        result_store=result_store,
        qr_encoder=PlaceholderQrEncoder(),
        clock=fake_clock,
    )


@pytest.fixture
def test_client(quiz_manager):
    """Fixture for FastAPI test client."""
    with TestClient(create_api_app(quiz_manager, public_origin=PUBLIC_ORIGIN)) as client:
        yield client


@pytest.fixture
def quiz_payload():
    return {
        "title": "Capitals",
        "description": "Know your **capitals**",
        "questions": [
            {"text": "Capital of France?", "options": ["London", "Paris", "Berlin", "Madrid"], "correct_option_index": 1},
            {"text": "Capital of Spain?", "options": ["Madrid", "Rome", "Lisbon", "Oslo"], "correct_option_index": 0},
        ],
    }
