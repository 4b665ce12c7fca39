"""Domain models for the quiz service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Question:
    """Multiple-choice question with exactly four options."""

    id: str
    text: str
    options: list[str]
    correct_option_index: int


@dataclass(slots=True)
class Quiz:
    """A titled, ordered set of questions. Never edited after creation."""

    id: str
    title: str
    questions: list[Question]
    description: str = ""
    created_at: datetime = field(default_factory=utc_now)

    @property
    def question_count(self) -> int:
        return len(self.questions)


@dataclass(slots=True)
class QuizResult:
    """One completed attempt at a quiz."""

    id: str
    quiz_id: str
    user_name: str
    answers: list[int]
    score: int
    total_questions: int  # Snapshot taken at submission time
    time_elapsed: int
    submitted_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class QuestionDraft:
    """Unvalidated question input coming from the quiz creator."""

    text: str
    options: list[str]
    correct_option_index: int = 0
    id: str | None = None


@dataclass(slots=True)
class QuizDraft:
    """Unvalidated quiz input coming from the quiz creator."""

    title: str
    questions: list[QuestionDraft]
    description: str | None = None
