"""Service for the state of one respondent's in-progress attempt."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
import time
from uuid import uuid4

from quizshare.constants.quiz_constants import UNANSWERED
from quizshare.core.errors import AttemptStateError, QuizValidationError
from quizshare.core.models import Quiz, QuizResult, utc_now
from quizshare.core.scoring import score_answers


class AttemptTimer:
    """Whole-second elapsed counter that only advances while running.

    Reading it is equivalent to a one-second tick incrementing a counter:
    partial seconds are never counted.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._started_at: float | None = None
        self._stopped_at: float | None = None

    def start(self) -> None:
        self._started_at = self._clock()
        self._stopped_at = None

    def stop(self) -> None:
        if self._started_at is not None and self._stopped_at is None:
            self._stopped_at = self._clock()

    def is_running(self) -> bool:
        return self._started_at is not None and self._stopped_at is None

    @property
    def elapsed_seconds(self) -> int:
        if self._started_at is None:
            return 0
        end = self._stopped_at if self._stopped_at is not None else self._clock()
        return max(0, int(end - self._started_at))


class AttemptSession:
    """Manages the answers and timing of a single attempt."""

    def __init__(
        self,
        quiz: Quiz,
        user_name: str,
        clock: Callable[[], float] = time.monotonic,
        attempt_id: str | None = None,
    ) -> None:
        cleaned_name = (user_name or "").strip()
        if not cleaned_name:
            raise QuizValidationError("Please enter your name to start the quiz.")
        if quiz.question_count == 0:
            raise QuizValidationError("This quiz has no questions to answer.")

        self.id: str = attempt_id or uuid4().hex
        self._quiz = quiz
        self._user_name = cleaned_name
        self._answers: list[int] = [UNANSWERED] * quiz.question_count
        self._current_index: int = 0
        self._started_at: datetime = utc_now()
        self._finished: bool = False
        self._result: QuizResult | None = None
        self._clock = clock
        self._opened_at: float = clock()
        self._timer = AttemptTimer(clock)
        self._timer.start()

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def user_name(self) -> str:
        return self._user_name

    @property
    def started_at(self) -> datetime:
        return self._started_at

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def elapsed_seconds(self) -> int:
        return self._timer.elapsed_seconds

    @property
    def age_seconds(self) -> float:
        """Seconds since the attempt was opened, including after it finished."""
        return self._clock() - self._opened_at

    def is_finished(self) -> bool:
        return self._finished

    def get_answers(self) -> list[int]:
        return list(self._answers)

    def answered_count(self) -> int:
        return sum(1 for answer in self._answers if answer != UNANSWERED)

    def select_answer(self, question_index: int, option_index: int) -> None:
        self._ensure_open()
        if not 0 <= question_index < len(self._answers):
            raise QuizValidationError(f"Question index {question_index} out of range.")
        option_count = len(self._quiz.questions[question_index].options)
        if not 0 <= option_index < option_count:
            raise QuizValidationError(
                f"Option index must be between 0 and {option_count - 1}."
            )
        self._answers[question_index] = option_index
        self._current_index = question_index

    def next_question(self) -> int:
        """Advance to the next question; the current one must be answered first."""
        self._ensure_open()
        if self._answers[self._current_index] == UNANSWERED:
            raise AttemptStateError("Answer the current question before moving on.")
        if self._current_index < len(self._answers) - 1:
            self._current_index += 1
        return self._current_index

    def previous_question(self) -> int:
        self._ensure_open()
        if self._current_index > 0:
            self._current_index -= 1
        return self._current_index

    def submit(self, result_id: str | None = None) -> QuizResult:
        """Stop the timer and build the result record. Every question must be answered.

        Calling it again returns the same result, so a submission whose save
        failed can be retried without rescoring or a new id.
        """
        if self._result is not None:
            return self._result
        self._ensure_open()
        missing = [i + 1 for i, answer in enumerate(self._answers) if answer == UNANSWERED]
        if missing:
            raise AttemptStateError(
                f"Unanswered question(s): {', '.join(str(n) for n in missing)}."
            )
        self._timer.stop()
        self._finished = True
        self._result = QuizResult(
            id=result_id or uuid4().hex,
            quiz_id=self._quiz.id,
            user_name=self._user_name,
            answers=list(self._answers),
            score=score_answers(self._quiz, self._answers),
            total_questions=self._quiz.question_count,
            time_elapsed=self._timer.elapsed_seconds,
            submitted_at=utc_now(),
        )
        return self._result

    def abandon(self) -> None:
        self._timer.stop()
        self._finished = True

    def _ensure_open(self) -> None:
        if self._finished:
            raise AttemptStateError("This attempt is already finished.")
