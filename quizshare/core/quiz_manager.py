"""Business logic shared by the API: authoring, taking and reviewing quizzes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
from threading import Lock
import time

from quizshare.constants.quiz_constants import MAX_ATTEMPT_SECONDS
from quizshare.core.errors import (
    AttemptNotFoundError,
    AttemptStateError,
    QuizNotFoundError,
    StorageError,
)
from quizshare.core.models import Quiz, QuizDraft, QuizResult
from quizshare.core.qr_codes import ModuleMatrix, QrEncoder
from quizshare.core.services.attempt_session import AttemptSession
from quizshare.core.services.catalog import QuizSummary, summarize_quizzes
from quizshare.core.services.leaderboard import Leaderboard
from quizshare.core.services.quiz_builder import QuizBuilder
from quizshare.core.share_link import build_share_url, parse_share_url
from quizshare.core.storage.base import QuizStore, ResultStore

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ShareCode:
    url: str
    strategy: str
    modules: ModuleMatrix


class QuizManager:
    """Facade over the quiz and result stores, attempt sessions and share codes.

    Stores are injected so the same logic runs against any backend.
    """

    def __init__(
        self,
        quiz_store: QuizStore,
        result_store: ResultStore,
        qr_encoder: QrEncoder,
        builder: QuizBuilder | None = None,
        clock: Callable[[], float] = time.monotonic,
        max_attempt_seconds: float = MAX_ATTEMPT_SECONDS,
    ) -> None:
        self._lock = Lock()
        self._quizzes = quiz_store
        self._results = result_store
        self._qr_encoder = qr_encoder
        self._builder = builder or QuizBuilder()
        self._clock = clock
        self._max_attempt_seconds = max_attempt_seconds
        self._attempts: dict[str, AttemptSession] = {}
        self._saving: set[str] = set()

    # --- Authoring ---

    def create_quiz(self, draft: QuizDraft) -> Quiz:
        quiz = self._builder.build(draft)
        self._store_call("create quiz", self._quizzes.create, quiz)
        logger.info("Created quiz %s with %d question(s)", quiz.id, quiz.question_count)
        return quiz

    # --- Reading ---

    def get_quiz(self, quiz_id: str) -> Quiz:
        quiz = self._store_call("load quiz", self._quizzes.get, quiz_id)
        if quiz is None:
            raise QuizNotFoundError(quiz_id)
        return quiz

    def resolve_share_url(self, url: str) -> Quiz:
        quiz_id = parse_share_url(url)
        if quiz_id is None:
            raise QuizNotFoundError(url)
        return self.get_quiz(quiz_id)

    def list_quiz_summaries(self) -> list[QuizSummary]:
        quizzes = self._store_call("list quizzes", self._quizzes.list_all)
        results = self._store_call("list results", self._results.list_all)
        return summarize_quizzes(quizzes, results)

    def get_leaderboard(self, quiz_id: str) -> tuple[Quiz, Leaderboard]:
        quiz = self.get_quiz(quiz_id)
        results = self._store_call("list results", self._results.list_by_quiz_id, quiz_id)
        return quiz, Leaderboard(results, quiz.question_count)

    # --- Sharing ---

    def get_share_code(self, quiz_id: str, origin: str) -> ShareCode:
        quiz = self.get_quiz(quiz_id)
        url = build_share_url(origin, quiz.id)
        return ShareCode(url=url, strategy=self._qr_encoder.name, modules=self._qr_encoder.encode(url))

    def render_share_svg(self, quiz_id: str, origin: str) -> bytes | None:
        quiz = self.get_quiz(quiz_id)
        return self._qr_encoder.render_svg(build_share_url(origin, quiz.id))

    # --- Attempts ---

    def start_attempt(self, quiz_id: str, user_name: str) -> AttemptSession:
        quiz = self.get_quiz(quiz_id)
        attempt = AttemptSession(quiz, user_name, clock=self._clock)
        with self._lock:
            self._discard_stale_attempts()
            self._attempts[attempt.id] = attempt
        logger.info("Attempt %s started on quiz %s", attempt.id, quiz.id)
        return attempt

    def get_attempt(self, attempt_id: str) -> AttemptSession:
        with self._lock:
            attempt = self._attempts.get(attempt_id)
        if attempt is None:
            raise AttemptNotFoundError(attempt_id)
        return attempt

    def select_answer(self, attempt_id: str, question_index: int, option_index: int) -> AttemptSession:
        attempt = self.get_attempt(attempt_id)
        with self._lock:
            attempt.select_answer(question_index, option_index)
        return attempt

    def move_to_next_question(self, attempt_id: str) -> AttemptSession:
        attempt = self.get_attempt(attempt_id)
        with self._lock:
            attempt.next_question()
        return attempt

    def move_to_previous_question(self, attempt_id: str) -> AttemptSession:
        attempt = self.get_attempt(attempt_id)
        with self._lock:
            attempt.previous_question()
        return attempt

    def submit_attempt(self, attempt_id: str) -> QuizResult:
        """Score the attempt and persist its result.

        The attempt stays open for another submit until the result is saved.
        """
        attempt = self.get_attempt(attempt_id)
        with self._lock:
            if attempt_id in self._saving:
                raise AttemptStateError("This attempt is already being submitted.")
            result = attempt.submit()
            self._saving.add(attempt_id)
        try:
            self._store_call("save result", self._results.create, result)
        finally:
            with self._lock:
                self._saving.discard(attempt_id)
        with self._lock:
            self._attempts.pop(attempt_id, None)
        logger.info(
            "Attempt %s submitted: %d/%d in %ds",
            attempt_id,
            result.score,
            result.total_questions,
            result.time_elapsed,
        )
        return result

    def abandon_attempt(self, attempt_id: str) -> None:
        with self._lock:
            attempt = self._attempts.pop(attempt_id, None)
        if attempt is None:
            raise AttemptNotFoundError(attempt_id)
        attempt.abandon()
        logger.info("Attempt %s abandoned after %ds", attempt_id, attempt.elapsed_seconds)

    def active_attempt_count(self) -> int:
        with self._lock:
            return len(self._attempts)

    # --- Helpers ---

    def _discard_stale_attempts(self) -> None:
        """Drop attempts left open longer than the limit. Caller holds the lock."""
        stale = [
            attempt_id
            for attempt_id, attempt in self._attempts.items()
            if attempt.age_seconds > self._max_attempt_seconds and attempt_id not in self._saving
        ]
        for attempt_id in stale:
            self._attempts.pop(attempt_id).abandon()
        if stale:
            logger.info("Discarded %d stale attempt(s)", len(stale))

    @staticmethod
    def _store_call(action: str, func, *args):
        """Run one store operation once, logging and re-raising failures as StorageError."""
        try:
            return func(*args)
        except StorageError:
            logger.exception("Storage failure during %s", action)
            raise
        except OSError as exc:
            logger.exception("Storage failure during %s", action)
            raise StorageError(f"Failed to {action}.") from exc
