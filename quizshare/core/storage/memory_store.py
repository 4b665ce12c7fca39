"""Process-local stores. Contents are lost when the process exits."""

from __future__ import annotations

from copy import deepcopy
from threading import Lock

from quizshare.core.models import Quiz, QuizResult


class InMemoryQuizStore:
    def __init__(self) -> None:
        self._quizzes: list[Quiz] = []
        self._lock = Lock()

    def create(self, quiz: Quiz) -> Quiz:
        with self._lock:
            self._quizzes.append(deepcopy(quiz))
        return quiz

    def get(self, quiz_id: str) -> Quiz | None:
        with self._lock:
            found = next((q for q in self._quizzes if q.id == quiz_id), None)
            return deepcopy(found) if found is not None else None

    def list_all(self) -> list[Quiz]:
        with self._lock:
            return deepcopy(self._quizzes)


class InMemoryResultStore:
    def __init__(self) -> None:
        self._results: list[QuizResult] = []
        self._lock = Lock()

    def create(self, result: QuizResult) -> QuizResult:
        with self._lock:
            self._results.append(deepcopy(result))
        return result

    def list_by_quiz_id(self, quiz_id: str) -> list[QuizResult]:
        with self._lock:
            return [deepcopy(r) for r in self._results if r.quiz_id == quiz_id]

    def list_all(self) -> list[QuizResult]:
        with self._lock:
            return deepcopy(self._results)
