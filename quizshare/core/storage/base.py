"""Repository interfaces implemented by every storage backend.

Both record types are append-only: a store can create a record and read
records back, nothing else. Stores make no ordering promise; ranking is done
by the leaderboard service.
"""

from __future__ import annotations

from typing import Protocol

from quizshare.core.models import Quiz, QuizResult


class QuizStore(Protocol):
    def create(self, quiz: Quiz) -> Quiz: ...

    def get(self, quiz_id: str) -> Quiz | None: ...

    def list_all(self) -> list[Quiz]: ...


class ResultStore(Protocol):
    def create(self, result: QuizResult) -> QuizResult: ...

    def list_by_quiz_id(self, quiz_id: str) -> list[QuizResult]: ...

    def list_all(self) -> list[QuizResult]: ...
