"""Service for ranking quiz results and computing their statistics."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from quizshare.core.models import QuizResult
from quizshare.core.scoring import classify_badge, round_half_up, score_percentage


@dataclass(slots=True, frozen=True)
class LeaderboardRow:
    """Immutable ranked entry returned to consumers."""

    rank: int
    result: QuizResult
    percentage: int
    badge: str


@dataclass(slots=True, frozen=True)
class LeaderboardStats:
    """Aggregates over every result of a quiz."""

    participant_count: int = 0
    average_score_percent: int = 0
    average_time_seconds: int = 0
    best_score: int = 0


def rank_results(results: Iterable[QuizResult]) -> list[QuizResult]:
    """Order by score descending, then elapsed time ascending.

    ``sorted`` is stable, so results tied on both keys keep their input order.
    """
    return sorted(results, key=lambda r: (-r.score, r.time_elapsed))


def compute_stats(results: Sequence[QuizResult], total_questions: int) -> LeaderboardStats:
    """Compute the aggregate statistics, reporting zeros for an empty set."""
    participant_count = len(results)
    if participant_count == 0:
        return LeaderboardStats()

    total_score = sum(r.score for r in results)
    total_time = sum(r.time_elapsed for r in results)
    average_score_percent = 0
    if total_questions > 0:
        average_score_percent = round_half_up(
            total_score / (participant_count * total_questions) * 100
        )
    return LeaderboardStats(
        participant_count=participant_count,
        average_score_percent=average_score_percent,
        average_time_seconds=round_half_up(total_time / participant_count),
        best_score=max(r.score for r in results),
    )


class Leaderboard:
    """Ranked view over the results of one quiz."""

    def __init__(self, results: Iterable[QuizResult], total_questions: int) -> None:
        self._results = list(results)
        self._total_questions = total_questions

    @property
    def total_questions(self) -> int:
        return self._total_questions

    def get_rows(self, limit: int | None = None) -> list[LeaderboardRow]:
        ranked = rank_results(self._results)
        if limit is not None:
            ranked = ranked[:limit]
        return [
            LeaderboardRow(
                rank=position,
                result=result,
                percentage=score_percentage(result.score, result.total_questions),
                badge=classify_badge(result.score, result.total_questions),
            )
            for position, result in enumerate(ranked, start=1)
        ]

    def get_stats(self) -> LeaderboardStats:
        return compute_stats(self._results, self._total_questions)
