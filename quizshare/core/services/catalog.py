"""Service that builds the quiz list summaries."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from quizshare.constants.quiz_constants import RECENT_PARTICIPANT_LIMIT
from quizshare.core.models import Quiz, QuizResult
from quizshare.core.services.leaderboard import compute_stats


@dataclass(slots=True, frozen=True)
class QuizSummary:
    quiz: Quiz
    participant_count: int
    average_score_percent: int
    recent_participants: list[QuizResult]


def group_results_by_quiz(results: Iterable[QuizResult]) -> dict[str, list[QuizResult]]:
    grouped: dict[str, list[QuizResult]] = defaultdict(list)
    for result in results:
        grouped[result.quiz_id].append(result)
    return grouped


def summarize_quizzes(
    quizzes: Iterable[Quiz],
    results: Iterable[QuizResult],
    recent_limit: int = RECENT_PARTICIPANT_LIMIT,
) -> list[QuizSummary]:
    """Pair each quiz with its result statistics.

    The average is computed against the quiz's current question count, and
    "recent" participants are the first results in store order.
    """
    grouped = group_results_by_quiz(results)
    summaries: list[QuizSummary] = []
    for quiz in quizzes:
        quiz_results = grouped.get(quiz.id, [])
        stats = compute_stats(quiz_results, quiz.question_count)
        summaries.append(
            QuizSummary(
                quiz=quiz,
                participant_count=stats.participant_count,
                average_score_percent=stats.average_score_percent,
                recent_participants=quiz_results[:recent_limit],
            )
        )
    return summaries
