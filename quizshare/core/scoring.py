"""Pure scoring helpers shared by attempts, the leaderboard and the catalogue."""

from __future__ import annotations

from collections.abc import Sequence
import math

from quizshare.constants.quiz_constants import BADGE_THRESHOLDS, FALLBACK_BADGE
from quizshare.core.models import Quiz


def score_answers(quiz: Quiz, answers: Sequence[int]) -> int:
    """Count the answers matching the correct option of the question at the same position.

    Only overlapping positions are compared, so a short or long answer vector
    never raises. Unanswered positions hold a sentinel that matches nothing.
    """
    return sum(
        1
        for question, answer in zip(quiz.questions, answers)
        if answer == question.correct_option_index
    )


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values, unlike the builtin banker's rounding."""
    return math.floor(value + 0.5)


def score_percentage(score: int, total_questions: int) -> int:
    if total_questions <= 0:
        return 0
    return round_half_up(score / total_questions * 100)


def classify_badge(score: int, total_questions: int) -> str:
    """Return the badge label for a single result.

    Comparison is done on integers so that exactly 90% is never lost to
    floating point error.
    """
    if total_questions > 0:
        for lower_bound, label in BADGE_THRESHOLDS:
            if score * 100 >= lower_bound * total_questions:
                return label
    return FALLBACK_BADGE
