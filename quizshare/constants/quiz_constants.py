"""Quiz-related constants shared across the core and server layers."""

OPTIONS_PER_QUESTION: int = 4
UNANSWERED: int = -1
RECENT_PARTICIPANT_LIMIT: int = 3

# Inclusive lower bounds in percent, checked from the top down.
BADGE_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (90, "Excellent"),
    (70, "Good"),
    (50, "Average"),
)
FALLBACK_BADGE: str = "Needs Improvement"

# Open attempts older than this are discarded when a new one starts.
MAX_ATTEMPT_SECONDS: int = 6 * 60 * 60
