"""Exceptions raised by the quiz core and mapped to HTTP errors by the server."""

from __future__ import annotations


class QuizValidationError(ValueError):
    """Raised when author or respondent input is rejected before any write."""


class QuizNotFoundError(LookupError):
    """Raised when no quiz matches the requested identifier."""

    def __init__(self, quiz_id: str) -> None:
        super().__init__(f"Quiz '{quiz_id}' was not found.")
        self.quiz_id = quiz_id


class AttemptNotFoundError(LookupError):
    """Raised when an attempt identifier is unknown or already closed."""

    def __init__(self, attempt_id: str) -> None:
        super().__init__(f"Attempt '{attempt_id}' was not found.")
        self.attempt_id = attempt_id


class AttemptStateError(RuntimeError):
    """Raised when an attempt operation is not allowed in its current state."""


class StorageError(Exception):
    """Raised when a store cannot complete a create or read."""
