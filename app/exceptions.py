"""
Career Game Exceptions
app/exceptions.py
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class CareerGameError(Exception):
    """Base class for all pipeline and serve-time errors."""


class MissingInputError(CareerGameError):
    """A required upstream artifact does not exist."""

    def __init__(self, path: str, hint: Optional[str] = None):
        self.path = str(path)
        message = f"Required input not found: {self.path}"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)


class RecordExtractionError(CareerGameError):
    """One handbook node could not be parsed."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Occupation #{index} could not be parsed: {reason}")


class PublishValidationError(CareerGameError):
    """The terminal check rejected the dataset; nothing is published."""

    def __init__(self, failures: List[Dict[str, Any]]):
        self.failures = failures
        super().__init__(f"{len(failures)} career(s) failed publish validation")


class DataNotLoadedError(CareerGameError):
    """Careers were requested before the dataset finished loading."""


class InsufficientPoolError(CareerGameError):
    """Fewer than two careers match the requested criteria."""

    def __init__(self, pool_size: int):
        self.pool_size = pool_size
        super().__init__(
            f"Need at least 2 careers to build a matchup, found {pool_size}"
        )


class MatchupUnsatisfiableError(CareerGameError):
    """No balanced pair was found within the attempt budget."""

    def __init__(self, attempts: int, pool_size: int):
        self.attempts = attempts
        self.pool_size = pool_size
        super().__init__(
            f"Could not find a balanced matchup after {attempts} attempts "
            f"(pool of {pool_size} careers)"
        )


class BoundaryError(CareerGameError):
    """An HTTP boundary failure carrying the status code to respond with."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
