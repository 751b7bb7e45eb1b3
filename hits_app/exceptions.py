"""
Errors raised by the hit service.

Two ways a hit can fail to save:
- HitValidationError: the record broke a validation rule, nothing was written
- HitNotUniqueError: the database refused a duplicate (host, path, status, date)
"""

from typing import Dict, List


class HitsError(Exception):
    """Base class for hit service errors"""


class HitValidationError(HitsError):
    """Raised when a hit fails validation. errors maps field -> messages."""

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        details = "; ".join(
            f"{field} {message}"
            for field, messages in errors.items()
            for message in messages
        )
        super().__init__(f"Validation failed: {details}")


class HitNotUniqueError(HitsError):
    """Raised when the database rejects a duplicate hit"""

    def __init__(self, message: str = "Hit already exists for this host, path, status and date"):
        super().__init__(message)
