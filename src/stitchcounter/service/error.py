# SPDX-License-Identifier: MIT

from typing import Optional


class StitchCounterError(Exception):
    """Base class for every error raised by the counter engine."""

    pass


class ValidationError(StitchCounterError):
    """Raised when a caller-supplied field violates a constraint.

    Nothing is applied when this is raised.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(StitchCounterError):
    """Raised when a project or counter id does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class InvalidOperationError(StitchCounterError):
    """Raised when a well-formed operation is refused in the current state.

    Examples are incrementing at the ceiling or decrementing a manually
    disabled counter. Callers treat it as a benign no-op.
    """

    def __init__(self, reason: str, counter_id: Optional[str] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.counter_id = counter_id


class StorageError(StitchCounterError):
    """Raised when the project collection cannot be read or written."""

    pass
