"""Domain exceptions."""
from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised when a caller passes a value outside an enumerated domain."""

    def __init__(self, field: str, value: object, allowed: list[str]):
        self.field = field
        self.value = value
        self.allowed = allowed
        super().__init__(f"{field} must be one of {', '.join(allowed)} (got {value!r})")


class NudgeLinkError(RuntimeError):
    """Raised when signed nudge links cannot be produced or checked."""
