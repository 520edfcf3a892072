from __future__ import annotations

from booking_engine.domain.entities.rejection import RejectionReason


class StoreUnavailableError(RuntimeError):
    """Raised when a backing store or remote catalog cannot be reached (transient, retryable)."""
    pass


class SchedulingRejected(ValueError):
    """Raised when a read request cannot be served for a user-facing reason (unknown provider, inactive service)."""

    def __init__(self, reason: RejectionReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
