"""
Domain errors raised by the event pool services.

Every error carries a machine-readable ``code`` and the HTTP status a view
should answer with, so views can map them without knowing each type.
"""

from typing import Dict


class PoolError(ValueError):
    """Base class for event pool failures."""

    default_code = "POOL_ERROR"
    default_http_status = 400

    def __init__(self, message: str, *, code: str = None, http_status: int = None):
        super().__init__(message)
        self.code = code or self.default_code
        self.http_status = http_status or self.default_http_status

    def to_payload(self) -> Dict:
        return {"error": str(self), "code": self.code}


class ValidationError(PoolError):
    """A ledger amount is not a finite number."""

    default_code = "INVALID_AMOUNT"


class InvalidStakeError(PoolError):
    default_code = "INVALID_STAKE"


class EventNotFoundError(PoolError):
    default_code = "EVENT_NOT_FOUND"
    default_http_status = 404


class UserNotFoundError(PoolError):
    default_code = "USER_NOT_FOUND"
    default_http_status = 404


class ParticipantNotFoundError(PoolError):
    default_code = "PARTICIPANT_NOT_FOUND"
    default_http_status = 404


class JoinRequestNotFoundError(PoolError):
    default_code = "JOIN_REQUEST_NOT_FOUND"
    default_http_status = 404


class JoinRequestNotPendingError(PoolError):
    default_code = "REQUEST_NOT_PENDING"
    default_http_status = 409


class AlreadySettledError(PoolError):
    """
    Settlement or result declaration was attempted a second time.
    Callers should treat this as "already done", not as a retryable failure.
    """

    default_code = "ALREADY_SETTLED"
    default_http_status = 409


class SettlementNotReadyError(PoolError):
    default_code = "SETTLEMENT_NOT_READY"


class InsufficientFundsError(PoolError):
    default_code = "INSUFFICIENT_FUNDS"


class EventClosedError(PoolError):
    default_code = "EVENT_CLOSED"


class EventFullError(PoolError):
    default_code = "EVENT_FULL"


class AlreadyJoinedError(PoolError):
    default_code = "ALREADY_JOINED"
    default_http_status = 409


class ApprovalRequiredError(PoolError):
    default_code = "APPROVAL_REQUIRED"
    default_http_status = 403


class PermissionDeniedError(PoolError):
    default_code = "FORBIDDEN"
    default_http_status = 403


class DuplicateReferenceError(PoolError):
    default_code = "DUPLICATE_REFERENCE"
    default_http_status = 409
