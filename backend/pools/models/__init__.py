from .events import BettingModel, Event, EventJoinRequest, EventStatus, JoinRequestStatus
from .ledger import Transaction, TransactionStatus, TransactionType
from .participants import EventParticipant, ParticipantStatus
from .users import User, UserRole

__all__ = [
    "BettingModel",
    "Event",
    "EventJoinRequest",
    "EventParticipant",
    "EventStatus",
    "JoinRequestStatus",
    "ParticipantStatus",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "User",
    "UserRole",
]
