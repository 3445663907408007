"""
Join orchestration: the unit of work behind "user stakes on an event".

A join validates the stake, checks and debits the user's balance, inserts the
participant, grows the pool and tries a FCFS match, all in one transaction.
The event row and the user row are both locked, so concurrent joins cannot
tear the pool totals and two debits for one user cannot both pass the
balance check.
"""

import logging
from typing import List

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from ...models import (
    Event,
    EventJoinRequest,
    EventParticipant,
    JoinRequestStatus,
    TransactionType,
    User,
)
from .accumulator import apply_join
from .config import resolve_pool_config
from .errors import (
    AlreadyJoinedError,
    ApprovalRequiredError,
    InsufficientFundsError,
    JoinRequestNotFoundError,
    JoinRequestNotPendingError,
    PermissionDeniedError,
    PoolError,
    UserNotFoundError,
)
from .events import get_event, lock_open_event
from .ledger import compute_balance, record_transaction
from .matching import try_match
from .money import Number
from .registry import join, validate_stake

logger = logging.getLogger(__name__)


def escrow_reference(event_id, participant_id) -> str:
    return f"event_{event_id}_escrow_{participant_id}"


def _require_prediction(prediction) -> bool:
    if not isinstance(prediction, bool):
        raise PoolError("prediction must be true (YES) or false (NO)", code="INVALID_PARAM")
    return prediction


def _lock_user(user_id) -> User:
    try:
        return User.objects.select_for_update().get(pk=user_id)
    except (User.DoesNotExist, DjangoValidationError):
        raise UserNotFoundError(f"User {user_id} not found")


def _join_locked(event: Event, user_id, prediction: bool, amount: Number) -> EventParticipant:
    """Escrow path shared by public joins and approved join requests.

    Caller must hold the event row lock inside transaction.atomic().
    """
    config = resolve_pool_config(event)
    stake = validate_stake(event, amount, config)

    user = _lock_user(user_id)
    balance = compute_balance(user.id)
    if balance < stake:
        raise InsufficientFundsError(
            f"Insufficient balance: {balance} available, {stake} required"
        )

    participant = join(event, user.id, prediction, stake, config)
    record_transaction(
        user.id,
        TransactionType.EVENT_ESCROW,
        -stake,
        f"{stake} locked in escrow for event: {event.title}",
        related_id=event.id,
        reference=escrow_reference(event.id, participant.id),
    )
    apply_join(event.id, prediction, stake)
    matched_id = try_match(event.id, participant)

    logger.info(
        "Event joined: event_id=%s, user_id=%s, prediction=%s, amount=%s, matched_with=%s",
        event.id,
        user.id,
        "YES" if prediction else "NO",
        stake,
        matched_id,
    )
    return participant


def join_event(event_id, user_id, prediction: bool, amount: Number) -> EventParticipant:
    """
    Stake on a public event.

    Raises:
        EventNotFoundError, EventClosedError, ApprovalRequiredError,
        InvalidStakeError, InsufficientFundsError, AlreadyJoinedError,
        EventFullError, UserNotFoundError
    """
    _require_prediction(prediction)
    with transaction.atomic():
        event = lock_open_event(event_id)
        if event.is_private:
            raise ApprovalRequiredError("Private event: send a join request to the creator")
        return _join_locked(event, user_id, prediction, amount)


def request_join(event_id, user_id, prediction: bool, amount: Number) -> EventJoinRequest:
    """
    Ask to join a private event. Nothing is debited until the creator approves.
    """
    _require_prediction(prediction)
    with transaction.atomic():
        event = lock_open_event(event_id)
        if not event.is_private:
            raise PoolError("Event is public; join it directly", code="NOT_PRIVATE")

        stake = validate_stake(event, amount)
        user = _lock_user(user_id)

        if EventParticipant.objects.filter(event_id=event.id, user_id=user.id).exists():
            raise AlreadyJoinedError("User has already joined this event")
        if EventJoinRequest.objects.filter(
            event_id=event.id, user_id=user.id, status=JoinRequestStatus.PENDING
        ).exists():
            raise AlreadyJoinedError("A join request for this event is already pending")

        balance = compute_balance(user.id)
        if balance < stake:
            raise InsufficientFundsError(
                f"Insufficient balance: {balance} available, {stake} required"
            )

        join_request = EventJoinRequest.objects.create(
            event_id=event.id,
            user_id=user.id,
            prediction=prediction,
            amount=stake,
            status=JoinRequestStatus.PENDING,
        )

    logger.info(
        "Join request created: request_id=%s, event_id=%s, user_id=%s",
        join_request.id,
        event_id,
        user_id,
    )
    return join_request


def _lock_pending_request(request_id, approver_id) -> EventJoinRequest:
    try:
        join_request = EventJoinRequest.objects.select_for_update().get(pk=request_id)
    except EventJoinRequest.DoesNotExist:
        raise JoinRequestNotFoundError(f"Join request {request_id} not found")

    event = get_event(join_request.event_id)
    if str(event.creator_id) != str(approver_id):
        raise PermissionDeniedError("Only the event creator can respond to join requests")
    if join_request.status != JoinRequestStatus.PENDING:
        raise JoinRequestNotPendingError(f"Join request is already {join_request.status}")
    return join_request


def approve_join_request(request_id, approver_id) -> EventParticipant:
    """Creator approval: runs the normal escrow join for the requester."""
    with transaction.atomic():
        join_request = _lock_pending_request(request_id, approver_id)
        event = lock_open_event(join_request.event_id)
        participant = _join_locked(
            event, join_request.user_id, join_request.prediction, join_request.amount
        )
        join_request.status = JoinRequestStatus.APPROVED
        join_request.responded_at = timezone.now()
        join_request.save(update_fields=["status", "responded_at"])
    return participant


def reject_join_request(request_id, approver_id) -> EventJoinRequest:
    with transaction.atomic():
        join_request = _lock_pending_request(request_id, approver_id)
        join_request.status = JoinRequestStatus.REJECTED
        join_request.responded_at = timezone.now()
        join_request.save(update_fields=["status", "responded_at"])

    logger.info("Join request rejected: request_id=%s", request_id)
    return join_request


def list_join_requests(event_id) -> List[EventJoinRequest]:
    get_event(event_id)
    return list(
        EventJoinRequest.objects.filter(event_id=event_id)
        .select_related("user")
        .order_by("-requested_at", "-id")
    )
