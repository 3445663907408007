"""
Participation registry: who staked how much on which side of an event.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from ...models import BettingModel, Event, EventParticipant, ParticipantStatus
from .config import PoolConfig, resolve_pool_config
from .errors import (
    AlreadyJoinedError,
    AlreadySettledError,
    EventFullError,
    InvalidStakeError,
    ParticipantNotFoundError,
    PoolError,
    ValidationError,
)
from .money import Number, quantize_money, to_decimal

logger = logging.getLogger(__name__)


def validate_stake(event: Event, amount: Number, config: Optional[PoolConfig] = None) -> Decimal:
    """
    Check a stake against the event's betting model and return it as Decimal.

    fixed:  amount == entry_fee exactly
    custom: entry_fee <= amount <= entry_fee * max_stake_multiplier
    """
    if config is None:
        config = resolve_pool_config(event)

    try:
        value = to_decimal(amount, "amount")
    except ValidationError as e:
        raise InvalidStakeError(str(e)) from e

    if value <= 0:
        raise InvalidStakeError("Stake amount must be greater than 0")

    entry_fee = Decimal(event.entry_fee)
    if event.betting_model == BettingModel.FIXED:
        if value != entry_fee:
            raise InvalidStakeError(
                f"Fixed betting model requires a stake of exactly {entry_fee}"
            )
    elif event.betting_model == BettingModel.CUSTOM:
        if value < entry_fee:
            raise InvalidStakeError(f"Custom betting requires a minimum stake of {entry_fee}")
        max_amount = entry_fee * config.max_stake_multiplier
        if value > max_amount:
            raise InvalidStakeError(f"Maximum stake for this event is {max_amount}")
    else:
        raise InvalidStakeError(f"Unknown betting model '{event.betting_model}'")

    if quantize_money(value) != value:
        raise InvalidStakeError("Stake amount cannot have more than 2 decimal places")
    return value


def join(
    event: Event,
    user_id,
    prediction: bool,
    amount: Number,
    config: Optional[PoolConfig] = None,
) -> EventParticipant:
    """
    Insert an active participation row. Does not move funds or touch pools.
    """
    value = validate_stake(event, amount, config)

    if EventParticipant.objects.filter(event_id=event.id, user_id=user_id).exists():
        raise AlreadyJoinedError("User has already joined this event")

    if event.max_participants and (
        EventParticipant.objects.filter(event_id=event.id).count() >= event.max_participants
    ):
        raise EventFullError(f"Event is full ({event.max_participants} participants)")

    try:
        with transaction.atomic():
            participant = EventParticipant.objects.create(
                event_id=event.id,
                user_id=user_id,
                prediction=bool(prediction),
                amount=value,
                status=ParticipantStatus.ACTIVE,
            )
    except IntegrityError as e:
        raise AlreadyJoinedError("User has already joined this event") from e

    return participant


def list_by_event(event_id) -> List[EventParticipant]:
    return list(
        EventParticipant.objects.filter(event_id=event_id).order_by("joined_at", "id")
    )


def mark_settled(participant_id, status: str, payout: Optional[Number] = None) -> None:
    """
    One-way transition to won/lost.

    Repeating the same target status is a no-op; asking for the other settled
    status raises AlreadySettledError.
    """
    if status not in ParticipantStatus.SETTLED:
        raise PoolError(
            f"Participants can only be settled as won or lost, got '{status}'",
            code="INVALID_STATUS",
        )

    try:
        participant = EventParticipant.objects.select_for_update().get(pk=participant_id)
    except EventParticipant.DoesNotExist:
        raise ParticipantNotFoundError(f"Participant {participant_id} not found")

    if participant.status in ParticipantStatus.SETTLED:
        if participant.status == status:
            return
        raise AlreadySettledError(
            f"Participant {participant_id} is already settled as '{participant.status}'"
        )

    participant.status = status
    update_fields = ["status"]
    if status == ParticipantStatus.WON:
        if payout is None:
            raise PoolError("A payout is required when marking a winner", code="INVALID_PARAM")
        participant.payout = quantize_money(to_decimal(payout, "payout"))
        participant.payout_at = timezone.now()
        update_fields += ["payout", "payout_at"]
    participant.save(update_fields=update_fields)
