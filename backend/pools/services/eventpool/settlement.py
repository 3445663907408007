"""
Settlement engine for event pools.

This module provides:
- admin_set_result(): record the admin-declared YES/NO outcome (no payout)
- process_payout(): settle an event using its declared outcome
- settle(): distribute the pool to winners and the creator fee to the creator
- compute_payouts(): the pure payout arithmetic used by settle()

Key design decisions:
- Exactly-once via a conditional status UPDATE (active -> completed) under a
  SELECT FOR UPDATE lock on the event row
- Deterministic ledger references (event_{id}_win_{participant_id}, ...) so a
  replayed settlement collides on the unique reference instead of double-paying
- Every write happens inside one transaction.atomic() block; any failure rolls
  back all payouts, statuses and the event update together
- Amounts are Decimal, rounded down to cents; a winner never gets less than
  their own stake back
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from django.db import transaction
from django.utils import timezone

from ...models import (
    BettingModel,
    Event,
    EventParticipant,
    EventStatus,
    ParticipantStatus,
    TransactionType,
)
from ..cache import invalidate_pool_stats_on_commit
from .config import PoolConfig, resolve_pool_config
from .errors import (
    AlreadySettledError,
    DuplicateReferenceError,
    EventNotFoundError,
    PoolError,
    SettlementNotReadyError,
)
from .ledger import record_transaction
from .money import ZERO, quantize_money
from .registry import mark_settled

logger = logging.getLogger(__name__)


@dataclass
class PayoutPlan:
    winners_count: int
    total_payout: Decimal
    creator_fee: Decimal
    winner_payouts: List[Tuple[EventParticipant, Decimal]] = field(default_factory=list)
    losers: List[EventParticipant] = field(default_factory=list)
    residue: Decimal = ZERO

    @property
    def no_winners(self) -> bool:
        return self.winners_count == 0

    def summary(self) -> Dict:
        return {
            "winners_count": self.winners_count,
            "total_payout": self.total_payout,
            "creator_fee": self.creator_fee,
        }


def winner_reference(event_id, participant_id) -> str:
    return f"event_{event_id}_win_{participant_id}"


def creator_fee_reference(event_id) -> str:
    return f"event_{event_id}_creator_fee"


def no_winners_reference(event_id) -> str:
    return f"event_{event_id}_no_winners"


def compute_payouts(
    *,
    event_pool: Decimal,
    betting_model: str,
    participants: Sequence[EventParticipant],
    outcome: bool,
    creator_fee_rate: Decimal,
) -> PayoutPlan:
    """
    Split a pool between the participants who predicted ``outcome``.

    fixed model:  payout = stake + profit_pool / winners
    custom model: payout = stake + profit_pool * stake / total_winner_stake
    where profit_pool = max(0, pool - fee - total_winner_stake).

    With no winners the whole pool goes to the creator and no fee is taken.
    """
    pool = Decimal(event_pool)
    winners = [p for p in participants if p.prediction == outcome]
    losers = [p for p in participants if p.prediction != outcome]

    if not winners:
        return PayoutPlan(
            winners_count=0,
            total_payout=pool,
            creator_fee=ZERO,
            losers=losers,
        )

    creator_fee = quantize_money(pool * Decimal(creator_fee_rate))
    available_payout = pool - creator_fee

    total_winner_stake = sum((Decimal(w.amount) for w in winners), ZERO)
    profit_pool = max(ZERO, available_payout - total_winner_stake)
    winners_count = len(winners)

    winner_payouts = []
    for winner in winners:
        stake = Decimal(winner.amount)
        if total_winner_stake > 0:
            winner_share = stake / total_winner_stake
        else:
            winner_share = Decimal(1) / winners_count

        if betting_model == BettingModel.FIXED:
            payout = stake + profit_pool / winners_count
        else:
            payout = stake + profit_pool * winner_share

        payout = max(quantize_money(payout), stake)
        winner_payouts.append((winner, payout))

    paid = sum((p for _, p in winner_payouts), ZERO)
    return PayoutPlan(
        winners_count=winners_count,
        total_payout=available_payout,
        creator_fee=creator_fee,
        winner_payouts=winner_payouts,
        losers=losers,
        residue=available_payout - paid,
    )


def _lock_event(event_id) -> Event:
    try:
        return Event.objects.select_for_update().get(pk=event_id)
    except Event.DoesNotExist:
        raise EventNotFoundError(f"Event {event_id} not found")


@transaction.atomic
def admin_set_result(event_id, outcome: bool, resolved_by_user_id=None) -> Event:
    """
    Record the declared outcome. Settlement is a separate step (process_payout).

    Raises:
        EventNotFoundError: unknown event
        AlreadySettledError: result already declared or event already completed
    """
    if not isinstance(outcome, bool):
        raise PoolError("result must be true (YES) or false (NO)", code="INVALID_PARAM")

    event = _lock_event(event_id)
    if event.status == EventStatus.COMPLETED:
        raise AlreadySettledError("Event already resolved")
    if event.admin_result is not None:
        raise AlreadySettledError("Event result already set")

    now = timezone.now()
    event.admin_result = outcome
    event.result = outcome
    event.resolved_by_id = resolved_by_user_id
    event.resolved_at = now
    event.updated_at = now
    event.save(update_fields=["admin_result", "result", "resolved_by", "resolved_at", "updated_at"])

    logger.info(
        "Event result set: event_id=%s, result=%s, resolved_by=%s",
        event_id,
        "YES" if outcome else "NO",
        resolved_by_user_id,
    )
    return event


def settle(event_id, outcome: bool, config: Optional[PoolConfig] = None) -> Dict:
    """
    Pay out an event exactly once.

    Returns:
        {"winners_count", "total_payout", "creator_fee"}

    Raises:
        EventNotFoundError: unknown event
        AlreadySettledError: the event has already been settled
        SettlementNotReadyError: no declared result, or it differs from ``outcome``
    """
    try:
        return _settle(event_id, outcome, config)
    except DuplicateReferenceError as e:
        # A payout for this event is already on the ledger; nothing was written.
        raise AlreadySettledError(f"Event {event_id} payouts already recorded") from e


@transaction.atomic
def _settle(event_id, outcome: bool, config: Optional[PoolConfig]) -> Dict:
    event = _lock_event(event_id)

    if event.status == EventStatus.COMPLETED:
        raise AlreadySettledError("Event already resolved")
    if event.admin_result is None:
        raise SettlementNotReadyError("Event result has not been set")
    if event.admin_result != outcome:
        raise SettlementNotReadyError(
            "Settlement outcome does not match the declared event result"
        )

    if config is None:
        config = resolve_pool_config(event)

    participants = list(
        EventParticipant.objects.select_for_update()
        .filter(event_id=event.id)
        .order_by("joined_at", "id")
    )
    plan = compute_payouts(
        event_pool=event.event_pool,
        betting_model=event.betting_model,
        participants=participants,
        outcome=outcome,
        creator_fee_rate=config.creator_fee_rate,
    )

    now = timezone.now()
    claimed = Event.objects.filter(pk=event.id, status=EventStatus.ACTIVE).update(
        status=EventStatus.COMPLETED,
        creator_fee=plan.creator_fee,
        settled_at=now,
        updated_at=now,
    )
    if not claimed:
        raise AlreadySettledError("Event already resolved")

    if plan.no_winners:
        if plan.total_payout > 0:
            record_transaction(
                event.creator_id,
                TransactionType.EVENT_NO_WINNERS,
                plan.total_payout,
                f"No winners bonus for event: {event.title}",
                related_id=event.id,
                reference=no_winners_reference(event.id),
            )
        for loser in plan.losers:
            mark_settled(loser.id, ParticipantStatus.LOST)

        logger.warning(
            "Event settled with no winners: event_id=%s, pool=%s paid to creator_id=%s",
            event.id,
            plan.total_payout,
            event.creator_id,
        )
        invalidate_pool_stats_on_commit(event.id)
        return plan.summary()

    for winner, payout in plan.winner_payouts:
        mark_settled(winner.id, ParticipantStatus.WON, payout)
        record_transaction(
            winner.user_id,
            TransactionType.EVENT_WIN,
            payout,
            f"Won event: {event.title}",
            related_id=event.id,
            reference=winner_reference(event.id, winner.id),
        )

    for loser in plan.losers:
        mark_settled(loser.id, ParticipantStatus.LOST)

    if plan.creator_fee > 0:
        record_transaction(
            event.creator_id,
            TransactionType.CREATOR_FEE,
            plan.creator_fee,
            f"Creator fee for event: {event.title}",
            related_id=event.id,
            reference=creator_fee_reference(event.id),
        )

    if plan.residue < 0:
        logger.warning(
            "Event %s: winner stakes exceed available payout, overdrawn by %s",
            event.id,
            -plan.residue,
        )
    elif plan.residue > 0:
        logger.info("Event %s: rounding residue %s left unallocated", event.id, plan.residue)

    logger.info(
        "Event settled: event_id=%s, winners=%s, losers=%s, total_payout=%s, creator_fee=%s",
        event.id,
        plan.winners_count,
        len(plan.losers),
        plan.total_payout,
        plan.creator_fee,
    )
    invalidate_pool_stats_on_commit(event.id)
    return plan.summary()


def process_payout(event_id, config: Optional[PoolConfig] = None) -> Dict:
    """
    Run settlement with the event's declared result. Call after admin_set_result().
    """
    event = Event.objects.filter(pk=event_id).only("id", "status", "admin_result").first()
    if event is None:
        raise EventNotFoundError(f"Event {event_id} not found")
    if event.status == EventStatus.COMPLETED:
        raise AlreadySettledError("Event already resolved")
    if event.admin_result is None:
        raise SettlementNotReadyError("Event result has not been set")
    return settle(event_id, event.admin_result, config)
