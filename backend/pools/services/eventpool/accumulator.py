"""
Pool accumulator: running yes/no/total stake sums cached on the event row.
"""

from decimal import Decimal
from typing import Dict

from django.db.models import F

from ...models import Event, EventParticipant
from ..cache import get_cached_pool_stats, invalidate_pool_stats_on_commit, set_cached_pool_stats
from .errors import EventNotFoundError
from .money import Number, to_decimal


def apply_join(event_id, prediction: bool, amount: Number) -> None:
    """
    Add a stake to the event's side pool and total pool in a single UPDATE.
    Must run in the same transaction as the escrow debit and participant insert.
    """
    value = to_decimal(amount, "amount")
    side_field = "yes_pool" if prediction else "no_pool"
    updated = Event.objects.filter(pk=event_id).update(
        **{
            side_field: F(side_field) + value,
            "event_pool": F("event_pool") + value,
        }
    )
    if not updated:
        raise EventNotFoundError(f"Event {event_id} not found")
    invalidate_pool_stats_on_commit(event_id)


def get_stats(event_id) -> Dict:
    cached = get_cached_pool_stats(event_id)
    if cached is not None:
        return cached

    row = (
        Event.objects.filter(pk=event_id)
        .values("event_pool", "yes_pool", "no_pool")
        .first()
    )
    if row is None:
        raise EventNotFoundError(f"Event {event_id} not found")

    stats = {
        "total_pool": Decimal(row["event_pool"]),
        "yes_pool": Decimal(row["yes_pool"]),
        "no_pool": Decimal(row["no_pool"]),
        "participants_count": EventParticipant.objects.filter(event_id=event_id).count(),
    }
    set_cached_pool_stats(event_id, stats)
    return stats
