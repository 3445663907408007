import logging
from decimal import Decimal
from typing import List, Optional

from django.conf import settings
from django.db.models import F
from django.utils import timezone

from ...models import BettingModel, Event, EventParticipant, EventStatus
from .config import PoolConfig
from .errors import EventClosedError, EventNotFoundError, PoolError
from .money import ZERO, Number, quantize_money, to_decimal

logger = logging.getLogger(__name__)


def _require_positive_int(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise PoolError(f"{field} must be a positive integer, got={value!r}", code="INVALID_PARAM")
    return value


def create_event(
    *,
    creator_id,
    title: str,
    entry_fee: Number,
    betting_model: str = BettingModel.FIXED,
    category: str = "general",
    description: str = "",
    is_private: bool = False,
    max_participants: Optional[int] = None,
    end_date=None,
    creator_fee_rate: Optional[Number] = None,
    max_stake_multiplier: Optional[int] = None,
) -> Event:
    """Create an active event with empty pools."""
    if not title:
        raise PoolError("title is required", code="INVALID_PARAM")
    if betting_model not in BettingModel.ALL:
        raise PoolError(f"Unknown betting model '{betting_model}'", code="INVALID_PARAM")

    fee = to_decimal(entry_fee, "entry_fee")
    if fee <= 0 or quantize_money(fee) != fee:
        raise PoolError("entry_fee must be a positive amount in cents", code="INVALID_PARAM")

    rate = None
    if creator_fee_rate is not None:
        rate = to_decimal(creator_fee_rate, "creator_fee_rate")
    if rate is not None or max_stake_multiplier is not None:
        # Validates the overrides; raises ImproperlyConfigured when out of range.
        PoolConfig(
            creator_fee_rate=rate if rate is not None else Decimal("0"),
            max_stake_multiplier=max_stake_multiplier or 1,
        )

    if max_participants is None:
        max_participants = getattr(settings, "EVENT_POOL_DEFAULT_MAX_PARTICIPANTS", 100)
    _require_positive_int(max_participants, "max_participants")

    now = timezone.now()
    if end_date is not None and end_date <= now:
        raise PoolError("end_date must be in the future", code="INVALID_PARAM")

    event = Event.objects.create(
        creator_id=creator_id,
        title=title,
        description=description or "",
        category=category or "general",
        entry_fee=fee,
        betting_model=betting_model,
        yes_pool=ZERO,
        no_pool=ZERO,
        event_pool=ZERO,
        creator_fee=ZERO,
        creator_fee_rate=rate,
        max_stake_multiplier=max_stake_multiplier,
        is_private=bool(is_private),
        max_participants=max_participants,
        end_date=end_date,
        status=EventStatus.ACTIVE,
        created_at=now,
        updated_at=now,
    )
    logger.info(
        "Event created: event_id=%s, creator_id=%s, betting_model=%s, entry_fee=%s",
        event.id,
        creator_id,
        betting_model,
        fee,
    )
    return event


def get_event(event_id) -> Event:
    try:
        return Event.objects.get(pk=event_id)
    except Event.DoesNotExist:
        raise EventNotFoundError(f"Event {event_id} not found")


def lock_open_event(event_id) -> Event:
    """Lock an event row for a join; it must still accept stakes."""
    try:
        event = Event.objects.select_for_update().get(pk=event_id)
    except Event.DoesNotExist:
        raise EventNotFoundError(f"Event {event_id} not found")

    if event.status != EventStatus.ACTIVE or event.admin_result is not None:
        raise EventClosedError("Event is no longer accepting participants")
    if event.end_date and event.end_date <= timezone.now():
        raise EventClosedError("Event has ended")
    return event


def update_event_capacity(event_id, additional_slots: int) -> Event:
    """Raise an event's participant cap by ``additional_slots``."""
    _require_positive_int(additional_slots, "additional_slots")
    updated = Event.objects.filter(pk=event_id).update(
        max_participants=F("max_participants") + additional_slots,
        updated_at=timezone.now(),
    )
    if not updated:
        raise EventNotFoundError(f"Event {event_id} not found")

    event = get_event(event_id)
    logger.info(
        "Event capacity updated: event_id=%s, added=%s, max_participants=%s",
        event_id,
        additional_slots,
        event.max_participants,
    )
    return event


def list_user_events(user_id) -> List[EventParticipant]:
    """A user's participations, newest first, with their events loaded."""
    return list(
        EventParticipant.objects.filter(user_id=user_id)
        .select_related("event")
        .order_by("-joined_at", "-id")
    )
