"""
First-come-first-served pairing of opposite predictions.

Match status is informational. Settlement pays by prediction side over all
participants and never reads it.
"""

import logging
from typing import Optional

from ...models import EventParticipant, ParticipantStatus

logger = logging.getLogger(__name__)


def _next_opponent(event_id, participant: EventParticipant) -> Optional[EventParticipant]:
    return (
        EventParticipant.objects.select_for_update()
        .filter(
            event_id=event_id,
            prediction=not participant.prediction,
            status=ParticipantStatus.ACTIVE,
            matched_with__isnull=True,
        )
        .exclude(pk=participant.pk)
        .order_by("joined_at", "id")
        .first()
    )


def try_match(event_id, new_participant: EventParticipant) -> Optional[int]:
    """
    Pair ``new_participant`` with the earliest unmatched participant on the
    other side. Returns the opponent's participant id, or None.
    """
    if new_participant.status != ParticipantStatus.ACTIVE or new_participant.matched_with_id:
        return None

    opponent = _next_opponent(event_id, new_participant)
    if opponent is None:
        return None

    # Conditional update: a concurrent join may have claimed this opponent.
    claimed = EventParticipant.objects.filter(
        pk=opponent.pk,
        status=ParticipantStatus.ACTIVE,
        matched_with__isnull=True,
    ).update(status=ParticipantStatus.MATCHED, matched_with_id=new_participant.user_id)
    if not claimed:
        return None

    EventParticipant.objects.filter(pk=new_participant.pk).update(
        status=ParticipantStatus.MATCHED, matched_with_id=opponent.user_id
    )
    new_participant.status = ParticipantStatus.MATCHED
    new_participant.matched_with_id = opponent.user_id

    logger.info(
        "Participants matched: event_id=%s, participant_id=%s, opponent_id=%s",
        event_id,
        new_participant.pk,
        opponent.pk,
    )
    return opponent.pk
