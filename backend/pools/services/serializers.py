from decimal import Decimal

from ..models import Event, EventJoinRequest, EventParticipant, Transaction


def _money(value):
    if value is None:
        return None
    return str(Decimal(value))


def _iso(value):
    return value.isoformat() if value else None


def serialize_event(event: Event):
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "category": event.category,
        "creator_id": str(event.creator_id),
        "entry_fee": _money(event.entry_fee),
        "betting_model": event.betting_model,
        "yes_pool": _money(event.yes_pool),
        "no_pool": _money(event.no_pool),
        "event_pool": _money(event.event_pool),
        "status": event.status,
        "admin_result": event.admin_result,
        "result": event.result,
        "creator_fee": _money(event.creator_fee),
        "is_private": event.is_private,
        "max_participants": event.max_participants,
        "end_date": _iso(event.end_date),
        "resolved_at": _iso(event.resolved_at),
        "settled_at": _iso(event.settled_at),
        "created_at": _iso(event.created_at),
    }


def serialize_participant(participant: EventParticipant):
    return {
        "id": participant.id,
        "event_id": participant.event_id,
        "user_id": str(participant.user_id),
        "prediction": participant.prediction,
        "amount": _money(participant.amount),
        "status": participant.status,
        "matched_with": str(participant.matched_with_id) if participant.matched_with_id else None,
        "payout": _money(participant.payout),
        "payout_at": _iso(participant.payout_at),
        "joined_at": _iso(participant.joined_at),
    }


def serialize_join_request(join_request: EventJoinRequest):
    return {
        "id": join_request.id,
        "event_id": join_request.event_id,
        "user_id": str(join_request.user_id),
        "prediction": join_request.prediction,
        "amount": _money(join_request.amount),
        "status": join_request.status,
        "requested_at": _iso(join_request.requested_at),
        "responded_at": _iso(join_request.responded_at),
    }


def serialize_transaction(tx: Transaction):
    return {
        "id": tx.id,
        "type": tx.type,
        "amount": _money(tx.amount),
        "description": tx.description,
        "related_id": tx.related_id,
        "status": tx.status,
        "reference": tx.reference,
        "created_at": _iso(tx.created_at),
    }


def serialize_pool_stats(stats: dict):
    return {
        "total_pool": _money(stats["total_pool"]),
        "yes_pool": _money(stats["yes_pool"]),
        "no_pool": _money(stats["no_pool"]),
        "participants_count": stats["participants_count"],
    }


def serialize_settlement(summary: dict):
    return {
        "winners_count": summary["winners_count"],
        "total_payout": _money(summary["total_payout"]),
        "creator_fee": _money(summary["creator_fee"]),
    }
