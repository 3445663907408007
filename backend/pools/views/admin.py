"""
Admin views for event result declaration, payout and capacity.

These endpoints are intended for admin users only.
"""

import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from ..services.auth import require_admin
from ..services.eventpool import admin_set_result, get_event, process_payout, update_event_capacity
from ..services.eventpool.errors import PoolError
from ..services.serializers import serialize_event, serialize_settlement
from .common import _auth_error, _json_error, _parse_json, _pool_error

logger = logging.getLogger(__name__)


def _payout_message(summary: dict) -> str:
    if summary["winners_count"] == 0:
        return (
            "Event has no participants for the declared outcome: "
            f"pool of {summary['total_payout']} paid to creator."
        )
    return (
        f"Payout processed: {summary['winners_count']} winners received "
        f"{summary['total_payout']} total, {summary['creator_fee']} creator fee."
    )


@csrf_exempt
@require_http_methods(["POST"])
def admin_set_event_result(request, event_id: int) -> JsonResponse:
    """
    POST /api/admin/events/<event_id>/result/

    Declare the outcome of an event. Does not pay out; call /payout/ next.

    Request body:
    {
        "result": true   // true = YES, false = NO
    }
    """
    admin_user, error = require_admin(request)
    if error:
        return _auth_error(error)

    data, error = _parse_json(request)
    if error:
        return error

    result = data.get("result")
    if not isinstance(result, bool):
        return _json_error("result must be true or false", "MISSING_PARAM", status=400)

    logger.info(
        "Admin %s setting result for event %s: %s",
        admin_user.id,
        event_id,
        "YES" if result else "NO",
    )

    try:
        event = admin_set_result(event_id, result, resolved_by_user_id=admin_user.id)
    except PoolError as e:
        return _pool_error(e)
    except Exception as e:
        logger.exception("Error setting result for event %s: %s", event_id, e)
        return _json_error("Internal server error", "INTERNAL_ERROR", status=500)

    return JsonResponse(
        {
            "event": serialize_event(event),
            "message": f"Event result set to {'YES' if result else 'NO'}.",
        }
    )


@csrf_exempt
@require_http_methods(["POST"])
def admin_process_payout(request, event_id: int) -> JsonResponse:
    """
    POST /api/admin/events/<event_id>/payout/

    Settle an event whose result has been declared.

    Response:
    {
        "event": { ... },
        "payout": {"winners_count": 2, "total_payout": "970.00", "creator_fee": "30.00"},
        "message": "..."
    }
    """
    admin_user, error = require_admin(request)
    if error:
        return _auth_error(error)

    try:
        summary = process_payout(event_id)
        event = get_event(event_id)
    except PoolError as e:
        return _pool_error(e)
    except Exception as e:
        logger.exception("Error processing payout for event %s: %s", event_id, e)
        return _json_error("Internal server error", "INTERNAL_ERROR", status=500)

    logger.info(
        "Event %s payout processed by %s: winners=%s, total_payout=%s, creator_fee=%s",
        event_id,
        admin_user.id,
        summary["winners_count"],
        summary["total_payout"],
        summary["creator_fee"],
    )

    return JsonResponse(
        {
            "event": serialize_event(event),
            "payout": serialize_settlement(summary),
            "message": _payout_message(summary),
        }
    )


@csrf_exempt
@require_http_methods(["POST"])
def admin_update_event_capacity(request, event_id: int) -> JsonResponse:
    """
    POST /api/admin/events/<event_id>/capacity/

    Add participant slots to an event.

    Request body:
    {
        "additional_slots": 50
    }
    """
    admin_user, error = require_admin(request)
    if error:
        return _auth_error(error)

    data, error = _parse_json(request)
    if error:
        return error

    try:
        event = update_event_capacity(event_id, data.get("additional_slots"))
    except PoolError as e:
        return _pool_error(e)

    logger.info(
        "Admin %s added %s slots to event %s",
        admin_user.id,
        data.get("additional_slots"),
        event_id,
    )
    return JsonResponse({"event": serialize_event(event)})
