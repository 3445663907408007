import logging

from django.core.exceptions import ImproperlyConfigured
from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from ..services.auth import require_user
from ..services.eventpool import (
    approve_join_request,
    create_event,
    get_event,
    get_stats,
    join_event,
    list_by_event,
    list_join_requests,
    reject_join_request,
    request_join,
)
from ..services.eventpool.errors import PermissionDeniedError, PoolError
from ..services.serializers import (
    serialize_event,
    serialize_join_request,
    serialize_participant,
    serialize_pool_stats,
)
from .common import _amount_from_payload, _auth_error, _json_error, _parse_json, _pool_error

logger = logging.getLogger(__name__)


def _parse_datetime(value):
    if not value:
        return None
    dt = parse_datetime(value)
    if dt is None:
        return None
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt)
    return dt


@csrf_exempt
@require_http_methods(["POST"])
def create_event_view(request):
    """
    POST /api/events/

    Any authenticated user may create an event and becomes its creator.

    Request body:
    {
        "title": "Will it rain in Lagos tomorrow?",
        "entry_fee": "500",
        "betting_model": "fixed",      // or "custom"
        "category": "weather",
        "is_private": false,
        "max_participants": 100,
        "end_date": "2025-01-04T12:00:00Z"
    }
    """
    user, error = require_user(request)
    if error:
        return _auth_error(error)

    data, error = _parse_json(request)
    if error:
        return error

    if not data.get("end_date"):
        return _json_error("end_date is required", "MISSING_PARAM")
    end_date = _parse_datetime(data["end_date"])
    if end_date is None:
        return _json_error("end_date must be an ISO 8601 datetime", "INVALID_PARAM")

    try:
        event = create_event(
            creator_id=user.id,
            title=data.get("title"),
            entry_fee=_amount_from_payload(data.get("entry_fee")),
            betting_model=data.get("betting_model") or "fixed",
            category=data.get("category") or "general",
            description=data.get("description") or "",
            is_private=bool(data.get("is_private", False)),
            max_participants=data.get("max_participants"),
            end_date=end_date,
        )
    except PoolError as e:
        return _pool_error(e)
    except ImproperlyConfigured as e:
        return _json_error(str(e), "INVALID_PARAM")
    except Exception as e:
        logger.exception("Error creating event: %s", e)
        return _json_error("Internal server error", "INTERNAL_ERROR", status=500)

    return JsonResponse(serialize_event(event), status=201)


@require_http_methods(["GET"])
def pool_stats(request, event_id: int):
    """GET /api/events/<event_id>/pool/"""
    try:
        stats = get_stats(event_id)
    except PoolError as e:
        return _pool_error(e)
    return JsonResponse(serialize_pool_stats(stats), status=200)


@csrf_exempt
@require_http_methods(["POST"])
def join(request, event_id: int):
    """
    POST /api/events/<event_id>/join/

    Request body:
    {
        "prediction": true,   // true = YES, false = NO
        "amount": "500"       // optional for fixed events (defaults to the entry fee)
    }

    Public events debit the stake immediately and return the participant.
    Private events create a pending join request for the creator instead.
    """
    user, error = require_user(request)
    if error:
        return _auth_error(error)

    data, error = _parse_json(request)
    if error:
        return error

    prediction = data.get("prediction")
    if not isinstance(prediction, bool):
        return _json_error("prediction must be true or false", "MISSING_PARAM")

    try:
        event = get_event(event_id)
        amount = _amount_from_payload(data.get("amount"))
        if amount is None:
            amount = event.entry_fee

        if event.is_private:
            join_request = request_join(event.id, user.id, prediction, amount)
            return JsonResponse(
                {
                    "message": "Join request sent to event creator",
                    "request": serialize_join_request(join_request),
                },
                status=202,
            )

        participant = join_event(event.id, user.id, prediction, amount)
    except PoolError as e:
        return _pool_error(e)
    except Exception as e:
        logger.exception("Error joining event %s: %s", event_id, e)
        return _json_error("Internal server error", "INTERNAL_ERROR", status=500)

    return JsonResponse(serialize_participant(participant), status=201)


@require_http_methods(["GET"])
def participants(request, event_id: int):
    """GET /api/events/<event_id>/participants/"""
    try:
        get_event(event_id)
    except PoolError as e:
        return _pool_error(e)
    items = [serialize_participant(p) for p in list_by_event(event_id)]
    return JsonResponse({"items": items}, status=200)


@require_http_methods(["GET"])
def join_requests(request, event_id: int):
    """GET /api/events/<event_id>/join-requests/ (event creator only)"""
    user, error = require_user(request)
    if error:
        return _auth_error(error)

    try:
        event = get_event(event_id)
        if event.creator_id != user.id:
            raise PermissionDeniedError("Only the event creator can view join requests")
        items = [serialize_join_request(r) for r in list_join_requests(event_id)]
    except PoolError as e:
        return _pool_error(e)
    return JsonResponse({"items": items}, status=200)


@csrf_exempt
@require_http_methods(["POST"])
def approve_request(request, request_id: int):
    """POST /api/events/join-requests/<request_id>/approve/"""
    user, error = require_user(request)
    if error:
        return _auth_error(error)

    try:
        participant = approve_join_request(request_id, user.id)
    except PoolError as e:
        return _pool_error(e)
    except Exception as e:
        logger.exception("Error approving join request %s: %s", request_id, e)
        return _json_error("Internal server error", "INTERNAL_ERROR", status=500)

    return JsonResponse(serialize_participant(participant), status=200)


@csrf_exempt
@require_http_methods(["POST"])
def reject_request(request, request_id: int):
    """POST /api/events/join-requests/<request_id>/reject/"""
    user, error = require_user(request)
    if error:
        return _auth_error(error)

    try:
        join_request = reject_join_request(request_id, user.id)
    except PoolError as e:
        return _pool_error(e)

    return JsonResponse(serialize_join_request(join_request), status=200)
