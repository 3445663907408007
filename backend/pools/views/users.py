from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from ..services.auth import require_user
from ..services.eventpool import get_balance, list_transactions, list_user_events
from ..services.serializers import serialize_event, serialize_participant, serialize_transaction
from .common import _auth_error, _json_error


@require_http_methods(["GET"])
def balance(request):
    user, error = require_user(request)
    if error:
        return _auth_error(error)

    result = get_balance(user.id)
    return JsonResponse(
        {"balance": str(result["balance"]), "coins": result["coins"]},
        status=200,
    )


@require_http_methods(["GET"])
def transactions(request):
    user, error = require_user(request)
    if error:
        return _auth_error(error)

    try:
        limit = int(request.GET.get("limit", 50))
    except (TypeError, ValueError):
        return _json_error("limit must be an integer", "INVALID_PARAM")
    limit = max(1, min(limit, 200))

    items = [serialize_transaction(tx) for tx in list_transactions(user.id, limit=limit)]
    return JsonResponse({"items": items}, status=200)


@require_http_methods(["GET"])
def joined_events(request):
    """GET /api/users/me/events/: the caller's participations, newest first."""
    user, error = require_user(request)
    if error:
        return _auth_error(error)

    items = [
        {
            "event": serialize_event(participant.event),
            "participation": serialize_participant(participant),
        }
        for participant in list_user_events(user.id)
    ]
    return JsonResponse({"items": items}, status=200)
