import json
import logging

from django.http import JsonResponse

from ..services.eventpool.errors import PoolError

logger = logging.getLogger(__name__)


def _json_error(message: str, code: str, status: int = 400) -> JsonResponse:
    return JsonResponse({"error": message, "code": code}, status=status)


def _auth_error(error: dict) -> JsonResponse:
    return _json_error(error["error"], error["code"], status=error["status"])


def _pool_error(e: PoolError) -> JsonResponse:
    return JsonResponse(e.to_payload(), status=e.http_status)


def _parse_json(request):
    """Return (payload, error_response)."""
    try:
        payload = json.loads(request.body.decode() or "{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None, _json_error("Invalid JSON", "INVALID_JSON", status=400)
    if not isinstance(payload, dict):
        return None, _json_error("JSON body must be an object", "INVALID_JSON", status=400)
    return payload, None


def _amount_from_payload(raw):
    # JSON numbers arrive as float; keep their literal digits rather than the binary value.
    if isinstance(raw, float):
        return repr(raw)
    return raw
