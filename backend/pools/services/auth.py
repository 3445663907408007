from django.core.exceptions import ValidationError

from ..models import User


def get_user_from_request(request):
    """The auth gateway forwards the authenticated user id in X-User-Id."""
    user_id = request.headers.get("X-User-Id")
    if not user_id:
        return None
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValidationError):
        return None


def require_user(request):
    user = get_user_from_request(request)
    if not user:
        return None, {"error": "Unauthorized", "code": "UNAUTHORIZED", "status": 401}
    return user, None


def require_admin(request):
    user = get_user_from_request(request)
    if not user:
        return None, {"error": "Unauthorized", "code": "UNAUTHORIZED", "status": 401}
    if not user.is_admin:
        return None, {"error": "Admin access required", "code": "FORBIDDEN", "status": 403}
    return user, None
