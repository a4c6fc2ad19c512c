import logging
from functools import wraps

import jwt
from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def _extract_token(request) -> str:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth.split(" ", 1)[1].strip()
    return request.COOKIES.get("token", "")


def decode_token(token: str) -> dict:
    """Verify an admin bearer token and return its claims.

    Raises :class:`jwt.PyJWTError` when the token is malformed, expired or
    signed with another secret.
    """
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


def token_required(view):
    """Reject the request with 401 unless it carries a valid bearer token.

    The token is read from the ``Authorization: Bearer`` header first and
    from the ``token`` cookie second. Decoded claims end up on
    ``request.auth_claims``.
    """

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        token = _extract_token(request)
        if not token:
            return JsonResponse({"success": False, "message": "Access token is required"}, status=401)
        try:
            request.auth_claims = decode_token(token)
        except jwt.ExpiredSignatureError:
            return JsonResponse({"success": False, "message": "Token has expired"}, status=401)
        except jwt.PyJWTError:
            logger.warning("Rejected invalid access token on %s", request.path)
            return JsonResponse({"success": False, "message": "Invalid access token"}, status=401)
        return view(request, *args, **kwargs)

    return wrapper
