"""Small JSON helpers shared by the API views."""

import json
import re

from django.http import JsonResponse


def json_body(request):
    try: return json.loads(request.body.decode("utf-8"))
    except Exception: return None


def error_response(message: str, status: int = 400, **extra) -> JsonResponse:
    """Return the ``{"success": false, "message": ...}`` body every endpoint uses for failures."""
    return JsonResponse({"success": False, "message": message, **extra}, status=status)


def paginate(qs, request, default_limit=10):
    """Very light page/limit pagination; returns (items, pagination dict)."""
    try:
        page = int(request.GET.get("page", "1"))
        if page < 1: page = 1
    except Exception:
        page = 1
    try:
        limit = int(request.GET.get("limit", str(default_limit)))
        if limit < 1: limit = default_limit
    except Exception:
        limit = default_limit
    start = (page - 1) * limit
    end = start + limit
    total = qs.count()
    items = list(qs[start:end])
    return items, {
        "currentPage": page,
        "totalPages": (total + limit - 1) // limit,
        "totalCount": total,
        "hasNext": end < total,
        "hasPrev": page > 1,
    }


def snake_keys(data: dict) -> dict:
    """``{"vehicleNumber": ...}`` -> ``{"vehicle_number": ...}``; snake_case keys pass through."""
    return {re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower(): value for key, value in data.items()}
