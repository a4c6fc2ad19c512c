import logging

from django.db.models import Q
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from retailops.auth import token_required
from retailops.http import error_response, json_body, snake_keys
from .forms import CouponForm
from .models import Coupon

logger = logging.getLogger(__name__)


def _decimal(value):
    return float(value) if value is not None else None


def serialize_coupon(coupon: Coupon) -> dict:
    return {
        "id": coupon.pk,
        "code": coupon.code,
        "description": coupon.description,
        "discountType": coupon.discount_type,
        "discountValue": float(coupon.discount_value),
        "usageType": coupon.usage_type,
        "maxUsageCount": coupon.max_usage_count,
        "currentUsageCount": coupon.current_usage_count,
        "validFrom": coupon.valid_from.isoformat(),
        "validUntil": coupon.valid_until.isoformat(),
        "minOrderValue": _decimal(coupon.min_order_value),
        "maxDiscountAmount": _decimal(coupon.max_discount_amount),
        "applicableCategories": coupon.applicable_categories or [],
        "isActive": coupon.is_active,
        "isRedeemable": coupon.is_redeemable(),
        "createdAt": coupon.created_at.isoformat(),
    }


@csrf_exempt
@require_http_methods(["GET", "POST"])
@token_required
def coupon_collection_view(request):
    if request.method == "POST":
        return _create_coupon(request)

    qs = Coupon.objects.all()
    is_active = request.GET.get("isActive")
    if is_active is not None:
        qs = qs.filter(is_active=is_active == "true")
    search = request.GET.get("search", "").strip()
    if search:
        qs = qs.filter(Q(code__icontains=search) | Q(description__icontains=search))
    return JsonResponse({"success": True, "data": [serialize_coupon(c) for c in qs]})


def _create_coupon(request):
    body = json_body(request)
    if not isinstance(body, dict):
        return error_response("Invalid JSON body")
    form = CouponForm(snake_keys(body))
    if not form.is_valid():
        return error_response("Validation failed", errors=form.error_list())
    coupon = form.save()
    logger.info("Created coupon %s", coupon.code)
    return JsonResponse(
        {"success": True, "message": "Coupon created successfully", "data": serialize_coupon(coupon)},
        status=201,
    )
