"""Operations summary for the admin dashboard.

Everything the landing page shows comes back in one response instead of
a fan-out of report calls merged in the browser.
"""

from django.db.models import Count
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

from coupons.models import Coupon
from delivery.models import DeliveryPartner
from orders.models import OnlineOrder
from payments.models import PaymentGateway
from retailops.auth import token_required


def _counts(qs, field: str, choices) -> dict:
    counts = {value: 0 for value, _ in choices}
    for row in qs.exclude(**{f"{field}__isnull": True}).values(field).annotate(n=Count("id")):
        counts[row[field]] = row["n"]
    return counts


@require_GET
@token_required
def summary_view(request):
    now = timezone.now()
    partners = DeliveryPartner.objects.all()
    application = _counts(partners, "application_status", DeliveryPartner.APPLICATION_STATUS)
    data = {
        "partners": {
            "total": sum(application.values()),
            "byApplicationStatus": application,
            "byPartnerStatus": _counts(partners, "partner_status", DeliveryPartner.PARTNER_STATUS),
        },
        "orders": {
            "byPaymentStatus": _counts(OnlineOrder.objects.all(), "payment_status", OnlineOrder.PAYMENT_STATUS),
        },
        "paymentGateways": {
            "active": sorted(PaymentGateway.objects.filter(is_active=True).values_list("name", flat=True)),
        },
        "coupons": {
            "active": Coupon.objects.filter(is_active=True, valid_from__lte=now, valid_until__gte=now).count(),
        },
        "generatedAt": now.isoformat(),
    }
    return JsonResponse({"success": True, "data": data})
