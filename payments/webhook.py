import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from orders.services import mark_payment_completed, mark_payment_failed
from retailops.http import error_response, json_body
from .models import GatewayName, PaymentGateway
from .utils import verify_payment_signature, verify_webhook_signature

logger = logging.getLogger(__name__)


def _active_gateway(name: str):
    return PaymentGateway.objects.filter(name=name, is_active=True).first()


def _payment_entity(event_body: dict) -> dict:
    payment = ((event_body.get("payload") or {}).get("payment") or {})
    return payment.get("entity") or {}


def _handle_payment_captured(entity: dict) -> None:
    order_number = (entity.get("notes") or {}).get("orderNumber")
    if not order_number:
        logger.error("Order number not found in payment notes (payment %s)", entity.get("id"))
        return
    logger.info("Payment captured for order %s: %s", order_number, entity.get("id"))
    mark_payment_completed(order_number, entity.get("id") or "")


def _handle_payment_failed(entity: dict) -> None:
    order_number = (entity.get("notes") or {}).get("orderNumber")
    if not order_number:
        logger.error("Order number not found in payment notes (payment %s)", entity.get("id"))
        return
    logger.info("Payment failed for order %s: %s", order_number, entity.get("id"))
    mark_payment_failed(order_number, entity.get("id") or "")


EVENT_HANDLERS = {
    "payment.captured": _handle_payment_captured,
    "payment.failed": _handle_payment_failed,
}


@csrf_exempt
@require_POST
def razorpay_webhook(request):
    """Provider callback for Razorpay payment events.

    Fails closed when no active Razorpay row carries a webhook secret. Once
    the signature matches, the response is always ``{"success": true}``:
    the provider only needs to know the event was received, whether or not
    an order was updated.
    """
    gateway = _active_gateway(GatewayName.RAZORPAY)
    if gateway is None or not gateway.webhook_secret:
        logger.error("Razorpay webhook secret not configured")
        return error_response("Webhook not configured")

    signature = request.headers.get("X-Razorpay-Signature", "")
    if not verify_webhook_signature(request.body, signature, gateway.webhook_secret):
        logger.warning("Razorpay webhook signature verification failed")
        return error_response("Invalid webhook signature")

    try:
        event_body = json.loads(request.body.decode("utf-8"))
    except Exception:
        return error_response("Invalid JSON")
    if not isinstance(event_body, dict):
        return error_response("Invalid JSON")

    event = event_body.get("event") or ""
    logger.info("Received Razorpay webhook event: %s", event)
    handler = EVENT_HANDLERS.get(event)
    if handler is None:
        logger.info("Unhandled webhook event: %s", event)
    else:
        handler(_payment_entity(event_body))

    return JsonResponse({"success": True})


@csrf_exempt
@require_POST
def stripe_webhook(request):
    gateway = _active_gateway(GatewayName.STRIPE)
    if gateway is None or not gateway.webhook_secret:
        logger.error("Stripe webhook secret not configured")
        return error_response("Webhook not configured")

    # TODO: verify the Stripe-Signature header (t=...,v1=...) against gateway.webhook_secret
    logger.info("Received Stripe webhook (signature present: %s)", bool(request.headers.get("Stripe-Signature")))
    return JsonResponse({"success": True})


@csrf_exempt
@require_POST
def verify_payment_view(request):
    """Checkout confirmation right after the Razorpay redirect."""
    body = json_body(request)
    if not isinstance(body, dict):
        body = {}
    order_id = body.get("razorpay_order_id")
    payment_id = body.get("razorpay_payment_id")
    signature = body.get("razorpay_signature")
    if not (order_id and payment_id and signature):
        return error_response("Missing required payment verification parameters")

    gateway = _active_gateway(GatewayName.RAZORPAY)
    if gateway is None or not gateway.secret_key:
        logger.error("Razorpay gateway not configured")
        return error_response("Payment gateway not configured")

    if not verify_payment_signature(order_id, payment_id, signature, gateway.secret_key):
        logger.warning("Payment signature verification failed for %s", payment_id)
        return error_response("Invalid payment signature")

    logger.info("Payment verified: %s", payment_id)
    return JsonResponse({
        "success": True,
        "message": "Payment verified successfully",
        "data": {"orderId": order_id, "paymentId": payment_id},
    })
