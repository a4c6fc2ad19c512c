import logging

from django.db import transaction

from .models import OnlineOrder

logger = logging.getLogger(__name__)


@transaction.atomic
def mark_payment_completed(order_number: str, payment_id: str):
    """Record a captured payment. Missing orders are left alone; orders are created by checkout only."""
    order = OnlineOrder.objects.select_for_update().filter(order_number=order_number).first()
    if order is None:
        logger.warning("Payment %s captured for unknown order %s", payment_id, order_number)
        return None
    if order.payment_status == "completed":
        return order  # idempotent
    order.payment_status = "completed"
    order.payment_id = payment_id or ""
    order.save(update_fields=["payment_status", "payment_id", "updated_at"])
    logger.info("Order %s marked completed (payment %s)", order_number, payment_id)
    return order


@transaction.atomic
def mark_payment_failed(order_number: str, payment_id: str):
    order = OnlineOrder.objects.select_for_update().filter(order_number=order_number).first()
    if order is None:
        logger.warning("Payment %s failed for unknown order %s", payment_id, order_number)
        return None
    order.payment_status = "failed"
    order.payment_id = payment_id or ""
    order.save(update_fields=["payment_status", "payment_id", "updated_at"])
    logger.info("Order %s marked failed (payment %s)", order_number, payment_id)
    return order
