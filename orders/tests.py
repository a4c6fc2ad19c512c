from django.test import TestCase

from .models import OnlineOrder
from .services import mark_payment_completed, mark_payment_failed


class PaymentStatusUpdateTests(TestCase):
    def test_pending_order_becomes_completed(self):
        OnlineOrder.objects.create(order_number="ORD-1")

        order = mark_payment_completed("ORD-1", "pay_123")

        order.refresh_from_db()
        self.assertEqual(order.payment_status, "completed")
        self.assertEqual(order.payment_id, "pay_123")

    def test_completed_order_is_not_overwritten(self):
        OnlineOrder.objects.create(order_number="ORD-2", payment_status="completed", payment_id="pay_first")

        mark_payment_completed("ORD-2", "pay_second")

        self.assertEqual(OnlineOrder.objects.get(order_number="ORD-2").payment_id, "pay_first")

    def test_unknown_order_is_a_no_op(self):
        with self.assertLogs("orders.services", level="WARNING"):
            self.assertIsNone(mark_payment_completed("ORD-404", "pay_1"))
        self.assertFalse(OnlineOrder.objects.exists())

    def test_failed_payment_recorded(self):
        OnlineOrder.objects.create(order_number="ORD-3")

        mark_payment_failed("ORD-3", "pay_9")

        order = OnlineOrder.objects.get(order_number="ORD-3")
        self.assertEqual(order.payment_status, "failed")
        self.assertEqual(order.payment_id, "pay_9")
