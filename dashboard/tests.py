from django.test import TestCase

from coupons.tests import make_coupon
from delivery.tests import make_partner
from orders.models import OnlineOrder
from payments.models import PaymentGateway
from retailops.tests.helpers import auth_headers


class DashboardSummaryTests(TestCase):
    def test_requires_token(self):
        self.assertEqual(self.client.get("/api/dashboard/summary").status_code, 401)

    def test_empty_database(self):
        data = self.client.get("/api/dashboard/summary", **auth_headers()).json()["data"]

        self.assertEqual(data["partners"]["total"], 0)
        self.assertEqual(data["partners"]["byApplicationStatus"], {"pending": 0, "verified": 0, "approved": 0, "rejected": 0})
        self.assertEqual(data["paymentGateways"]["active"], [])
        self.assertEqual(data["coupons"]["active"], 0)

    def test_counts_across_apps(self):
        make_partner()
        make_partner(application_status="verified")
        make_partner(application_status="approved", partner_status="active", partner_id="DP001")
        make_partner(application_status="approved", partner_status="suspended", partner_id="DP002")
        OnlineOrder.objects.create(order_number="ORD-1", payment_status="completed")
        OnlineOrder.objects.create(order_number="ORD-2")
        PaymentGateway.objects.create(name="razorpay", api_key="rzp", is_active=True)
        PaymentGateway.objects.create(name="cod", is_active=True)
        PaymentGateway.objects.create(name="stripe", is_active=False)
        make_coupon(code="A")
        make_coupon(code="B", is_active=False)

        resp = self.client.get("/api/dashboard/summary", **auth_headers())

        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["partners"]["total"], 4)
        self.assertEqual(data["partners"]["byApplicationStatus"]["approved"], 2)
        self.assertEqual(data["partners"]["byPartnerStatus"], {"active": 1, "inactive": 0, "suspended": 1})
        self.assertEqual(data["orders"]["byPaymentStatus"], {"pending": 1, "completed": 1, "failed": 0})
        self.assertEqual(data["paymentGateways"]["active"], ["cod", "razorpay"])
        self.assertEqual(data["coupons"]["active"], 1)
