import json
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from retailops.tests.helpers import auth_headers
from .models import Coupon


def make_coupon(**overrides) -> Coupon:
    now = timezone.now()
    fields = {
        "code": "SAVE10",
        "discount_type": "percentage",
        "discount_value": Decimal("10"),
        "valid_from": now - timedelta(days=1),
        "valid_until": now + timedelta(days=30),
    }
    fields.update(overrides)
    return Coupon.objects.create(**fields)


class CouponRedemptionTests(TestCase):
    def test_active_coupon_in_window(self):
        self.assertTrue(make_coupon().is_redeemable())

    def test_inactive_or_outside_window(self):
        now = timezone.now()
        self.assertFalse(make_coupon(code="OFF", is_active=False).is_redeemable())
        self.assertFalse(make_coupon(code="LATER", valid_from=now + timedelta(days=1)).is_redeemable())
        self.assertFalse(make_coupon(code="GONE", valid_until=now - timedelta(seconds=1)).is_redeemable())

    def test_usage_limit(self):
        coupon = make_coupon(max_usage_count=5, current_usage_count=5)
        self.assertFalse(coupon.is_redeemable())

    def test_single_use_allows_one_redemption(self):
        coupon = make_coupon(usage_type="single-use")
        self.assertTrue(coupon.is_redeemable())

        coupon.current_usage_count = 1
        self.assertFalse(coupon.is_redeemable())

    def test_percentage_discount_is_capped(self):
        coupon = make_coupon(discount_value=Decimal("20"), max_discount_amount=Decimal("50"))

        self.assertEqual(coupon.discount_for(100), Decimal("20.00"))
        self.assertEqual(coupon.discount_for(1000), Decimal("50.00"))

    def test_flat_discount_never_exceeds_order(self):
        coupon = make_coupon(discount_type="flat", discount_value=Decimal("150"), min_order_value=Decimal("100"))

        self.assertEqual(coupon.discount_for(99), Decimal("0"))
        self.assertEqual(coupon.discount_for(120), Decimal("120.00"))
        self.assertEqual(coupon.discount_for(500), Decimal("150.00"))


class CouponApiTests(TestCase):
    def _post(self, payload):
        return self.client.post("/api/coupons/", data=json.dumps(payload), content_type="application/json", **auth_headers())

    def test_create(self):
        resp = self._post({
            "code": "welcome25",
            "discountType": "flat",
            "discountValue": 25,
            "validFrom": "2026-01-01T00:00:00Z",
            "validUntil": "2026-12-31T23:59:59Z",
            "applicableCategories": ["fruits"],
        })

        self.assertEqual(resp.status_code, 201, resp.content)
        data = resp.json()["data"]
        self.assertEqual(data["code"], "WELCOME25")
        self.assertEqual(data["usageType"], "multi-use")
        self.assertTrue(data["isActive"])
        self.assertEqual(Coupon.objects.get().applicable_categories, ["fruits"])

    def test_duplicate_code(self):
        make_coupon(code="SAVE10")

        resp = self._post({
            "code": "save10", "discountType": "percentage", "discountValue": 5,
            "validFrom": "2026-01-01", "validUntil": "2026-02-01",
        })

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["errors"], ["Coupon code already exists"])

    def test_invalid_payload_reports_all_errors(self):
        resp = self._post({
            "code": "BIG", "discountType": "percentage", "discountValue": 150,
            "validFrom": "2026-03-01", "validUntil": "2026-02-01",
        })

        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertEqual(body["message"], "Validation failed")
        self.assertEqual(
            sorted(body["errors"]),
            ["Percentage discount cannot exceed 100", "validUntil must be after validFrom"],
        )
        self.assertFalse(Coupon.objects.exists())

    def test_list_filters(self):
        make_coupon(code="SAVE10", description="Summer sale")
        make_coupon(code="OLD5", is_active=False)

        active = self.client.get("/api/coupons/?isActive=true", **auth_headers()).json()["data"]
        found = self.client.get("/api/coupons/?search=summer", **auth_headers()).json()["data"]

        self.assertEqual([c["code"] for c in active], ["SAVE10"])
        self.assertEqual([c["code"] for c in found], ["SAVE10"])

    def test_requires_token(self):
        self.assertEqual(self.client.get("/api/coupons/").status_code, 401)
