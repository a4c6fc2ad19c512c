import json
from unittest.mock import patch

from django.test import TestCase

from .models import PaymentGateway
from .validators import CredentialCheck


class GatewayConfigTestMixin:
    def _put(self, url, payload):
        return self.client.put(url, data=json.dumps(payload), content_type="application/json")


class GatewayListTests(TestCase):
    def test_seeds_known_gateways(self):
        resp = self.client.get("/api/payment-gateway/")

        self.assertEqual(resp.status_code, 200)
        names = sorted(g["name"] for g in resp.json()["data"])
        self.assertEqual(names, ["cod", "razorpay", "stripe"])
        self.assertEqual(PaymentGateway.objects.count(), 3)

    def test_secrets_are_redacted(self):
        PaymentGateway.objects.create(name="razorpay", api_key="rzp_key", secret_key="s3cret", webhook_secret="whk_1234567890")

        data = {g["name"]: g for g in self.client.get("/api/payment-gateway/").json()["data"]}

        rzp = data["razorpay"]
        self.assertEqual(rzp["apiKey"], "rzp_key")
        self.assertTrue(rzp["hasSecretKey"])
        self.assertTrue(rzp["hasWebhookSecret"])
        self.assertNotIn("s3cret", json.dumps(data))
        self.assertNotIn("apiKey", data["cod"])


class GatewayUpdateTests(GatewayConfigTestMixin, TestCase):
    def test_unknown_gateway_rejected_without_write(self):
        resp = self._put("/api/payment-gateway/paypal", {"apiKey": "x"})

        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])
        self.assertFalse(PaymentGateway.objects.exists())

    def test_validator_failure_aborts_write(self):
        with patch("payments.views.connect_gateway", return_value=CredentialCheck(False, "Invalid Razorpay API Key or Secret Key")):
            resp = self._put("/api/payment-gateway/razorpay", {"apiKey": "k", "secretKey": "bad"})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Invalid Razorpay API Key or Secret Key")
        self.assertFalse(PaymentGateway.objects.filter(name="razorpay").exists())

    def test_validator_sees_merged_credentials(self):
        PaymentGateway.objects.create(name="razorpay", api_key="stored_key", secret_key="stored_secret")
        with patch("payments.views.connect_gateway", return_value=CredentialCheck(True, "ok")) as connect:
            resp = self._put("/api/payment-gateway/razorpay", {"secretKey": "new_secret"})

        self.assertEqual(resp.status_code, 200)
        connect.assert_called_once_with(
            "razorpay", {"api_key": "stored_key", "secret_key": "new_secret", "webhook_secret": ""}
        )
        gateway = PaymentGateway.objects.get(name="razorpay")
        self.assertEqual(gateway.api_key, "stored_key")
        self.assertEqual(gateway.secret_key, "new_secret")

    def test_successful_update_returns_redacted_view(self):
        with patch("payments.views.connect_gateway", return_value=CredentialCheck(True, "ok")):
            resp = self._put("/api/payment-gateway/stripe", {"apiKey": "pk_1", "secretKey": "sk_test_1", "isActive": True})

        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["name"], "stripe")
        self.assertTrue(data["isActive"])
        self.assertTrue(data["hasSecretKey"])
        self.assertNotIn("secretKey", data)
        self.assertNotIn("apiKey", data)

    def test_enable_without_api_key_rejected(self):
        PaymentGateway.objects.create(name="razorpay", is_active=False)

        with patch("payments.views.connect_gateway") as connect:
            resp = self._put("/api/payment-gateway/razorpay", {"isActive": True})

        connect.assert_not_called()
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(PaymentGateway.objects.get(name="razorpay").is_active)

    def test_clearing_api_key_of_active_gateway_rejected(self):
        PaymentGateway.objects.create(name="stripe", api_key="pk_1", secret_key="sk_test_1", is_active=True)

        with patch("payments.views.connect_gateway", return_value=CredentialCheck(True, "ok")):
            resp = self._put("/api/payment-gateway/stripe", {"apiKey": ""})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "API Key is required to enable the payment gateway")
        gateway = PaymentGateway.objects.get(name="stripe")
        self.assertEqual(gateway.api_key, "pk_1")
        self.assertTrue(gateway.is_active)

    def test_non_string_credentials_rejected(self):
        with patch("payments.views.connect_gateway") as connect:
            resp = self._put("/api/payment-gateway/stripe", {"secretKey": 12345})

        connect.assert_not_called()
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "secretKey must be a string")
        self.assertFalse(PaymentGateway.objects.exists())

    def test_cod_enabled_without_key(self):
        resp = self._put("/api/payment-gateway/cod", {"isActive": True})

        self.assertEqual(resp.status_code, 200)
        self.assertTrue(PaymentGateway.objects.get(name="cod").is_active)


class GatewayToggleTests(GatewayConfigTestMixin, TestCase):
    def test_is_active_must_be_boolean(self):
        resp = self._put("/api/payment-gateway/cod/toggle", {"isActive": "yes"})
        self.assertEqual(resp.status_code, 400)

    def test_cod_created_on_first_toggle(self):
        resp = self._put("/api/payment-gateway/cod/toggle", {"isActive": True})

        self.assertEqual(resp.status_code, 200)
        self.assertTrue(PaymentGateway.objects.get(name="cod").is_active)

    def test_unconfigured_online_gateway_rejected(self):
        resp = self._put("/api/payment-gateway/stripe/toggle", {"isActive": True})

        self.assertEqual(resp.status_code, 400)
        self.assertFalse(PaymentGateway.objects.exists())

    def test_enable_requires_api_key(self):
        PaymentGateway.objects.create(name="stripe", secret_key="sk_test_1")

        resp = self._put("/api/payment-gateway/stripe/toggle", {"isActive": True})

        self.assertEqual(resp.status_code, 400)
        self.assertFalse(PaymentGateway.objects.get(name="stripe").is_active)

    def test_disable_always_allowed(self):
        PaymentGateway.objects.create(name="razorpay", api_key="k", is_active=True)

        resp = self._put("/api/payment-gateway/razorpay/toggle", {"isActive": False})

        self.assertEqual(resp.status_code, 200)
        self.assertFalse(PaymentGateway.objects.get(name="razorpay").is_active)


class ActiveGatewaysTests(TestCase):
    def test_only_active_gateways_listed(self):
        PaymentGateway.objects.create(name="razorpay", api_key="rzp_key", secret_key="s", is_active=True)
        PaymentGateway.objects.create(name="stripe", api_key="pk_1", is_active=False)

        resp = self.client.get("/api/payment-gateway/active")

        self.assertEqual(resp.json()["data"], [{"name": "razorpay", "apiKey": "rzp_key"}])
