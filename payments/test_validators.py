from unittest.mock import patch

import requests
from django.test import SimpleTestCase, override_settings

from . import validators


class FakeResponse:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


@override_settings(RAZORPAY_API_BASE="https://rzp.test", GATEWAY_VALIDATION_TIMEOUT=10)
class RazorpayValidatorTests(SimpleTestCase):
    def test_missing_keys_skip_network(self):
        with patch("payments.validators.requests.get") as get:
            check = validators.validate_razorpay("rzp_test_key", "")
        get.assert_not_called()
        self.assertFalse(check.valid)
        self.assertIn("required", check.message)

    def test_ok_response_is_valid_and_uses_basic_auth(self):
        with patch("payments.validators.requests.get", return_value=FakeResponse(200, {})) as get:
            check = validators.validate_razorpay("rzp_test_key", "secret")
        self.assertTrue(check.valid)
        self.assertEqual(get.call_args.args[0], "https://rzp.test/v1/payments")
        auth = get.call_args.kwargs["auth"]
        self.assertEqual((auth.username, auth.password), ("rzp_test_key", "secret"))
        self.assertEqual(get.call_args.kwargs["timeout"], 10)

    def test_unauthorized(self):
        with patch("payments.validators.requests.get", return_value=FakeResponse(401)):
            check = validators.validate_razorpay("k", "s")
        self.assertFalse(check.valid)
        self.assertEqual(check.message, "Invalid Razorpay API Key or Secret Key")

    def test_bad_request(self):
        with patch("payments.validators.requests.get", return_value=FakeResponse(400)):
            check = validators.validate_razorpay("k", "s")
        self.assertEqual(check.message, "Bad request to Razorpay API. Please check your credentials")

    def test_other_error_surfaces_provider_description(self):
        body = {"error": {"description": "Account suspended"}}
        with patch("payments.validators.requests.get", return_value=FakeResponse(403, body)):
            check = validators.validate_razorpay("k", "s")
        self.assertEqual(check.message, "Account suspended")

    def test_other_error_without_body_uses_fallback(self):
        with patch("payments.validators.requests.get", return_value=FakeResponse(502)):
            check = validators.validate_razorpay("k", "s")
        self.assertEqual(check.message, "Failed to validate Razorpay credentials")

    def test_timeout_reported_once(self):
        with patch("payments.validators.requests.get", side_effect=requests.Timeout("timed out")) as get:
            check = validators.validate_razorpay("k", "s")
        self.assertFalse(check.valid)
        self.assertEqual(get.call_count, 1)


@override_settings(STRIPE_API_BASE="https://stripe.test")
class StripeValidatorTests(SimpleTestCase):
    def test_secret_key_prefix_checked_before_network(self):
        with patch("payments.validators.requests.get") as get:
            check = validators.validate_stripe("pk_live_123")
        get.assert_not_called()
        self.assertFalse(check.valid)
        self.assertIn("sk_", check.message)

    def test_ok_response_uses_bearer_auth(self):
        with patch("payments.validators.requests.get", return_value=FakeResponse(200, {})) as get:
            check = validators.validate_stripe("sk_test_123")
        self.assertTrue(check.valid)
        self.assertEqual(get.call_args.args[0], "https://stripe.test/v1/balance")
        self.assertEqual(get.call_args.kwargs["headers"]["Authorization"], "Bearer sk_test_123")

    def test_unauthorized(self):
        with patch("payments.validators.requests.get", return_value=FakeResponse(401)):
            check = validators.validate_stripe("sk_test_123")
        self.assertEqual(check.message, "Invalid Stripe Secret Key")

    def test_other_error_surfaces_provider_message(self):
        body = {"error": {"message": "Rate limited"}}
        with patch("payments.validators.requests.get", return_value=FakeResponse(429, body)):
            check = validators.validate_stripe("sk_test_123")
        self.assertEqual(check.message, "Rate limited")


class DispatchTests(SimpleTestCase):
    def test_cod_is_always_valid_without_network(self):
        with patch("payments.validators.requests.get") as get:
            check = validators.validate_credentials("cod", {})
        get.assert_not_called()
        self.assertTrue(check.valid)

    def test_unknown_gateway(self):
        check = validators.validate_credentials("paypal", {})
        self.assertFalse(check.valid)
        self.assertEqual(check.message, "Unsupported payment gateway: paypal")

    def test_connect_rejects_bad_webhook_secret_after_valid_keys(self):
        creds = {"api_key": "k", "secret_key": "s", "webhook_secret": "short"}
        with patch("payments.validators.requests.get", return_value=FakeResponse(200, {})):
            check = validators.connect_gateway("razorpay", creds)
        self.assertFalse(check.valid)
        self.assertIn("minimum 10 characters", check.message)


class WebhookSecretFormatTests(SimpleTestCase):
    def test_optional(self):
        self.assertTrue(validators.validate_webhook_secret("", "razorpay").valid)

    def test_razorpay_minimum_length(self):
        self.assertFalse(validators.validate_webhook_secret("123456789", "razorpay").valid)
        self.assertTrue(validators.validate_webhook_secret("1234567890", "razorpay").valid)

    def test_stripe_prefix(self):
        self.assertFalse(validators.validate_webhook_secret("secret_abc", "stripe").valid)
        self.assertTrue(validators.validate_webhook_secret("whsec_abc", "stripe").valid)

    def test_same_input_same_verdict(self):
        first = validators.validate_webhook_secret("whsec_x", "stripe")
        second = validators.validate_webhook_secret("whsec_x", "stripe")
        self.assertEqual(first, second)
