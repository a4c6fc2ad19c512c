from unittest.mock import patch

from django.test import SimpleTestCase, TestCase, override_settings


@override_settings(DEBUG=False)
class NotFoundHandlerTests(SimpleTestCase):
    def test_unknown_url_returns_json_404(self):
        response = self.client.get('/this-url-does-not-exist/')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"success": False, "message": "Not found"})


class ApiExceptionTests(TestCase):
    def test_unhandled_api_error_becomes_json_500(self):
        with patch("payments.views.PaymentGateway.objects.all", side_effect=RuntimeError("boom")):
            with self.assertLogs("retailops.middleware", level="ERROR"):
                response = self.client.get("/api/payment-gateway/")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "message": "Internal server error", "error": "boom"})
