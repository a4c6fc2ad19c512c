import time

import jwt
from django.http import JsonResponse
from django.test import RequestFactory, SimpleTestCase, override_settings

from retailops.auth import token_required
from .helpers import make_token


@token_required
def protected(request):
    return JsonResponse({"sub": request.auth_claims["sub"]})


class TokenRequiredTests(SimpleTestCase):
    def setUp(self):
        self.factory = RequestFactory()

    def test_missing_token(self):
        response = protected(self.factory.get("/api/x"))
        self.assertEqual(response.status_code, 401)
        self.assertIn(b"Access token is required", response.content)

    def test_bearer_header(self):
        request = self.factory.get("/api/x", HTTP_AUTHORIZATION=f"Bearer {make_token(sub='admin-7')}")
        response = protected(request)
        self.assertEqual(response.status_code, 200)
        self.assertIn(b"admin-7", response.content)

    def test_cookie_fallback(self):
        request = self.factory.get("/api/x")
        request.COOKIES["token"] = make_token()
        self.assertEqual(protected(request).status_code, 200)

    def test_expired_token(self):
        request = self.factory.get("/api/x", HTTP_AUTHORIZATION=f"Bearer {make_token(exp=int(time.time()) - 60)}")
        response = protected(request)
        self.assertEqual(response.status_code, 401)
        self.assertIn(b"Token has expired", response.content)

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "admin-1"}, "some-other-secret", algorithm="HS256")
        request = self.factory.get("/api/x", HTTP_AUTHORIZATION=f"Bearer {token}")
        with self.assertLogs("retailops.auth", level="WARNING"):
            response = protected(request)
        self.assertEqual(response.status_code, 401)
        self.assertIn(b"Invalid access token", response.content)
