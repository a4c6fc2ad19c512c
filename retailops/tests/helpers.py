import jwt
from django.conf import settings


def make_token(**claims) -> str:
    payload = {"sub": "admin-1", "role": "admin", **claims}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers(**claims) -> dict:
    return {"HTTP_AUTHORIZATION": f"Bearer {make_token(**claims)}"}
