"""Signature helpers for Razorpay callbacks."""

import hashlib
import hmac


def hmac_sha256_hex(secret: str, message) -> str:
    if isinstance(message, str):
        message = message.encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_webhook_signature(raw_body: bytes, received_sig: str, webhook_secret: str) -> bool:
    """Check ``X-Razorpay-Signature`` against HMAC-SHA256 of the raw request body.

    Razorpay signs the exact bytes it sends, so the body must not be
    re-serialized before hashing.
    """
    if not webhook_secret:
        return False
    expected = hmac_sha256_hex(webhook_secret, raw_body)
    return hmac.compare_digest(expected, (received_sig or "").strip())


def verify_payment_signature(order_id: str, payment_id: str, received_sig: str, secret_key: str) -> bool:
    """Checkout callback check: HMAC-SHA256 of ``"<order_id>|<payment_id>"`` keyed with the API secret."""
    expected = hmac_sha256_hex(secret_key, f"{order_id}|{payment_id}")
    return hmac.compare_digest(expected, (received_sig or "").strip())
