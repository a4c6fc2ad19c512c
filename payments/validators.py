"""Check payment-gateway credentials against the provider before they are stored.

Each provider gets one validator function; :data:`CREDENTIAL_VALIDATORS`
maps a :class:`~payments.models.GatewayName` member to it so that an
unknown name never silently falls through to a provider branch.
"""

import logging
from typing import Callable, Dict, NamedTuple

import requests
from django.conf import settings
from requests import RequestException
from requests.auth import HTTPBasicAuth

from .models import GatewayName

logger = logging.getLogger(__name__)


class CredentialCheck(NamedTuple):
    valid: bool
    message: str


def _timeout() -> float:
    return getattr(settings, "GATEWAY_VALIDATION_TIMEOUT", 10)


def _error_body(resp) -> dict:
    try: data = resp.json()
    except Exception: return {}
    error = data.get("error") if isinstance(data, dict) else None
    return error if isinstance(error, dict) else {}


def validate_razorpay(api_key: str, secret_key: str) -> CredentialCheck:
    if not api_key or not secret_key:
        return CredentialCheck(False, "API Key and Secret Key are required for Razorpay")

    base = getattr(settings, "RAZORPAY_API_BASE", "https://api.razorpay.com").rstrip("/")
    try:
        # Listing a single payment is the cheapest authenticated call
        resp = requests.get(
            f"{base}/v1/payments",
            params={"count": 1},
            auth=HTTPBasicAuth(api_key, secret_key),
            timeout=_timeout(),
        )
    except RequestException as e:
        logger.warning("Razorpay validation request failed: %s", e)
        return CredentialCheck(False, f"Could not reach Razorpay: {e}")

    if resp.status_code == 200:
        return CredentialCheck(True, "Razorpay credentials validated successfully")
    logger.warning("Razorpay validation rejected: status=%s", resp.status_code)
    if resp.status_code == 401:
        return CredentialCheck(False, "Invalid Razorpay API Key or Secret Key")
    if resp.status_code == 400:
        return CredentialCheck(False, "Bad request to Razorpay API. Please check your credentials")
    return CredentialCheck(
        False, _error_body(resp).get("description") or "Failed to validate Razorpay credentials"
    )


def validate_stripe(secret_key: str) -> CredentialCheck:
    if not secret_key:
        return CredentialCheck(False, "Secret Key is required for Stripe")
    if not secret_key.startswith("sk_"):
        return CredentialCheck(False, "Invalid Stripe Secret Key format. Must start with 'sk_'")

    base = getattr(settings, "STRIPE_API_BASE", "https://api.stripe.com").rstrip("/")
    try:
        resp = requests.get(
            f"{base}/v1/balance",
            headers={"Authorization": f"Bearer {secret_key}"},
            timeout=_timeout(),
        )
    except RequestException as e:
        logger.warning("Stripe validation request failed: %s", e)
        return CredentialCheck(False, f"Could not reach Stripe: {e}")

    if resp.status_code == 200:
        return CredentialCheck(True, "Stripe credentials validated successfully")
    logger.warning("Stripe validation rejected: status=%s", resp.status_code)
    if resp.status_code == 401:
        return CredentialCheck(False, "Invalid Stripe Secret Key")
    return CredentialCheck(
        False, _error_body(resp).get("message") or "Failed to validate Stripe credentials"
    )


def validate_cod() -> CredentialCheck:
    return CredentialCheck(True, "Cash on Delivery enabled successfully")


CREDENTIAL_VALIDATORS: Dict[GatewayName, Callable[[dict], CredentialCheck]] = {
    GatewayName.RAZORPAY: lambda c: validate_razorpay(c.get("api_key", ""), c.get("secret_key", "")),
    GatewayName.STRIPE: lambda c: validate_stripe(c.get("secret_key", "")),
    GatewayName.COD: lambda c: validate_cod(),
}


def validate_credentials(gateway_name: str, credentials: dict) -> CredentialCheck:
    """Dispatch ``credentials`` (api_key/secret_key/webhook_secret) to the provider's validator."""
    try:
        gateway = GatewayName(gateway_name)
    except ValueError:
        return CredentialCheck(False, f"Unsupported payment gateway: {gateway_name}")
    return CREDENTIAL_VALIDATORS[gateway](credentials)


def validate_webhook_secret(webhook_secret: str, gateway_name: str) -> CredentialCheck:
    """Format check only; the secret is optional."""
    if not webhook_secret:
        return CredentialCheck(True, "Webhook secret not provided (optional)")
    if gateway_name == GatewayName.RAZORPAY and len(webhook_secret) < 10:
        return CredentialCheck(False, "Razorpay webhook secret is too short (minimum 10 characters)")
    if gateway_name == GatewayName.STRIPE and not webhook_secret.startswith("whsec_"):
        return CredentialCheck(False, "Invalid Stripe webhook secret format. Must start with 'whsec_'")
    return CredentialCheck(True, "Webhook secret format is valid")


def connect_gateway(gateway_name: str, credentials: dict) -> CredentialCheck:
    """Validate provider credentials, then the webhook secret when one is set."""
    check = validate_credentials(gateway_name, credentials)
    if not check.valid or gateway_name == GatewayName.COD:
        return check
    webhook_secret = credentials.get("webhook_secret") or ""
    if webhook_secret:
        secret_check = validate_webhook_secret(webhook_secret, gateway_name)
        if not secret_check.valid:
            return secret_check
    return CredentialCheck(True, f"{GatewayName(gateway_name).label} connected successfully")
