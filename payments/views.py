import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from retailops.http import error_response, json_body
from .models import GatewayName, PaymentGateway
from .validators import connect_gateway

logger = logging.getLogger(__name__)

# request body key -> model field
CREDENTIAL_FIELDS = {
    "apiKey": "api_key",
    "secretKey": "secret_key",
    "webhookSecret": "webhook_secret",
}


def _gateway_or_error(gateway_name):
    if gateway_name not in GatewayName.values:
        return None, error_response("Invalid gateway name. Must be one of: razorpay, stripe, cod")
    return GatewayName(gateway_name), None


@require_GET
def gateway_list_view(request):
    """All gateways for the admin screen, seeding the three known rows on first use."""
    existing = {g.name: g for g in PaymentGateway.objects.all()}
    for name in GatewayName.values:
        if name not in existing:
            existing[name] = PaymentGateway.objects.create(name=name, is_active=False)

    data = []
    for gateway in existing.values():
        item = gateway.redacted()
        # The admin form shows the stored key for online gateways; secrets stay redacted.
        if gateway.name in (GatewayName.RAZORPAY, GatewayName.STRIPE):
            item["apiKey"] = gateway.api_key
        data.append(item)
    return JsonResponse({"success": True, "data": data})


@csrf_exempt
@require_http_methods(["PUT"])
def gateway_update_view(request, gateway_name: str):
    gateway_name, err = _gateway_or_error(gateway_name)
    if err:
        return err
    body = json_body(request)
    if body is None or not isinstance(body, dict):
        return error_response("Invalid JSON body")

    gateway = PaymentGateway.objects.filter(name=gateway_name).first() or PaymentGateway(name=gateway_name)

    for key in CREDENTIAL_FIELDS:
        if body.get(key) is not None and not isinstance(body[key], str):
            return error_response(f"{key} must be a string")
    is_active = body.get("isActive")
    if is_active is not None and not isinstance(is_active, bool):
        return error_response("isActive must be a boolean value")

    provided = {field: body[key] or "" for key, field in CREDENTIAL_FIELDS.items() if key in body}
    candidate = {field: provided.get(field, getattr(gateway, field)) for field in CREDENTIAL_FIELDS.values()}

    if provided:
        logger.info("Validating %s credentials", gateway_name)
        check = connect_gateway(gateway_name, candidate)
        if not check.valid:
            return error_response(check.message, error="Credential validation failed")
        logger.info("%s credentials validated", gateway_name)

    # an active online gateway must keep an API key, whichever field changed
    resulting_active = gateway.is_active if is_active is None else is_active
    if resulting_active and gateway.requires_api_key and not candidate["api_key"]:
        return error_response("API Key is required to enable the payment gateway")

    for field, value in provided.items():
        setattr(gateway, field, value)
    if is_active is not None:
        gateway.is_active = is_active
    gateway.save()
    logger.info("%s configuration saved", gateway_name)

    return JsonResponse({
        "success": True,
        "message": "Payment gateway updated and validated successfully",
        "data": gateway.redacted(),
    })


@csrf_exempt
@require_http_methods(["PUT"])
def gateway_toggle_view(request, gateway_name: str):
    gateway_name, err = _gateway_or_error(gateway_name)
    if err:
        return err
    body = json_body(request) or {}
    is_active = body.get("isActive") if isinstance(body, dict) else None
    if not isinstance(is_active, bool):
        return error_response("isActive must be a boolean value")

    gateway = PaymentGateway.objects.filter(name=gateway_name).first()
    if gateway is None:
        if gateway_name != GatewayName.COD:
            return error_response("Payment gateway not configured. Please add API key first.")
        gateway = PaymentGateway.objects.create(name=gateway_name, is_active=is_active)
    else:
        if is_active and gateway.requires_api_key and not gateway.api_key:
            return error_response("API Key is required to enable the payment gateway")
        gateway.is_active = is_active
        gateway.save(update_fields=["is_active", "updated_at"])

    logger.info("%s %s", gateway_name, "enabled" if is_active else "disabled")
    return JsonResponse({
        "success": True,
        "message": f"Payment gateway {'enabled' if is_active else 'disabled'} successfully",
        "data": {"id": gateway.pk, "name": gateway.name, "isActive": gateway.is_active},
    })


@require_GET
def active_gateways_view(request):
    """Public: gateways the checkout page may offer."""
    data = [
        {"name": name, "apiKey": api_key}
        for name, api_key in PaymentGateway.objects.filter(is_active=True).values_list("name", "api_key")
    ]
    return JsonResponse({"success": True, "data": data})
