import logging
import uuid

from django.db.models import Q
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from retailops.auth import token_required
from retailops.http import error_response, json_body, paginate, snake_keys
from . import documents, services
from .forms import DeliveryPartnerForm, DeliveryPartnerUpdateForm
from .models import DeliveryPartner

logger = logging.getLogger(__name__)

NOT_FOUND = "Delivery partner not found"

# model field -> response key
PARTNER_KEYS = {
    "partner_id": "partnerId",
    "name": "name",
    "email": "email",
    "phone": "phone",
    "gender": "gender",
    "alternate_mobile_number": "alternateMobileNumber",
    "vehicle_type": "vehicleType",
    "vehicle_model": "vehicleModel",
    "vehicle_number": "vehicleNumber",
    "license_number": "licenseNumber",
    "aadhar_number": "aadharNumber",
    "address": "address",
    "city": "city",
    "state": "state",
    "pincode": "pincode",
    "country": "country",
    "emergency_contact_name": "emergencyContactName",
    "emergency_relationship": "emergencyRelationship",
    "emergency_contact_number": "emergencyContactNumber",
    "application_status": "applicationStatus",
    "partner_status": "partnerStatus",
    "status_history": "statusHistory",
    "is_email_verified": "isEmailVerified",
    "rejection_reason": "rejectionReason",
    "suspension_reason": "suspensionReason",
    "suspension_note": "suspensionNote",
    "total_deliveries": "totalDeliveries",
    "is_available": "isAvailable",
}
DOCUMENT_KEYS = {
    "profile_photo": "profilePhoto",
    "aadhar_document": "aadharDocument",
    "license_document": "licenseDocument",
    "vehicle_rc_document": "vehicleRCDocument",
    "insurance_document": "insuranceDocument",
    "pollution_cert_document": "pollutionCertDocument",
    "id_proof_document": "idProofDocument",
}
TIMESTAMP_KEYS = {
    "approved_at": "approvedAt",
    "rejected_at": "rejectedAt",
    "suspended_at": "suspendedAt",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


def serialize_partner(partner: DeliveryPartner) -> dict:
    """camelCase view of a partner with document URLs; never includes the password."""
    data = {"id": partner.pk}
    for field, key in PARTNER_KEYS.items():
        data[key] = getattr(partner, field)
    data["dateOfBirth"] = partner.date_of_birth.isoformat() if partner.date_of_birth else None
    data["rating"] = float(partner.rating)
    for field, key in DOCUMENT_KEYS.items():
        data[key] = getattr(partner, field) or None
        data[f"{key}Url"] = documents.document_url(getattr(partner, field))
    for field, key in TIMESTAMP_KEYS.items():
        value = getattr(partner, field)
        data[key] = value.isoformat() if value else None
    return data


def _request_data(request):
    """(data, files) for JSON or multipart bodies; data keys are snake_case."""
    content_type = request.content_type or ""
    if content_type.startswith("multipart/form-data"):
        if request.method == "POST":
            raw, files = request.POST, request.FILES
        else:
            # Django only parses multipart bodies on POST
            raw, files = request.parse_file_upload(request.META, request)
        raw = {key: raw.get(key) for key in raw}
    else:
        raw, files = json_body(request), {}
        if not isinstance(raw, dict):
            return None, {}
    return snake_keys(raw), files


def _validation_failed(form) -> JsonResponse:
    return error_response("Validation failed", errors=form.error_list())


def _duplicate_message(data: dict, exclude_pk=None):
    checks = (
        ("email", "Email already registered"),
        ("phone", "Phone number already registered"),
        ("vehicle_number", "Vehicle number already registered"),
        ("license_number", "License number already registered"),
    )
    qs = DeliveryPartner.objects.all()
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    for field, message in checks:
        value = data.get(field)
        if value and qs.filter(**{field: value}).exists():
            return message
    return None


def _get_partner(pk):
    return DeliveryPartner.objects.filter(pk=pk).first()


def _search(qs, term: str):
    if not term:
        return qs
    return qs.filter(
        Q(name__icontains=term)
        | Q(email__icontains=term)
        | Q(phone__icontains=term)
        | Q(vehicle_number__icontains=term)
        | Q(partner_id__icontains=term)
    )


@csrf_exempt
@require_http_methods(["GET", "POST"])
@token_required
def partner_collection_view(request):
    if request.method == "POST":
        return _create_partner(request)
    return _list_partners(request)


def _list_partners(request):
    qs = _search(DeliveryPartner.objects.all(), request.GET.get("search", "").strip())
    if request.GET.get("status"):
        qs = qs.filter(application_status=request.GET["status"])
    if request.GET.get("vehicleType"):
        qs = qs.filter(vehicle_type=request.GET["vehicleType"].lower())
    items, pagination = paginate(qs, request)
    return JsonResponse({
        "success": True,
        "data": [serialize_partner(p) for p in items],
        "pagination": pagination,
    })


def _create_partner(request):
    data, files = _request_data(request)
    if data is None:
        return error_response("Invalid request body")

    form = DeliveryPartnerForm(data)
    if not form.is_valid():
        return _validation_failed(form)
    cleaned = form.submitted_data()
    cleaned["country"] = cleaned.get("country") or "India"

    duplicate = _duplicate_message(cleaned)
    if duplicate:
        return error_response(duplicate)

    initial_status = data.get("application_status") or "pending"
    if initial_status not in services.INITIAL_STATUSES:
        return error_response("Invalid status. Must be pending, verified, approved, or rejected")

    try:
        stored = documents.save_partner_documents(files, f"temp-{uuid.uuid4().hex}")
    except documents.DocumentError as e:
        return error_response(str(e))

    try:
        partner = services.create_partner({**cleaned, **stored}, initial_status)
    except Exception:
        documents.delete_documents(stored.values())
        raise

    message = "Delivery partner created successfully"
    if initial_status == "approved":
        message = "Delivery partner created and approved. Verification email sent."
    return JsonResponse({"success": True, "message": message, "data": serialize_partner(partner)}, status=201)


@require_GET
@token_required
def approved_partners_view(request):
    qs = _search(DeliveryPartner.objects.filter(application_status="approved"), request.GET.get("search", "").strip())
    if request.GET.get("partnerStatus"):
        qs = qs.filter(partner_status=request.GET["partnerStatus"])
    items, pagination = paginate(qs.order_by("-approved_at", "-created_at"), request)
    return JsonResponse({
        "success": True,
        "data": [serialize_partner(p) for p in items],
        "pagination": pagination,
    })


@csrf_exempt
@require_http_methods(["GET", "PUT"])
@token_required
def partner_detail_view(request, pk: int):
    partner = _get_partner(pk)
    if partner is None:
        return error_response(NOT_FOUND, status=404)
    if request.method == "PUT":
        return _update_partner(request, partner)
    return JsonResponse({"success": True, "data": serialize_partner(partner)})


def _update_partner(request, partner: DeliveryPartner):
    data, files = _request_data(request)
    if data is None:
        return error_response("Invalid request body")

    form = DeliveryPartnerUpdateForm(data)
    if not form.is_valid():
        return _validation_failed(form)
    changes = form.submitted_data()

    duplicate = _duplicate_message(changes, exclude_pk=partner.pk)
    if duplicate:
        return error_response(duplicate)

    try:
        stored = documents.save_partner_documents(files, partner.partner_id or f"partner-{partner.pk}")
    except documents.DocumentError as e:
        return error_response(str(e))

    replaced = [getattr(partner, field) for field in stored if getattr(partner, field)]
    for field, value in {**changes, **stored}.items():
        setattr(partner, field, value)
    try:
        partner.save()
    except Exception:
        documents.delete_documents(stored.values())
        raise
    documents.delete_documents(replaced)

    logger.info("Updated delivery partner %s (%s)", partner.pk, ", ".join(sorted({**changes, **stored})) or "no fields")
    return JsonResponse({
        "success": True,
        "message": "Delivery partner updated successfully",
        "data": serialize_partner(partner),
    })


@require_GET
@token_required
def status_history_view(request, pk: int):
    partner = _get_partner(pk)
    if partner is None:
        return error_response(NOT_FOUND, status=404)
    return JsonResponse({"success": True, "data": partner.status_history or []})


@csrf_exempt
@require_http_methods(["PUT"])
@token_required
def application_status_view(request, pk: int):
    body = json_body(request)
    if not isinstance(body, dict):
        return error_response("Invalid JSON body")
    partner = _get_partner(pk)
    if partner is None:
        return error_response(NOT_FOUND, status=404)

    status = body.get("status")
    try:
        services.change_application_status(partner, status, body.get("reason"), body.get("note"))
    except services.TransitionError as e:
        return error_response(str(e))

    message = f"Partner {status} successfully"
    if status == "approved":
        message = f"Partner approved successfully. Verification email sent to {partner.email}"
    elif status == "rejected":
        message = f"Partner rejected. Notification sent to {partner.email}"
    return JsonResponse({"success": True, "message": message, "data": serialize_partner(partner)})


@csrf_exempt
@require_http_methods(["PUT"])
@token_required
def partner_status_view(request, pk: int):
    body = json_body(request)
    if not isinstance(body, dict):
        return error_response("Invalid JSON body")
    partner = _get_partner(pk)
    if partner is None:
        return error_response(NOT_FOUND, status=404)

    status = body.get("status")
    try:
        services.change_partner_status(partner, status, body.get("suspensionReason"), body.get("suspensionNote"))
    except services.TransitionError as e:
        return error_response(str(e))

    return JsonResponse({
        "success": True,
        "message": f"Partner status updated to {status}",
        "data": serialize_partner(partner),
    })


@csrf_exempt
@require_POST
def verify_email_view(request):
    body = json_body(request)
    token = body.get("token") if isinstance(body, dict) else None
    if not token:
        return error_response("Verification token is required")
    partner = services.verify_email(token)
    if partner is None:
        return error_response("Invalid or expired verification token")
    return JsonResponse({"success": True, "message": "Email verified successfully. You can now login."})
