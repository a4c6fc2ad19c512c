"""Delivery-partner status workflow.

Two independent axes live on :class:`~delivery.models.DeliveryPartner`:

* ``application_status`` -- onboarding: pending -> verified -> approved,
  or pending/verified -> rejected. Approved and rejected are terminal.
* ``partner_status`` -- day-to-day availability of an approved partner:
  active <-> inactive, active/inactive -> suspended, suspended -> active.

State is persisted first; the notification email is sent afterwards and a
failed send is only logged.
"""

import logging
import re
import secrets

from django.contrib.auth.hashers import make_password
from django.db import transaction
from django.utils import timezone

from . import emails
from .models import DeliveryPartner, PartnerIdSequence

logger = logging.getLogger(__name__)

PASSWORD_CHARSET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!@#$%^&*"
SUSPENSION_NOTE_MIN_LENGTH = 20
INITIAL_STATUSES = ("pending", "verified", "approved", "rejected")

APPLICATION_TRANSITIONS = {
    "pending": {"verified", "rejected"},
    "verified": {"approved", "rejected"},
    "approved": set(),
    "rejected": set(),
}

PARTNER_STATUS_TRANSITIONS = {
    "active": {"inactive", "suspended"},
    "inactive": {"active", "suspended"},
    "suspended": {"active"},
}


class TransitionError(Exception): pass


def generate_password(length=12) -> str:
    return "".join(secrets.choice(PASSWORD_CHARSET) for _ in range(length))


def _parse_partner_number(partner_id) -> int:
    digits = re.sub(r"\D", "", partner_id or "")
    return int(digits) if digits else 0


def generate_partner_id() -> str:
    """Issue the next ``DP###`` id.

    Must run inside a transaction: the counter row stays locked until the
    caller commits, so concurrent approvals queue up instead of reading the
    same value. The counter is never allowed to fall behind the greatest id
    already stored.
    """
    seq = PartnerIdSequence.objects.select_for_update().order_by("pk").first()
    if seq is None:
        seq = PartnerIdSequence.objects.create(last_value=0)
    last = (
        DeliveryPartner.objects.filter(partner_id__isnull=False)
        .order_by("-partner_id")
        .values_list("partner_id", flat=True)
        .first()
    )
    seq.last_value = max(seq.last_value, _parse_partner_number(last)) + 1
    seq.save(update_fields=["last_value", "updated_at"])
    return f"DP{seq.last_value:03d}"


def _history_entry(from_status, to_status, reason=None, note=None) -> dict:
    return {
        "fromStatus": from_status,
        "toStatus": to_status,
        "reason": reason or None,
        "note": note or None,
        "changedAt": timezone.now().isoformat(),
    }


def _issue_credentials(partner: DeliveryPartner) -> str:
    """Give ``partner`` an id, a fresh password and a verification token; returns the raw password."""
    password = generate_password()
    if not partner.partner_id:
        partner.partner_id = generate_partner_id()
    partner.password = make_password(password)
    partner.email_verification_token = secrets.token_hex(32)
    partner.is_email_verified = False
    return password


@transaction.atomic
def _approve(partner: DeliveryPartner, from_status, reason=None, note=None) -> str:
    password = _issue_credentials(partner)
    partner.application_status = "approved"
    partner.partner_status = "active"
    partner.approved_at = timezone.now()
    partner.status_history = list(partner.status_history or []) + [
        _history_entry(from_status, "approved", reason, note)
    ]
    partner.save()
    return password


def create_partner(data: dict, initial_status="pending") -> DeliveryPartner:
    """Insert a partner; an ``approved`` start also issues credentials and mails them."""
    if initial_status not in INITIAL_STATUSES:
        raise TransitionError("Invalid status. Must be pending, verified, approved, or rejected")
    note = f"Partner created with {initial_status} status"

    if initial_status != "approved":
        partner = DeliveryPartner.objects.create(
            **data,
            application_status=initial_status,
            status_history=[_history_entry(None, initial_status, note=note)],
        )
        logger.info("Created delivery partner %s (%s)", partner.pk, initial_status)
        return partner

    with transaction.atomic():
        partner = DeliveryPartner.objects.create(**data, application_status="pending", status_history=[])
        password = _approve(partner, None, note=note)
    logger.info("Created delivery partner %s approved as %s", partner.pk, partner.partner_id)
    emails.send_partner_approved_email(partner, password)
    return partner


def _is_text(value) -> bool:
    return value is None or isinstance(value, str)


def change_application_status(partner: DeliveryPartner, status: str, reason=None, note=None) -> DeliveryPartner:
    current = partner.application_status
    if not isinstance(status, str) or status not in ("verified", "approved", "rejected"):
        raise TransitionError("Invalid status. Must be verified, approved, or rejected")
    if not _is_text(reason) or not _is_text(note):
        raise TransitionError("Reason and note must be text")
    if current in ("approved", "rejected"):
        raise TransitionError(f"Cannot change status. Partner is already {current}")
    if current == "pending" and status == "approved":
        raise TransitionError("Partner must be verified before approval")
    if status not in APPLICATION_TRANSITIONS.get(current, set()):
        raise TransitionError(f"Cannot change status from {current} to {status}")
    if status == "rejected" and not reason:
        raise TransitionError("Rejection reason is required")

    if status == "approved":
        password = _approve(partner, current, reason, note)
        logger.info("Partner %s approved as %s", partner.pk, partner.partner_id)
        emails.send_partner_approved_email(partner, password)
        return partner

    partner.application_status = status
    partner.status_history = list(partner.status_history or []) + [
        _history_entry(current, status, reason, note)
    ]
    if status == "rejected":
        partner.rejected_at = timezone.now()
        partner.rejection_reason = reason
    partner.save()
    logger.info("Partner %s application %s -> %s", partner.pk, current, status)

    if status == "rejected":
        emails.send_partner_rejected_email(partner, reason, note)
    return partner


def change_partner_status(partner: DeliveryPartner, status: str, reason=None, note=None) -> DeliveryPartner:
    if not isinstance(status, str) or status not in PARTNER_STATUS_TRANSITIONS:
        raise TransitionError("Invalid status. Must be active, inactive, or suspended")
    if not _is_text(reason) or not _is_text(note):
        raise TransitionError("Suspension reason and note must be text")
    if partner.application_status != "approved":
        raise TransitionError("Partner status can only be updated for approved partners")
    current = partner.partner_status or "active"
    if status == current:
        raise TransitionError(f"Partner is already {current}")
    if status not in PARTNER_STATUS_TRANSITIONS[current]:
        raise TransitionError(f"Cannot change partner status from {current} to {status}")

    if status == "suspended":
        if not reason or not note:
            raise TransitionError("Suspension reason and note are required")
        if len(note) < SUSPENSION_NOTE_MIN_LENGTH:
            raise TransitionError(f"Suspension note must be at least {SUSPENSION_NOTE_MIN_LENGTH} characters")
        partner.suspension_reason = reason
        partner.suspension_note = note
        partner.suspended_at = timezone.now()
    else:
        partner.suspension_reason = ""
        partner.suspension_note = ""
        partner.suspended_at = None

    partner.partner_status = status
    partner.save()
    logger.info("Partner %s status %s -> %s", partner.partner_id, current, status)

    if status == "suspended":
        emails.send_partner_suspended_email(partner, reason, note)
    return partner


@transaction.atomic
def reissue_credentials(partner: DeliveryPartner) -> str:
    """Fresh password and verification token for an already approved partner."""
    if partner.application_status != "approved":
        raise TransitionError("Credentials can only be issued to approved partners")
    password = _issue_credentials(partner)
    partner.save(update_fields=["partner_id", "password", "email_verification_token", "is_email_verified", "updated_at"])
    return password


def verify_email(token: str):
    if not token:
        return None
    partner = DeliveryPartner.objects.filter(email_verification_token=token).first()
    if partner is None:
        return None
    partner.is_email_verified = True
    partner.email_verification_token = ""
    partner.save(update_fields=["is_email_verified", "email_verification_token", "updated_at"])
    logger.info("Partner %s verified their email", partner.partner_id)
    return partner
