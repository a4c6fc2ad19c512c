import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


def _fail_silently() -> bool:
    return getattr(settings, "EMAIL_FAIL_SILENTLY", False)


def _base_context(partner) -> dict:
    return {
        "partner": partner,
        "name": partner.name,
        "partner_id": partner.partner_id,
        "company_name": getattr(settings, "COMPANY_NAME", "RetailOps"),
        "support_email": getattr(settings, "SUPPORT_EMAIL", ""),
        "support_phone": getattr(settings, "SUPPORT_PHONE", ""),
        "frontend_url": getattr(settings, "FRONTEND_URL", "").rstrip("/"),
    }


def _send(template: str, subject: str, partner, context: dict) -> bool:
    """Render ``emails/<template>.{txt,html}`` and mail it to the partner.

    Returns False instead of raising; the caller has already saved its
    state change and a lost notification must not undo it.
    """
    try:
        from_email = getattr(settings, "DEFAULT_FROM_EMAIL", None) or getattr(settings, "EMAIL_HOST_USER", None)
        text = render_to_string(f"emails/{template}.txt", context)
        html = render_to_string(f"emails/{template}.html", context)
        msg = EmailMultiAlternatives(subject, text, from_email, [partner.email])
        msg.attach_alternative(html, "text/html")
        msg.send(fail_silently=_fail_silently())
    except Exception:
        logger.exception("Failed to send %s email to partner %s", template, partner.pk)
        return False
    logger.info("Sent %s email to partner %s", template, partner.pk)
    return True


def send_partner_approved_email(partner, password: str) -> bool:
    context = _base_context(partner)
    frontend = context["frontend_url"]
    context.update({
        "email": partner.email,
        "password": password,
        "verification_url": f"{frontend}/partner/verify-email?token={partner.email_verification_token}",
        "login_url": f"{frontend}/partner/login",
    })
    subject = f"Welcome to {context['company_name']} - Your delivery partner account is approved"
    return _send("partner_approved", subject, partner, context)


def send_partner_rejected_email(partner, reason: str, note=None) -> bool:
    context = _base_context(partner)
    context.update({"reason": reason, "note": note or ""})
    subject = f"{context['company_name']} delivery partner application update"
    return _send("partner_rejected", subject, partner, context)


def send_partner_suspended_email(partner, reason: str, note: str) -> bool:
    context = _base_context(partner)
    context.update({"reason": reason, "note": note})
    subject = f"Your {context['company_name']} delivery partner account has been suspended"
    return _send("partner_suspended", subject, partner, context)
