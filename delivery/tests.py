import re
from io import StringIO
from unittest.mock import patch

from django.contrib.auth.hashers import check_password
from django.core import mail
from django.core.management import CommandError, call_command
from django.test import TestCase, override_settings

from . import services
from .models import DeliveryPartner, PartnerIdSequence

_seq = iter(range(1000, 9999))


def make_partner(**overrides) -> DeliveryPartner:
    n = next(_seq)
    fields = {
        "name": f"Partner {n}",
        "email": f"partner{n}@example.com",
        "phone": f"98765{n:05d}",
        "vehicle_type": "bike",
        "vehicle_number": f"MH12AB{n}",
        "license_number": f"DL{n}XYZ",
    }
    fields.update(overrides)
    return DeliveryPartner.objects.create(**fields)


def _password_from(message) -> str:
    return re.search(r"Temporary password: (\S+)", message.body).group(1)


class PasswordTests(TestCase):
    def test_password_length_and_charset(self):
        password = services.generate_password()

        self.assertEqual(len(password), 12)
        self.assertTrue(set(password) <= set(services.PASSWORD_CHARSET))


class PartnerIdTests(TestCase):
    def test_first_id(self):
        self.assertEqual(services.generate_partner_id(), "DP001")
        self.assertEqual(services.generate_partner_id(), "DP002")

    def test_continues_after_greatest_existing_id(self):
        make_partner(partner_id="DP003")
        make_partner(partner_id="DP007")

        self.assertEqual(services.generate_partner_id(), "DP008")

    def test_counter_never_reuses_ids(self):
        PartnerIdSequence.objects.create(last_value=41)
        make_partner(partner_id="DP005")

        self.assertEqual(services.generate_partner_id(), "DP042")
        self.assertEqual(PartnerIdSequence.objects.get().last_value, 42)


class ApplicationStatusTests(TestCase):
    def test_pending_to_verified_appends_history(self):
        partner = make_partner()

        services.change_application_status(partner, "verified", note="Documents checked")

        partner.refresh_from_db()
        self.assertEqual(partner.application_status, "verified")
        self.assertEqual(len(partner.status_history), 1)
        entry = partner.status_history[0]
        self.assertEqual((entry["fromStatus"], entry["toStatus"], entry["note"]), ("pending", "verified", "Documents checked"))
        self.assertEqual(len(mail.outbox), 0)

    def test_pending_cannot_be_approved(self):
        partner = make_partner()

        with self.assertRaisesMessage(services.TransitionError, "Partner must be verified before approval"):
            services.change_application_status(partner, "approved")

        partner.refresh_from_db()
        self.assertEqual(partner.application_status, "pending")
        self.assertIsNone(partner.partner_id)

    def test_approval_issues_credentials_and_email(self):
        partner = make_partner(application_status="verified")

        services.change_application_status(partner, "approved")

        partner.refresh_from_db()
        self.assertEqual(partner.partner_id, "DP001")
        self.assertEqual(partner.partner_status, "active")
        self.assertIsNotNone(partner.approved_at)
        self.assertFalse(partner.is_email_verified)
        self.assertEqual(len(partner.email_verification_token), 64)

        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.to, [partner.email])
        self.assertIn(f"/partner/verify-email?token={partner.email_verification_token}", message.body)
        self.assertTrue(check_password(_password_from(message), partner.password))

    def test_sequential_approvals_get_consecutive_ids(self):
        first = make_partner(application_status="verified")
        second = make_partner(application_status="verified")

        services.change_application_status(first, "approved")
        services.change_application_status(second, "approved")

        self.assertEqual((first.partner_id, second.partner_id), ("DP001", "DP002"))

    def test_rejection_requires_reason(self):
        partner = make_partner()

        with self.assertRaisesMessage(services.TransitionError, "Rejection reason is required"):
            services.change_application_status(partner, "rejected")

    def test_rejection_sends_email(self):
        partner = make_partner(application_status="verified")

        services.change_application_status(partner, "rejected", reason="Documents unclear")

        partner.refresh_from_db()
        self.assertEqual(partner.application_status, "rejected")
        self.assertEqual(partner.rejection_reason, "Documents unclear")
        self.assertIsNotNone(partner.rejected_at)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn("Documents unclear", mail.outbox[0].body)

    def test_terminal_states_are_final(self):
        for status in ("approved", "rejected"):
            partner = make_partner(application_status=status)
            with self.assertRaisesMessage(services.TransitionError, f"Partner is already {status}"):
                services.change_application_status(partner, "verified")

    def test_unknown_status_rejected(self):
        with self.assertRaises(services.TransitionError):
            services.change_application_status(make_partner(), "pending")

    def test_non_text_status_or_reason_rejected(self):
        partner = make_partner(application_status="verified")

        with self.assertRaisesMessage(services.TransitionError, "Invalid status"):
            services.change_application_status(partner, {"status": "approved"})
        with self.assertRaisesMessage(services.TransitionError, "Reason and note must be text"):
            services.change_application_status(partner, "rejected", reason=["blurry"])

        partner.refresh_from_db()
        self.assertEqual(partner.application_status, "verified")
        self.assertEqual(len(mail.outbox), 0)

    def test_email_failure_keeps_approval(self):
        partner = make_partner(application_status="verified")

        with patch("delivery.emails.EmailMultiAlternatives.send", side_effect=ConnectionRefusedError("smtp down")):
            with self.assertLogs("delivery.emails", level="ERROR"):
                services.change_application_status(partner, "approved")

        partner.refresh_from_db()
        self.assertEqual(partner.application_status, "approved")
        self.assertEqual(partner.partner_id, "DP001")


class PartnerStatusTests(TestCase):
    def setUp(self):
        self.partner = make_partner(application_status="approved", partner_status="active", partner_id="DP010")

    def test_only_approved_partners(self):
        partner = make_partner(application_status="verified")

        with self.assertRaisesMessage(services.TransitionError, "only be updated for approved partners"):
            services.change_partner_status(partner, "inactive")

    def test_active_to_inactive_and_back(self):
        services.change_partner_status(self.partner, "inactive")
        services.change_partner_status(self.partner, "active")

        self.partner.refresh_from_db()
        self.assertEqual(self.partner.partner_status, "active")

    def test_suspension_note_length(self):
        with self.assertRaisesMessage(services.TransitionError, "Suspension note must be at least 20 characters"):
            services.change_partner_status(self.partner, "suspended", "Late deliveries", "too short")

    def test_suspension_requires_reason_and_note(self):
        with self.assertRaisesMessage(services.TransitionError, "Suspension reason and note are required"):
            services.change_partner_status(self.partner, "suspended", "Late deliveries")

    def test_suspend_then_reactivate_clears_fields(self):
        note = "Repeated late deliveries reported by customers"
        services.change_partner_status(self.partner, "suspended", "Late deliveries", note)

        self.partner.refresh_from_db()
        self.assertEqual(self.partner.partner_status, "suspended")
        self.assertEqual(self.partner.suspension_note, note)
        self.assertIsNotNone(self.partner.suspended_at)
        self.assertEqual(len(mail.outbox), 1)

        services.change_partner_status(self.partner, "active")

        self.partner.refresh_from_db()
        self.assertEqual(self.partner.suspension_reason, "")
        self.assertEqual(self.partner.suspension_note, "")
        self.assertIsNone(self.partner.suspended_at)

    def test_suspended_cannot_go_inactive(self):
        self.partner.partner_status = "suspended"
        self.partner.save()

        with self.assertRaises(services.TransitionError):
            services.change_partner_status(self.partner, "inactive")

    def test_same_status_rejected(self):
        with self.assertRaisesMessage(services.TransitionError, "Partner is already active"):
            services.change_partner_status(self.partner, "active")

    def test_non_text_status_rejected(self):
        with self.assertRaisesMessage(services.TransitionError, "Invalid status"):
            services.change_partner_status(self.partner, ["suspended"])

    def test_numeric_suspension_note_rejected(self):
        with self.assertRaisesMessage(services.TransitionError, "Suspension reason and note must be text"):
            services.change_partner_status(self.partner, "suspended", "Late deliveries", 12345678901234567890123)

        self.partner.refresh_from_db()
        self.assertEqual(self.partner.partner_status, "active")


class CreatePartnerTests(TestCase):
    def test_created_pending_with_history(self):
        partner = services.create_partner({
            "name": "Asha", "email": "asha@example.com", "phone": "9000000001",
            "vehicle_type": "scooter", "vehicle_number": "KA01MJ4455", "license_number": "KA0120200001",
        })

        self.assertEqual(partner.application_status, "pending")
        self.assertIsNone(partner.partner_id)
        self.assertEqual(partner.status_history[0]["toStatus"], "pending")

    def test_created_approved_gets_credentials(self):
        partner = services.create_partner({
            "name": "Asha", "email": "asha@example.com", "phone": "9000000001",
            "vehicle_type": "scooter", "vehicle_number": "KA01MJ4455", "license_number": "KA0120200001",
        }, "approved")

        partner.refresh_from_db()
        self.assertEqual(partner.partner_id, "DP001")
        self.assertEqual(partner.partner_status, "active")
        self.assertEqual(partner.status_history[0]["note"], "Partner created with approved status")
        self.assertEqual(len(mail.outbox), 1)


class VerifyEmailTests(TestCase):
    def test_token_marks_email_verified(self):
        partner = make_partner(email_verification_token="a" * 64)

        self.assertEqual(services.verify_email("a" * 64), partner)

        partner.refresh_from_db()
        self.assertTrue(partner.is_email_verified)
        self.assertEqual(partner.email_verification_token, "")

    def test_unknown_token(self):
        self.assertIsNone(services.verify_email("nope"))
        self.assertIsNone(services.verify_email(""))


@override_settings(FRONTEND_URL="https://partners.example.com")
class ResendCredentialsCommandTests(TestCase):
    def test_resends_fresh_password(self):
        partner = make_partner(application_status="approved", partner_status="active", partner_id="DP004", password="old")
        out = StringIO()

        call_command("resend_partner_credentials", "dp004", stdout=out)

        partner.refresh_from_db()
        self.assertIn("Credentials sent", out.getvalue())
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn("https://partners.example.com/partner/verify-email?token=", mail.outbox[0].body)
        self.assertTrue(check_password(_password_from(mail.outbox[0]), partner.password))

    def test_rejects_unknown_partner(self):
        with self.assertRaises(CommandError):
            call_command("resend_partner_credentials", "DP999", stdout=StringIO())
