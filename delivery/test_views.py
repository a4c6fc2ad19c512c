import json
from unittest.mock import patch

from django.core import mail
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.test.client import BOUNDARY, MULTIPART_CONTENT, encode_multipart

from retailops.tests.helpers import auth_headers
from .models import DeliveryPartner
from .tests import make_partner

APPLICATION = {
    "name": "Ravi Kumar",
    "email": "Ravi@Example.com",
    "phone": "+91 98765 43210",
    "vehicleType": "bike",
    "vehicleNumber": "MH 12 AB 1234",
    "licenseNumber": "dl0420110012345",
    "city": "Pune",
}


def pdf(name="doc.pdf") -> SimpleUploadedFile:
    return SimpleUploadedFile(name, b"%PDF-1.4 test", content_type="application/pdf")


class PartnerApiTestMixin:
    def _put(self, url, payload):
        return self.client.put(url, data=json.dumps(payload), content_type="application/json", **auth_headers())


class AuthTests(TestCase):
    def test_token_required(self):
        resp = self.client.get("/api/delivery/")

        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"success": False, "message": "Access token is required"})

    def test_verify_email_is_public(self):
        resp = self.client.post("/api/delivery/verify-email", data=json.dumps({"token": "x"}), content_type="application/json")

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Invalid or expired verification token")


class CreatePartnerViewTests(TestCase):
    def test_creates_pending_partner_with_documents(self):
        resp = self.client.post(
            "/api/delivery/",
            data={**APPLICATION, "licenseDocument": pdf("license.pdf"), "profilePhoto": SimpleUploadedFile("me.png", b"\x89PNG", content_type="image/png")},
            **auth_headers(),
        )

        self.assertEqual(resp.status_code, 201, resp.content)
        data = resp.json()["data"]
        self.assertEqual(data["applicationStatus"], "pending")
        self.assertEqual(data["phone"], "9876543210")
        self.assertEqual(data["email"], "ravi@example.com")
        self.assertEqual(data["vehicleNumber"], "MH12AB1234")
        self.assertEqual(data["country"], "India")
        self.assertNotIn("password", data)
        self.assertTrue(default_storage.exists(data["licenseDocument"]))
        self.assertIsNotNone(data["profilePhotoUrl"])
        self.assertIsNone(data["insuranceDocumentUrl"])

    def test_validation_errors_listed(self):
        resp = self.client.post("/api/delivery/", data={**APPLICATION, "phone": "123", "vehicleType": "truck"}, **auth_headers())

        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertEqual(body["message"], "Validation failed")
        self.assertEqual(len(body["errors"]), 2)
        self.assertFalse(DeliveryPartner.objects.exists())

    def test_duplicate_email_rejected(self):
        make_partner(email="ravi@example.com")

        resp = self.client.post("/api/delivery/", data=APPLICATION, **auth_headers())

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Email already registered")

    def test_disallowed_document_type(self):
        bad = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")

        resp = self.client.post("/api/delivery/", data={**APPLICATION, "idProofDocument": bad}, **auth_headers())

        self.assertEqual(resp.status_code, 400)
        self.assertIn("Only image files", resp.json()["message"])
        self.assertFalse(DeliveryPartner.objects.exists())

    def test_documents_removed_when_insert_fails(self):
        with patch("delivery.views.documents.delete_documents") as delete, \
                patch("delivery.views.services.create_partner", side_effect=RuntimeError("db down")):
            resp = self.client.post("/api/delivery/", data={**APPLICATION, "aadharDocument": pdf()}, **auth_headers())

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["message"], "Internal server error")
        keys = list(delete.call_args[0][0])
        self.assertEqual(len(keys), 1)
        self.assertTrue(keys[0].startswith("delivery-partners/temp-"))

    def test_created_as_approved(self):
        resp = self.client.post("/api/delivery/", data={**APPLICATION, "applicationStatus": "approved"}, **auth_headers())

        self.assertEqual(resp.status_code, 201)
        data = resp.json()["data"]
        self.assertEqual(data["partnerId"], "DP001")
        self.assertEqual(data["partnerStatus"], "active")
        self.assertEqual(len(mail.outbox), 1)


class ListPartnerViewTests(TestCase):
    def setUp(self):
        make_partner(name="Asha Verma", vehicle_type="scooter")
        make_partner(name="Ravi Kumar", application_status="verified")
        make_partner(name="Meena Iyer", application_status="approved", partner_status="active", partner_id="DP001")

    def test_pagination(self):
        resp = self.client.get("/api/delivery/?page=2&limit=2", **auth_headers())

        body = resp.json()
        self.assertEqual(len(body["data"]), 1)
        self.assertEqual(body["pagination"], {
            "currentPage": 2, "totalPages": 2, "totalCount": 3, "hasNext": False, "hasPrev": True,
        })

    def test_filters(self):
        by_status = self.client.get("/api/delivery/?status=verified", **auth_headers()).json()["data"]
        by_vehicle = self.client.get("/api/delivery/?vehicleType=scooter", **auth_headers()).json()["data"]
        by_search = self.client.get("/api/delivery/?search=meena", **auth_headers()).json()["data"]

        self.assertEqual([p["name"] for p in by_status], ["Ravi Kumar"])
        self.assertEqual([p["name"] for p in by_vehicle], ["Asha Verma"])
        self.assertEqual([p["name"] for p in by_search], ["Meena Iyer"])

    def test_approved_list(self):
        resp = self.client.get("/api/delivery/approved?partnerStatus=active", **auth_headers())

        self.assertEqual([p["partnerId"] for p in resp.json()["data"]], ["DP001"])


class PartnerDetailViewTests(PartnerApiTestMixin, TestCase):
    def test_missing_partner(self):
        resp = self.client.get("/api/delivery/999", **auth_headers())

        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["message"], "Delivery partner not found")

    def test_partial_update(self):
        partner = make_partner()

        resp = self._put(f"/api/delivery/{partner.pk}", {"vehicleNumber": "ka 01 mj 4455", "city": "Mysuru"})

        self.assertEqual(resp.status_code, 200)
        partner.refresh_from_db()
        self.assertEqual(partner.vehicle_number, "KA01MJ4455")
        self.assertEqual(partner.city, "Mysuru")

    def test_update_validation(self):
        partner = make_partner()

        resp = self._put(f"/api/delivery/{partner.pk}", {"phone": "555"})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["errors"], ["Valid 10-digit phone number is required"])

    def test_update_rejects_taken_license(self):
        make_partner(license_number="DL99999")
        partner = make_partner()

        resp = self._put(f"/api/delivery/{partner.pk}", {"licenseNumber": "dl99999"})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "License number already registered")

    def test_multipart_update_replaces_document(self):
        old_key = default_storage.save("delivery-partners/old/profile.png", ContentFile(b"old"))
        partner = make_partner(profile_photo=old_key)
        body = encode_multipart(BOUNDARY, {
            "city": "Nagpur",
            "profilePhoto": SimpleUploadedFile("new.png", b"\x89PNG new", content_type="image/png"),
        })

        resp = self.client.put(f"/api/delivery/{partner.pk}", data=body, content_type=MULTIPART_CONTENT, **auth_headers())

        self.assertEqual(resp.status_code, 200, resp.content)
        partner.refresh_from_db()
        self.assertEqual(partner.city, "Nagpur")
        self.assertNotEqual(partner.profile_photo, old_key)
        self.assertTrue(default_storage.exists(partner.profile_photo))
        self.assertFalse(default_storage.exists(old_key))

    def test_status_history(self):
        partner = make_partner(status_history=[{"fromStatus": None, "toStatus": "pending"}])

        resp = self.client.get(f"/api/delivery/{partner.pk}/status-history", **auth_headers())

        self.assertEqual(resp.json()["data"], [{"fromStatus": None, "toStatus": "pending"}])


class StatusViewTests(PartnerApiTestMixin, TestCase):
    def test_pending_to_approved_rejected(self):
        partner = make_partner()

        resp = self._put(f"/api/delivery/{partner.pk}/application-status", {"status": "approved"})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"success": False, "message": "Partner must be verified before approval"})

    def test_verify_then_approve(self):
        partner = make_partner()

        self._put(f"/api/delivery/{partner.pk}/application-status", {"status": "verified"})
        resp = self._put(f"/api/delivery/{partner.pk}/application-status", {"status": "approved"})

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertIn("Verification email sent", body["message"])
        self.assertEqual(body["data"]["partnerId"], "DP001")
        self.assertEqual(len(body["data"]["statusHistory"]), 2)

    def test_approval_succeeds_when_email_fails(self):
        partner = make_partner(application_status="verified")

        with patch("delivery.emails.EmailMultiAlternatives.send", side_effect=OSError("smtp down")):
            with self.assertLogs("delivery.emails", level="ERROR"):
                resp = self._put(f"/api/delivery/{partner.pk}/application-status", {"status": "approved"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(DeliveryPartner.objects.get(pk=partner.pk).application_status, "approved")

    def test_reject_reports_notification(self):
        partner = make_partner(application_status="verified")

        resp = self._put(f"/api/delivery/{partner.pk}/application-status", {"status": "rejected", "reason": "Documents unclear"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], f"Partner rejected. Notification sent to {partner.email}")
        self.assertEqual(len(mail.outbox), 1)

    def test_non_text_application_fields_rejected(self):
        partner = make_partner(application_status="verified")

        bad_status = self._put(f"/api/delivery/{partner.pk}/application-status", {"status": ["approved"]})
        bad_reason = self._put(f"/api/delivery/{partner.pk}/application-status", {"status": "rejected", "reason": 42})

        self.assertEqual(bad_status.status_code, 400)
        self.assertEqual(bad_reason.status_code, 400)
        self.assertEqual(bad_reason.json()["message"], "Reason and note must be text")
        self.assertEqual(DeliveryPartner.objects.get(pk=partner.pk).application_status, "verified")

    def test_numeric_suspension_note_rejected(self):
        partner = make_partner(application_status="approved", partner_status="active", partner_id="DP003")

        resp = self._put(f"/api/delivery/{partner.pk}/partner-status", {
            "status": "suspended", "suspensionReason": "Fraud", "suspensionNote": 123456789012345678901234,
        })

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Suspension reason and note must be text")
        self.assertEqual(DeliveryPartner.objects.get(pk=partner.pk).partner_status, "active")

    def test_suspension_note_too_short(self):
        partner = make_partner(application_status="approved", partner_status="active", partner_id="DP002")

        resp = self._put(f"/api/delivery/{partner.pk}/partner-status", {
            "status": "suspended", "suspensionReason": "Fraud", "suspensionNote": "short",
        })

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Suspension note must be at least 20 characters")

    def test_suspend(self):
        partner = make_partner(application_status="approved", partner_status="active", partner_id="DP002")

        resp = self._put(f"/api/delivery/{partner.pk}/partner-status", {
            "status": "suspended",
            "suspensionReason": "Customer complaints",
            "suspensionNote": "Three complaints about rude behaviour this week",
        })

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Partner status updated to suspended")
        self.assertEqual(resp.json()["data"]["partnerStatus"], "suspended")
        self.assertEqual(len(mail.outbox), 1)


class VerifyEmailViewTests(TestCase):
    def test_verifies(self):
        partner = make_partner(email_verification_token="b" * 64)

        resp = self.client.post("/api/delivery/verify-email", data=json.dumps({"token": "b" * 64}), content_type="application/json")

        self.assertEqual(resp.status_code, 200)
        self.assertTrue(DeliveryPartner.objects.get(pk=partner.pk).is_email_verified)

    def test_token_missing(self):
        resp = self.client.post("/api/delivery/verify-email", data="{}", content_type="application/json")

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Verification token is required")
