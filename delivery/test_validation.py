from django.test import SimpleTestCase

from .forms import (
    EMAIL_ERROR,
    LICENSE_ERROR,
    NAME_ERROR,
    PHONE_ERROR,
    VEHICLE_NUMBER_ERROR,
    VEHICLE_TYPE_ERROR,
    DeliveryPartnerForm,
    DeliveryPartnerUpdateForm,
    normalize_phone,
)

VALID = {
    "name": "  Ravi Kumar ",
    "email": " Ravi.Kumar@Example.COM ",
    "phone": "+91 98765 43210",
    "vehicle_type": "Bike",
    "vehicle_number": "mh 12 ab 1234",
    "license_number": " dl0420110012345 ",
}


class DeliveryPartnerFormTests(SimpleTestCase):
    def test_valid_payload_is_normalized(self):
        form = DeliveryPartnerForm(VALID)

        self.assertTrue(form.is_valid(), form.errors)
        data = form.cleaned_data
        self.assertEqual(data["name"], "Ravi Kumar")
        self.assertEqual(data["email"], "ravi.kumar@example.com")
        self.assertEqual(data["phone"], "9876543210")
        self.assertEqual(data["vehicle_type"], "bike")
        self.assertEqual(data["vehicle_number"], "MH12AB1234")
        self.assertEqual(data["license_number"], "DL0420110012345")

    def test_all_errors_are_reported_together(self):
        form = DeliveryPartnerForm({
            "name": "R",
            "email": "not-an-email",
            "phone": "12345",
            "vehicle_type": "truck",
            "vehicle_number": "MH12",
            "license_number": "DL1",
        })

        self.assertFalse(form.is_valid())
        self.assertEqual(
            sorted(form.error_list()),
            sorted([NAME_ERROR, EMAIL_ERROR, PHONE_ERROR, VEHICLE_TYPE_ERROR, VEHICLE_NUMBER_ERROR, LICENSE_ERROR]),
        )

    def test_missing_required_fields(self):
        form = DeliveryPartnerForm({})

        self.assertFalse(form.is_valid())
        self.assertIn(NAME_ERROR, form.error_list())
        self.assertIn(LICENSE_ERROR, form.error_list())

    def test_eleven_digit_phone_rejected(self):
        form = DeliveryPartnerForm({**VALID, "phone": "98765432101"})

        self.assertFalse(form.is_valid())
        self.assertEqual(form.error_list(), [PHONE_ERROR])

    def test_overlong_values_use_field_messages(self):
        form = DeliveryPartnerForm({**VALID, "phone": "9" * 40, "vehicle_number": "M" * 40, "license_number": "D" * 40})

        self.assertFalse(form.is_valid())
        self.assertEqual(sorted(form.error_list()), sorted([PHONE_ERROR, VEHICLE_NUMBER_ERROR, LICENSE_ERROR]))

    def test_normalize_phone_drops_country_code(self):
        self.assertEqual(normalize_phone("+91-98765-43210"), "9876543210")
        self.assertEqual(normalize_phone("9876543210"), "9876543210")


class DeliveryPartnerUpdateFormTests(SimpleTestCase):
    def test_only_present_fields_are_checked(self):
        form = DeliveryPartnerUpdateForm({"vehicle_number": "ka 01 mj 4455"})

        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.submitted_data(), {"vehicle_number": "KA01MJ4455"})

    def test_present_field_still_validated(self):
        form = DeliveryPartnerUpdateForm({"phone": "555", "city": "Pune"})

        self.assertFalse(form.is_valid())
        self.assertEqual(form.error_list(), [PHONE_ERROR])

    def test_empty_update_is_valid(self):
        form = DeliveryPartnerUpdateForm({})

        self.assertTrue(form.is_valid())
        self.assertEqual(form.submitted_data(), {})
