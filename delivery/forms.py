import re

from django import forms
from django.core.exceptions import ValidationError

from .models import DeliveryPartner

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
VEHICLE_TYPES = [value for value, _ in DeliveryPartner.VEHICLE_TYPES]

NAME_ERROR = "Name must be at least 2 characters long"
EMAIL_ERROR = "Valid email is required"
PHONE_ERROR = "Valid 10-digit phone number is required"
VEHICLE_TYPE_ERROR = "Vehicle type must be one of: bike, scooter, car, van"
VEHICLE_NUMBER_ERROR = "Valid vehicle number is required (e.g., MH12AB1234)"
LICENSE_ERROR = "Valid license number is required"


def normalize_phone(phone: str) -> str:
    """Strip everything but digits and keep the last 10 (drops a 91 country code)."""
    return re.sub(r"\D", "", phone or "")[-10:]


class DeliveryPartnerForm(forms.Form):
    """Partner application payload.

    Every field is checked and all problems are reported together; the
    cleaned values are normalized (lower-cased email, 10-digit phone,
    upper-cased vehicle and license numbers).
    """

    partial = False

    name = forms.CharField(max_length=128, error_messages={"required": NAME_ERROR, "max_length": NAME_ERROR})
    email = forms.CharField(max_length=254, error_messages={"required": EMAIL_ERROR, "max_length": EMAIL_ERROR})
    phone = forms.CharField(max_length=32, error_messages={"required": PHONE_ERROR, "max_length": PHONE_ERROR})
    vehicle_type = forms.CharField(max_length=16, error_messages={"required": VEHICLE_TYPE_ERROR, "max_length": VEHICLE_TYPE_ERROR})
    vehicle_number = forms.CharField(max_length=32, error_messages={"required": VEHICLE_NUMBER_ERROR, "max_length": VEHICLE_NUMBER_ERROR})
    license_number = forms.CharField(max_length=32, error_messages={"required": LICENSE_ERROR, "max_length": LICENSE_ERROR})

    date_of_birth = forms.DateField(required=False)
    gender = forms.CharField(max_length=16, required=False)
    alternate_mobile_number = forms.CharField(max_length=16, required=False)
    vehicle_model = forms.CharField(max_length=64, required=False)
    aadhar_number = forms.CharField(max_length=16, required=False)
    address = forms.CharField(max_length=255, required=False)
    city = forms.CharField(max_length=64, required=False)
    state = forms.CharField(max_length=64, required=False)
    pincode = forms.CharField(max_length=12, required=False)
    country = forms.CharField(max_length=64, required=False)
    emergency_contact_name = forms.CharField(max_length=128, required=False)
    emergency_relationship = forms.CharField(max_length=64, required=False)
    emergency_contact_number = forms.CharField(max_length=16, required=False)

    def _absent(self, field: str) -> bool:
        return self.partial and field not in self.data

    def clean_name(self):
        name = self.cleaned_data.get("name") or ""
        if self._absent("name"):
            return name
        if len(name.strip()) < 2:
            raise ValidationError(NAME_ERROR)
        return name.strip()

    def clean_email(self):
        email = (self.cleaned_data.get("email") or "").strip()
        if self._absent("email"):
            return email
        if not EMAIL_RE.match(email):
            raise ValidationError(EMAIL_ERROR)
        return email.lower()

    def clean_phone(self):
        phone = self.cleaned_data.get("phone") or ""
        if self._absent("phone"):
            return phone
        digits = re.sub(r"\D", "", phone)
        if len(digits) not in (10, 12):
            raise ValidationError(PHONE_ERROR)
        return normalize_phone(digits)

    def clean_vehicle_type(self):
        vehicle_type = (self.cleaned_data.get("vehicle_type") or "").lower()
        if self._absent("vehicle_type"):
            return vehicle_type
        if vehicle_type not in VEHICLE_TYPES:
            raise ValidationError(VEHICLE_TYPE_ERROR)
        return vehicle_type

    def clean_vehicle_number(self):
        vehicle_number = re.sub(r"\s", "", self.cleaned_data.get("vehicle_number") or "").upper()
        if self._absent("vehicle_number"):
            return vehicle_number
        if len(vehicle_number) < 8:
            raise ValidationError(VEHICLE_NUMBER_ERROR)
        return vehicle_number

    def clean_license_number(self):
        license_number = (self.cleaned_data.get("license_number") or "").strip().upper()
        if self._absent("license_number"):
            return license_number
        if len(license_number) < 5:
            raise ValidationError(LICENSE_ERROR)
        return license_number

    def error_list(self) -> list:
        return [message for messages in self.errors.values() for message in messages]

    def submitted_data(self) -> dict:
        """Cleaned values for the fields the caller actually sent."""
        return {k: v for k, v in self.cleaned_data.items() if not self._absent(k)}


class DeliveryPartnerUpdateForm(DeliveryPartnerForm):
    """Same rules, applied only to the fields present in the request."""

    partial = True

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.required = False
