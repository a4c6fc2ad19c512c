from django import forms
from django.core.exceptions import ValidationError

from .models import Coupon


class CouponForm(forms.Form):
    code = forms.CharField(max_length=32, error_messages={"required": "Coupon code is required"})
    description = forms.CharField(max_length=255, required=False)
    discount_type = forms.ChoiceField(
        choices=Coupon.DISCOUNT_TYPES,
        error_messages={
            "required": "discountType is required",
            "invalid_choice": "discountType must be 'percentage' or 'flat'",
        },
    )
    discount_value = forms.DecimalField(
        max_digits=10, decimal_places=2,
        error_messages={"required": "discountValue is required", "invalid": "discountValue must be a number"},
    )
    usage_type = forms.ChoiceField(
        choices=Coupon.USAGE_TYPES, required=False,
        error_messages={"invalid_choice": "usageType must be 'single-use', 'multi-use', or 'first-time-user-only'"},
    )
    max_usage_count = forms.IntegerField(min_value=1, required=False)
    valid_from = forms.DateTimeField(error_messages={"required": "validFrom is required", "invalid": "validFrom must be a date"})
    valid_until = forms.DateTimeField(error_messages={"required": "validUntil is required", "invalid": "validUntil must be a date"})
    min_order_value = forms.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    max_discount_amount = forms.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    applicable_categories = forms.JSONField(required=False)
    is_active = forms.BooleanField(required=False)

    def clean_code(self):
        code = self.cleaned_data["code"].strip().upper()
        if Coupon.objects.filter(code=code).exists():
            raise ValidationError("Coupon code already exists")
        return code

    def clean_discount_value(self):
        value = self.cleaned_data["discount_value"]
        if value <= 0:
            raise ValidationError("discountValue must be greater than 0")
        return value

    def clean_usage_type(self):
        return self.cleaned_data.get("usage_type") or "multi-use"

    def clean_applicable_categories(self):
        categories = self.cleaned_data.get("applicable_categories") or []
        if not isinstance(categories, list):
            raise ValidationError("applicableCategories must be a list")
        return categories

    def clean_is_active(self):
        # absent means active
        if "is_active" not in self.data:
            return True
        return self.cleaned_data["is_active"]

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("discount_type") == "percentage" and (cleaned.get("discount_value") or 0) > 100:
            self.add_error("discount_value", "Percentage discount cannot exceed 100")
        valid_from, valid_until = cleaned.get("valid_from"), cleaned.get("valid_until")
        if valid_from and valid_until and valid_until <= valid_from:
            self.add_error("valid_until", "validUntil must be after validFrom")
        return cleaned

    def error_list(self) -> list:
        return [message for messages in self.errors.values() for message in messages]

    def save(self) -> Coupon:
        return Coupon.objects.create(**self.cleaned_data)
