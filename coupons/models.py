from decimal import Decimal

from django.db import models
from django.utils import timezone


class Coupon(models.Model):
    DISCOUNT_TYPES = [
        ("percentage", "Percentage"),
        ("flat", "Flat"),
    ]
    USAGE_TYPES = [
        ("single-use", "Single use"),
        ("multi-use", "Multi use"),
        ("first-time-user-only", "First-time users only"),
    ]

    code = models.CharField(max_length=32, unique=True)  # stored upper-case
    description = models.CharField(max_length=255, blank=True, default="")
    discount_type = models.CharField(max_length=16, choices=DISCOUNT_TYPES)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2)
    usage_type = models.CharField(max_length=24, choices=USAGE_TYPES, default="multi-use")
    max_usage_count = models.PositiveIntegerField(null=True, blank=True)
    current_usage_count = models.PositiveIntegerField(default=0)
    valid_from = models.DateTimeField()
    valid_until = models.DateTimeField()
    min_order_value = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    max_discount_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    applicable_categories = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self):
        return self.code

    @property
    def usage_limit(self):
        if self.usage_type == "single-use":
            return 1 if self.max_usage_count is None else min(self.max_usage_count, 1)
        return self.max_usage_count

    def is_redeemable(self, at=None) -> bool:
        at = at or timezone.now()
        if not self.is_active:
            return False
        if not (self.valid_from <= at <= self.valid_until):
            return False
        limit = self.usage_limit
        return limit is None or self.current_usage_count < limit

    def discount_for(self, order_value) -> Decimal:
        order_value = Decimal(str(order_value))
        if self.min_order_value is not None and order_value < self.min_order_value:
            return Decimal("0")
        if self.discount_type == "percentage":
            discount = order_value * self.discount_value / Decimal("100")
            if self.max_discount_amount is not None:
                discount = min(discount, self.max_discount_amount)
        else:
            discount = self.discount_value
        return min(discount, order_value).quantize(Decimal("0.01"))
