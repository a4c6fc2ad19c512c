from django.contrib import admin
from .models import Coupon

@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ("code", "discount_type", "discount_value", "usage_type", "current_usage_count", "valid_from", "valid_until", "is_active")
    list_filter = ("is_active", "discount_type", "usage_type")
    search_fields = ("code", "description")
    readonly_fields = ("current_usage_count", "created_at", "updated_at")
