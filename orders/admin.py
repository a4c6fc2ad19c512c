from django.contrib import admin
from .models import OnlineOrder

@admin.register(OnlineOrder)
class OnlineOrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "payment_status", "payment_id", "total_amount", "created_at")
    search_fields = ("order_number", "payment_id")
    list_filter = ("payment_status", "payment_method", "created_at")
    readonly_fields = ("created_at", "updated_at")
