from django.contrib import admin
from .models import PaymentGateway

@admin.register(PaymentGateway)
class PaymentGatewayAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "created_at", "updated_at")
    list_filter = ("is_active",)
    readonly_fields = ("created_at", "updated_at")
    exclude = ("secret_key", "webhook_secret")
