from django.contrib import admin
from .models import DeliveryPartner, PartnerIdSequence

@admin.register(DeliveryPartner)
class DeliveryPartnerAdmin(admin.ModelAdmin):
    list_display = ("partner_id", "name", "email", "phone", "vehicle_type", "application_status", "partner_status", "created_at")
    list_filter = ("application_status", "partner_status", "vehicle_type")
    search_fields = ("partner_id", "name", "email", "phone", "vehicle_number", "license_number")
    readonly_fields = ("partner_id", "status_history", "approved_at", "rejected_at", "suspended_at", "created_at", "updated_at")
    exclude = ("password", "email_verification_token")

@admin.register(PartnerIdSequence)
class PartnerIdSequenceAdmin(admin.ModelAdmin):
    list_display = ("id", "last_value", "updated_at")
