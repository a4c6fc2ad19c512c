from django.db import models


class DeliveryPartner(models.Model):
    APPLICATION_STATUS = [
        ("pending", "Pending"),
        ("verified", "Verified"),
        ("approved", "Approved"),
        ("rejected", "Rejected"),
    ]
    PARTNER_STATUS = [
        ("active", "Active"),
        ("inactive", "Inactive"),
        ("suspended", "Suspended"),
    ]
    VEHICLE_TYPES = [
        ("bike", "Bike"),
        ("scooter", "Scooter"),
        ("car", "Car"),
        ("van", "Van"),
    ]

    partner_id = models.CharField(max_length=16, unique=True, null=True, blank=True)  # DP001, issued on approval
    name = models.CharField(max_length=128)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=10, db_index=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=16, blank=True, default="")
    alternate_mobile_number = models.CharField(max_length=16, blank=True, default="")

    vehicle_type = models.CharField(max_length=16, choices=VEHICLE_TYPES)
    vehicle_model = models.CharField(max_length=64, blank=True, default="")
    vehicle_number = models.CharField(max_length=20, unique=True)
    license_number = models.CharField(max_length=32, unique=True)
    aadhar_number = models.CharField(max_length=16, blank=True, default="")

    address = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=64, blank=True, default="")
    state = models.CharField(max_length=64, blank=True, default="")
    pincode = models.CharField(max_length=12, blank=True, default="")
    country = models.CharField(max_length=64, blank=True, default="India")

    emergency_contact_name = models.CharField(max_length=128, blank=True, default="")
    emergency_relationship = models.CharField(max_length=64, blank=True, default="")
    emergency_contact_number = models.CharField(max_length=16, blank=True, default="")

    # storage keys, see delivery.documents
    profile_photo = models.CharField(max_length=255, blank=True, default="")
    aadhar_document = models.CharField(max_length=255, blank=True, default="")
    license_document = models.CharField(max_length=255, blank=True, default="")
    vehicle_rc_document = models.CharField(max_length=255, blank=True, default="")
    insurance_document = models.CharField(max_length=255, blank=True, default="")
    pollution_cert_document = models.CharField(max_length=255, blank=True, default="")
    id_proof_document = models.CharField(max_length=255, blank=True, default="")

    application_status = models.CharField(max_length=16, choices=APPLICATION_STATUS, default="pending", db_index=True)
    partner_status = models.CharField(max_length=16, choices=PARTNER_STATUS, null=True, blank=True, db_index=True)
    status_history = models.JSONField(default=list, blank=True)

    password = models.CharField(max_length=128, blank=True, default="")  # hashed
    email_verification_token = models.CharField(max_length=64, blank=True, default="", db_index=True)
    is_email_verified = models.BooleanField(default=False)

    approved_at = models.DateTimeField(null=True, blank=True)
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.CharField(max_length=128, blank=True, default="")
    suspension_reason = models.CharField(max_length=128, blank=True, default="")
    suspension_note = models.TextField(blank=True, default="")
    suspended_at = models.DateTimeField(null=True, blank=True)

    rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    total_deliveries = models.PositiveIntegerField(default=0)
    is_available = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self):
        return f"{self.partner_id or 'DP---'} {self.name} ({self.application_status})"


class PartnerIdSequence(models.Model):
    """Single-row counter behind partner IDs; locked while an ID is issued."""
    last_value = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"DP{self.last_value:03d}"
