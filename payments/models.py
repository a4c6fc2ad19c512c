from django.db import models


class GatewayName(models.TextChoices):
    RAZORPAY = "razorpay", "Razorpay"
    STRIPE = "stripe", "Stripe"
    COD = "cod", "Cash on Delivery"


class PaymentGateway(models.Model):
    name = models.CharField(max_length=16, choices=GatewayName.choices, unique=True)
    api_key = models.CharField(max_length=255, blank=True, default="")
    secret_key = models.CharField(max_length=255, blank=True, default="")
    webhook_secret = models.CharField(max_length=255, blank=True, default="")
    is_active = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def requires_api_key(self) -> bool:
        return self.name != GatewayName.COD

    def redacted(self) -> dict:
        """Public view of the row: presence flags only, never the secrets."""
        return {
            "id": self.pk,
            "name": self.name,
            "isActive": self.is_active,
            "hasApiKey": bool(self.api_key),
            "hasSecretKey": bool(self.secret_key),
            "hasWebhookSecret": bool(self.webhook_secret),
        }

    def __str__(self):
        return f"{self.name} ({'active' if self.is_active else 'inactive'})"
