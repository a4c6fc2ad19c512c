from django.db import models


class OnlineOrder(models.Model):
    PAYMENT_STATUS = [
        ("pending", "Pending"),
        ("completed", "Completed"),
        ("failed", "Failed"),
    ]
    order_number = models.CharField(max_length=40, unique=True)
    payment_status = models.CharField(max_length=16, choices=PAYMENT_STATUS, default="pending", db_index=True)
    payment_id = models.CharField(max_length=64, blank=True, default="")  # gateway payment id
    payment_method = models.CharField(max_length=16, default="online")
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.order_number} ({self.payment_status})"
