from django.urls import path
from . import views, webhook
app_name = "payments"
urlpatterns = [
    path("", views.gateway_list_view, name="gateway_list"),
    path("active", views.active_gateways_view, name="active_gateways"),
    # Public: checkout confirmation and provider callbacks
    path("verify", webhook.verify_payment_view, name="verify_payment"),
    path("webhook/razorpay", webhook.razorpay_webhook, name="razorpay_webhook"),
    path("webhook/stripe", webhook.stripe_webhook, name="stripe_webhook"),
    path("<str:gateway_name>", views.gateway_update_view, name="gateway_update"),
    path("<str:gateway_name>/toggle", views.gateway_toggle_view, name="gateway_toggle"),
]
