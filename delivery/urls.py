from django.urls import path
from . import views
app_name = "delivery"
urlpatterns = [
    path("", views.partner_collection_view, name="partner_list"),
    path("approved", views.approved_partners_view, name="approved_partners"),
    # Public: link from the approval email
    path("verify-email", views.verify_email_view, name="verify_email"),
    path("<int:pk>", views.partner_detail_view, name="partner_detail"),
    path("<int:pk>/status-history", views.status_history_view, name="status_history"),
    path("<int:pk>/application-status", views.application_status_view, name="application_status"),
    path("<int:pk>/partner-status", views.partner_status_view, name="partner_status"),
]
