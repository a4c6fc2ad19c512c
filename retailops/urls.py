from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/payment-gateway/", include("payments.urls")),
    path("api/delivery/", include("delivery.urls")),
    path("api/coupons/", include("coupons.urls")),
    path("api/dashboard/", include("dashboard.urls")),
]

handler404 = "retailops.views.error_404_view"
