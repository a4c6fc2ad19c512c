from django.urls import path
from . import views
app_name = "coupons"
urlpatterns = [
    path("", views.coupon_collection_view, name="coupon_list"),
]
