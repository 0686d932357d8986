from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .api.views import AddressViewSet, NotificationViewSet

router = DefaultRouter()
router.register(r"notifications", NotificationViewSet, basename="notification")
router.register(r"addresses", AddressViewSet, basename="address")

app_name = "accounts"

urlpatterns = [
    path("", include(router.urls)),
]
