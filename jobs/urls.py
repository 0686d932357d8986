from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .api.views import CartViewSet, RequestViewSet, jobs_prometheus_metrics

router = DefaultRouter()
router.register(r"cart", CartViewSet, basename="cart")
router.register(r"requests", RequestViewSet, basename="request")

app_name = "jobs"

urlpatterns = [
    path("", include(router.urls)),
    # Prometheus metrics endpoint
    path("metrics/", jobs_prometheus_metrics, name="jobs-metrics"),
]
