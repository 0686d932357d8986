from .cart_views import CartViewSet
from .prometheus_metrics import jobs_prometheus_metrics
from .request_views import RequestViewSet


__all__ = ["CartViewSet", "RequestViewSet", "jobs_prometheus_metrics"]
