from django.urls import path

from .api.views import onboarding_views

app_name = "payment_system"

urlpatterns = [
    path("onboarding/", onboarding_views.onboarding_link, name="onboarding-link"),
    path("payouts/", onboarding_views.payout_history, name="payout-history"),
]
