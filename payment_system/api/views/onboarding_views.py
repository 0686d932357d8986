"""
Provider payout views.

- Stripe Connect onboarding link
- Transfer history for the signed-in provider
"""

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from accounts.permissions import ProviderRequired
from infrastructure.container import container
from jobs.api.responses import error_response
from jobs.api.serializers import ErrorResponseSerializer
from payment_system.models import PayoutTransfer

logger = logging.getLogger(__name__)


class OnboardingLinkRequestSerializer(serializers.Serializer):
    refresh_url = serializers.URLField()
    return_url = serializers.URLField()


class OnboardingLinkResponseSerializer(serializers.Serializer):
    url = serializers.URLField()
    expires_at = serializers.IntegerField(allow_null=True)


class PayoutTransferSerializer(serializers.ModelSerializer):
    request_id = serializers.CharField(source="idempotency_key", read_only=True)

    class Meta:
        model = PayoutTransfer
        fields = ["id", "request_id", "amount_cents", "currency", "status", "created_at", "transferred_at"]
        read_only_fields = fields


@extend_schema(
    operation_id="payouts_onboarding_link",
    summary="Get a Stripe onboarding link",
    description="""
    **What it receives:**
    - `refresh_url`: where Stripe sends the provider if the link expires
    - `return_url`: where Stripe sends the provider when onboarding is done

    Creates the connected account on first use.
    """,
    request=OnboardingLinkRequestSerializer,
    responses={
        200: OnboardingLinkResponseSerializer,
        502: OpenApiResponse(response=ErrorResponseSerializer, description="Stripe refused the request"),
    },
    tags=["Payments - Payouts"],
)
@api_view(["POST"])
@permission_classes([ProviderRequired])
def onboarding_link(request):
    serializer = OnboardingLinkRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    result = container.onboarding_service().get_onboarding_link(
        request.user,
        serializer.validated_data["refresh_url"],
        serializer.validated_data["return_url"],
    )
    if not result.ok:
        return error_response(result)
    return Response({"url": result.value.url, "expires_at": result.value.expires_at}, status=status.HTTP_200_OK)


@extend_schema(
    operation_id="payouts_list",
    summary="List the provider's transfers",
    responses={200: PayoutTransferSerializer(many=True)},
    tags=["Payments - Payouts"],
)
@api_view(["GET"])
@permission_classes([ProviderRequired])
def payout_history(request):
    transfers = PayoutTransfer.objects.filter(provider=request.user)
    return Response(PayoutTransferSerializer(transfers, many=True).data, status=status.HTTP_200_OK)
