import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import CustomerRequired, ProviderRequired
from infrastructure.container import container
from jobs.api.responses import error_response
from jobs.api.serializers import (
    ActiveRequestSerializer,
    CompletedRequestSerializer,
    ErrorResponseSerializer,
    SubmitRequestSerializer,
    serialize_request,
)
from jobs.ledger.domain.services import RequestLedgerService
from utils.logging_utils import sanitize_payload

logger = logging.getLogger(__name__)

TRANSITION_RESPONSES = {
    200: OpenApiResponse(response=ActiveRequestSerializer, description="Transition applied"),
    404: OpenApiResponse(response=ErrorResponseSerializer, description="Request not found"),
    409: OpenApiResponse(response=ErrorResponseSerializer, description="Request is not in the required stage"),
}


class RequestViewSet(viewsets.ViewSet):
    """
    Snow removal requests.

    Customers submit and follow their requests; providers browse the live job
    board and move the requests they hold through accept, start and complete.
    """

    lookup_value_regex = "[0-9a-f-]{36}"

    def get_permissions(self):
        if self.action == "create":
            return [CustomerRequired()]
        if self.action in ("accept", "cancel", "start", "complete", "jobs"):
            return [ProviderRequired()]
        return [IsAuthenticated()]

    def get_service(self) -> RequestLedgerService:
        return container.request_ledger_service()

    @extend_schema(
        operation_id="requests_list",
        summary="List requests",
        description="""
        **Providers:** the live job board (unclaimed requests, oldest first).

        **Customers:** their own active and completed requests.
        """,
        tags=["Jobs - Requests"],
    )
    def list(self, request):
        service = self.get_service()
        user = request.user

        if user.is_provider():
            result = service.list_live_requests()
            if not result.ok:
                return error_response(result)
            return Response(ActiveRequestSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

        result = service.list_customer_requests(user)
        if not result.ok:
            return error_response(result)
        return Response(
            {
                "active": ActiveRequestSerializer(result.value["active"], many=True).data,
                "completed": CompletedRequestSerializer(result.value["completed"], many=True).data,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        operation_id="requests_provider_jobs",
        summary="Requests held or completed by the provider",
        tags=["Jobs - Requests"],
    )
    @action(detail=False, methods=["get"])
    def jobs(self, request):
        result = self.get_service().list_provider_requests(request.user)
        if not result.ok:
            return error_response(result)
        return Response(
            {
                "active": ActiveRequestSerializer(result.value["active"], many=True).data,
                "completed": CompletedRequestSerializer(result.value["completed"], many=True).data,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        operation_id="requests_retrieve",
        summary="Get a request",
        responses={404: OpenApiResponse(response=ErrorResponseSerializer, description="Request not found")},
        tags=["Jobs - Requests"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_request(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(serialize_request(result.value), status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="requests_submit",
        summary="Submit the cart as a request",
        description="""
        **What it receives:**
        - `address_id` (UUID): one of the customer's saved addresses
        - `payment_token`: card token from the payment form
        - `submission_id` (UUID, optional): resubmitting with the same id never charges twice

        **What it does:**
        - Prices every cart item server-side from current weather
        - Charges subtotal + tax before anything is stored
        - Creates a live request and empties the cart
        """,
        request=SubmitRequestSerializer,
        responses={
            201: OpenApiResponse(response=ActiveRequestSerializer, description="Request is live"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Empty cart or invalid input"),
            402: OpenApiResponse(response=ErrorResponseSerializer, description="Payment declined"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Address not found"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Jobs - Requests"],
    )
    def create(self, request):
        serializer = SubmitRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        logger.info(
            f"Submit from {request.user.id}: "
            f"{sanitize_payload(data, ('address_id', 'payment_token', 'submission_id'))}"
        )
        result = self.get_service().submit_request(
            request.user,
            data["address_id"],
            data["payment_token"],
            submission_id=data.get("submission_id"),
        )
        if not result.ok:
            return error_response(result)
        return Response(ActiveRequestSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="requests_accept",
        summary="Accept a live request",
        request=None,
        responses=TRANSITION_RESPONSES,
        tags=["Jobs - Requests"],
    )
    @action(detail=True, methods=["post"])
    def accept(self, request, pk=None):
        result = self.get_service().accept_request(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(ActiveRequestSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="requests_cancel",
        summary="Give an accepted request back to the job board",
        request=None,
        responses=TRANSITION_RESPONSES,
        tags=["Jobs - Requests"],
    )
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        result = self.get_service().cancel_request(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(ActiveRequestSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="requests_start",
        summary="Start an accepted request",
        request=None,
        responses=TRANSITION_RESPONSES,
        tags=["Jobs - Requests"],
    )
    @action(detail=True, methods=["post"])
    def start(self, request, pk=None):
        result = self.get_service().start_request(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(ActiveRequestSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="requests_complete",
        summary="Complete a started request and get paid",
        request=None,
        responses={
            200: OpenApiResponse(response=CompletedRequestSerializer, description="Request completed and paid"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Request not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Request is not started by you"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Payout failed, request stays started"),
        },
        tags=["Jobs - Requests"],
    )
    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        result = self.get_service().complete_request(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(CompletedRequestSerializer(result.value).data, status=status.HTTP_200_OK)
