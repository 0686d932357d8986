from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import CustomerRequired
from infrastructure.container import container
from infrastructure.weather import WeatherException
from jobs.api.responses import error_response
from jobs.api.serializers import AddCartItemRequestSerializer, CartItemSerializer, ErrorResponseSerializer
from jobs.cart.domain.services import CartService


class CartViewSet(viewsets.ViewSet):
    permission_classes = [CustomerRequired]
    lookup_value_regex = "[0-9a-f-]{36}"

    def get_service(self) -> CartService:
        return container.cart_service()

    @extend_schema(
        operation_id="cart_list",
        summary="List the customer's cart",
        responses={200: CartItemSerializer(many=True)},
        tags=["Jobs - Cart"],
    )
    def list(self, request):
        result = self.get_service().list_items(request.user)
        if not result.ok:
            return error_response(result)
        return Response(CartItemSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="cart_add_item",
        summary="Add a job to the cart",
        description="""
        **What it receives:**
        - `object_type`: car, driveway, lawn, street or other
        - `attributes`: fields of that job kind (e.g. `selected_size` for driveways)
        - `job_size` (optional): derived from the attributes when omitted
        - `image_ref`, `message` (optional)
        - `zip_code` (optional): where the job is; defaults to the newest saved address

        **What it returns:**
        - The created cart item with a price estimated from the current weather there.
          Submission reprices every item from fresh conditions.
        """,
        request=AddCartItemRequestSerializer,
        responses={
            201: OpenApiResponse(response=CartItemSerializer, description="Item added"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid item"),
        },
        tags=["Jobs - Cart"],
    )
    def create(self, request):
        serializer = AddCartItemRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().add_item(request.user, **serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(CartItemSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="cart_update_item",
        summary="Patch a cart item",
        description="""
        Changeable fields: `job_size`, `image_ref`, `message`, `attributes` (merged key by key).
        `id`, `user_id` and `object_type` may be echoed back but never changed or cleared.
        """,
        responses={
            200: OpenApiResponse(response=CartItemSerializer, description="Item updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid patch"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Item not in cart"),
        },
        tags=["Jobs - Cart"],
    )
    def partial_update(self, request, pk=None):
        if not isinstance(request.data, dict):
            return Response(
                {"code": "validation_error", "detail": "Expected an object"}, status=status.HTTP_400_BAD_REQUEST
            )

        result = self.get_service().update_item(request.user, pk, dict(request.data))
        if not result.ok:
            return error_response(result)
        return Response(CartItemSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="cart_remove_item",
        summary="Remove a cart item",
        responses={204: None, 404: OpenApiResponse(response=ErrorResponseSerializer)},
        tags=["Jobs - Cart"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().remove_item(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="cart_quote",
        summary="Price the cart with current weather",
        description="Returns the items priced as they would be charged now. Nothing is stored.",
        tags=["Jobs - Cart"],
    )
    @action(detail=False, methods=["get"])
    def quote(self, request):
        zip_code = request.query_params.get("zip_code")
        if not zip_code:
            return Response(
                {"code": "validation_error", "detail": "zip_code is required"}, status=status.HTTP_400_BAD_REQUEST
            )

        try:
            weather = container.weather().current_conditions(zip_code)
        except WeatherException:
            return Response(
                {"code": "internal_error", "detail": "Weather conditions are unavailable"},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        result = self.get_service().snapshot_cart(request.user, weather)
        if not result.ok:
            return error_response(result)
        totals = container.pricing_service().calculate_totals(item["price"] for item in result.value)
        if not totals.ok:
            return error_response(totals)
        return Response(
            {
                "items": result.value,
                "weather": weather.to_dict(),
                "subtotal": str(totals.value["subtotal"]),
                "tax": str(totals.value["tax"]),
                "total": str(totals.value["total"]),
            },
            status=status.HTTP_200_OK,
        )
