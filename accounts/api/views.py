from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.api.serializers import AddressSerializer, NotificationSerializer
from infrastructure.container import container
from jobs.api.responses import error_response
from jobs.api.serializers import ErrorResponseSerializer


class NotificationViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="notifications_list",
        summary="List notifications in the order they were sent",
        responses={200: NotificationSerializer(many=True)},
        tags=["Accounts - Notifications"],
    )
    def list(self, request):
        unread_only = request.query_params.get("unread") in ("1", "true")
        result = container.notification_service().list_for_user(request.user, unread_only=unread_only)
        if not result.ok:
            return error_response(result)
        return Response(NotificationSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="notifications_mark_read",
        summary="Mark a notification as read",
        request=None,
        responses={
            200: NotificationSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Notification not found"),
        },
        tags=["Accounts - Notifications"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        result = container.notification_service().mark_read(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(NotificationSerializer(result.value).data, status=status.HTTP_200_OK)


class AddressViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    lookup_value_regex = "[0-9a-f-]{36}"

    @extend_schema(
        operation_id="addresses_list",
        summary="List saved addresses",
        responses={200: AddressSerializer(many=True)},
        tags=["Accounts - Addresses"],
    )
    def list(self, request):
        result = container.address_service().list_addresses(request.user)
        return Response(AddressSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="addresses_create",
        summary="Save an address",
        request=AddressSerializer,
        responses={201: AddressSerializer, 400: OpenApiResponse(response=ErrorResponseSerializer)},
        tags=["Accounts - Addresses"],
    )
    def create(self, request):
        serializer = AddressSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = container.address_service().add_address(request.user, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(AddressSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="addresses_update",
        summary="Edit a saved address",
        description="Requests already submitted keep the address as it was at submission.",
        request=AddressSerializer,
        responses={200: AddressSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
        tags=["Accounts - Addresses"],
    )
    def partial_update(self, request, pk=None):
        serializer = AddressSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = container.address_service().update_address(request.user, pk, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(AddressSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="addresses_delete",
        summary="Delete a saved address",
        description="Requests already submitted keep their copy of the address.",
        responses={204: None, 404: OpenApiResponse(response=ErrorResponseSerializer)},
        tags=["Accounts - Addresses"],
    )
    def destroy(self, request, pk=None):
        result = container.address_service().remove_address(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)
