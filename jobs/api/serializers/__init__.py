from .cart_serializers import AddCartItemRequestSerializer, CartItemSerializer
from .request_serializers import (
    ActiveRequestSerializer,
    CompletedRequestSerializer,
    SubmitRequestSerializer,
    serialize_request,
)
from .response_serializers import ErrorResponseSerializer


__all__ = [
    "AddCartItemRequestSerializer",
    "CartItemSerializer",
    "SubmitRequestSerializer",
    "ActiveRequestSerializer",
    "CompletedRequestSerializer",
    "serialize_request",
    "ErrorResponseSerializer",
]
