"""
CartService - Service Cart Operations

Handles the customer's cart of snow removal jobs: add, update (explicit
patch), remove, list, and the priced snapshot a request is submitted with.
Items carry an estimated price from the weather at the customer's address when
they are added or resized; submission always reprices from fresh weather.
Every operation is scoped to the calling user; another user's item behaves as
if it did not exist.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction

from accounts.domain.models import Address
from infrastructure.weather import WeatherException, WeatherProviderInterface, WeatherSnapshot
from jobs.cart.domain.models import Cart, CartItem
from jobs.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

from .item_types import (
    CartItemPatch,
    ItemValidationError,
    parse_item_type,
    resolve_job_size,
    validate_attributes,
)
from .pricing_service import PricingService

logger = logging.getLogger(__name__)


class CartService(BaseService):
    """
    Service for managing cart operations.

    Dependencies:
    - PricingService: prices items when added or resized, and again at submission
    - WeatherProviderInterface: conditions at the customer's address for the estimate
    """

    def __init__(self, pricing_service: PricingService = None, weather_provider: WeatherProviderInterface = None):
        """
        Initialize CartService.

        Args:
            pricing_service: Service for price calculations (injected)
            weather_provider: Weather source for item estimates (container default)
        """
        super().__init__()
        self.pricing_service = pricing_service or PricingService()
        self._weather_provider = weather_provider

    @property
    def weather_provider(self) -> WeatherProviderInterface:
        if self._weather_provider is None:
            from infrastructure.container import container

            self._weather_provider = container.weather()
        return self._weather_provider

    def _current_weather(self, user, zip_code: Optional[str] = None) -> Optional[WeatherSnapshot]:
        """Conditions at the given zip, or at the user's newest address. None when unknown."""
        if not zip_code:
            address = Address.objects.filter(user=user).order_by("-created_at").first()
            if address is None:
                return None
            zip_code = address.zip_code
        try:
            return self.weather_provider.current_conditions(zip_code)
        except WeatherException as e:
            self.logger.warning(f"Weather lookup for cart estimate failed at {zip_code}: {str(e)}")
            return None

    def _estimate(self, job_size: str, weather: Optional[WeatherSnapshot]):
        # Without weather the item shows its fair-weather price.
        if weather is None:
            return self.pricing_service.price(None, None, None, job_size)
        return self.pricing_service.price_for_weather(weather, job_size)

    def _get_item(self, user, item_id) -> Optional[CartItem]:
        return CartItem.objects.select_related("cart").filter(pk=item_id, cart__user=user).first()

    def list_items(self, user) -> ServiceResult[List[CartItem]]:
        items = CartItem.objects.select_related("cart").filter(cart__user=user).order_by("added_at")
        return service_ok(list(items))

    @BaseService.log_performance
    @transaction.atomic
    def add_item(
        self,
        user,
        object_type: str,
        attributes: Optional[Dict[str, Any]] = None,
        job_size: Optional[str] = None,
        image_ref: str = "",
        message: str = "",
        zip_code: Optional[str] = None,
        weather: Optional[WeatherSnapshot] = None,
    ) -> ServiceResult[CartItem]:
        """
        Add a job to the user's cart.

        Args:
            user: Cart owner
            object_type: car, driveway, lawn, street or other
            attributes: Variant-specific fields
            job_size: Explicit size; derived from the attributes when omitted
            image_ref: Reference into the upload store
            message: Free-text note for the provider
            zip_code: Where the job is; defaults to the user's newest address
            weather: Conditions to price with; looked up when omitted

        Returns:
            ServiceResult with the created CartItem, priced from the current weather
        """
        try:
            item_type = parse_item_type(object_type)
            attributes = validate_attributes(item_type, attributes or {})
            size = resolve_job_size(item_type, attributes, job_size)
        except ItemValidationError as e:
            return service_err(ErrorCodes.VALIDATION_ERROR, str(e))

        if weather is None:
            weather = self._current_weather(user, zip_code)

        cart = Cart.get_or_create_cart(user)
        item = CartItem.objects.create(
            cart=cart,
            object_type=item_type.value,
            job_size=size,
            price=self._estimate(size, weather),
            attributes=attributes,
            image_ref=image_ref or "",
            message=message or "",
        )
        self.logger.info(f"Added {item_type.value} item {item.id} to cart of user {user.id}")
        return service_ok(item)

    @BaseService.log_performance
    @transaction.atomic
    def update_item(
        self, user, item_id, payload: Dict[str, Any], weather: Optional[WeatherSnapshot] = None
    ) -> ServiceResult[CartItem]:
        """
        Apply a patch to one of the user's items.

        Args:
            user: Cart owner
            item_id: Item to change
            payload: Changeable fields (job_size, image_ref, message, attributes);
                     identity fields may only be echoed unchanged
            weather: Conditions to reprice with when the size changes

        Returns:
            ServiceResult with the updated CartItem, NOT_FOUND or VALIDATION_ERROR
        """
        item = self._get_item(user, item_id)
        if item is None:
            return service_err(ErrorCodes.NOT_FOUND, f"Cart item {item_id} not found")

        current = {"id": item.id, "user_id": item.cart.user_id, "object_type": item.object_type}
        patch, error = CartItemPatch.from_payload(payload, current)
        if error:
            return service_err(ErrorCodes.VALIDATION_ERROR, error)

        previous_size = item.job_size
        try:
            item_type = parse_item_type(item.object_type)
            attributes = dict(item.attributes)
            if patch.attributes is not None:
                if not isinstance(patch.attributes, dict):
                    raise ItemValidationError("Item attributes must be an object")
                attributes.update(patch.attributes)
                attributes = validate_attributes(item_type, attributes)

            if patch.job_size is not None:
                item.job_size = resolve_job_size(item_type, attributes, patch.job_size)
            elif patch.attributes is not None:
                item.job_size = resolve_job_size(item_type, attributes, None)
        except ItemValidationError as e:
            return service_err(ErrorCodes.VALIDATION_ERROR, str(e))

        if item.job_size != previous_size:
            if weather is None:
                weather = self._current_weather(user)
            item.price = self._estimate(item.job_size, weather)

        item.attributes = attributes
        if patch.image_ref is not None:
            item.image_ref = patch.image_ref
        if patch.message is not None:
            item.message = patch.message
        item.save()

        return service_ok(item)

    @BaseService.log_performance
    def remove_item(self, user, item_id) -> ServiceResult[bool]:
        deleted, _ = CartItem.objects.filter(pk=item_id, cart__user=user).delete()
        if not deleted:
            return service_err(ErrorCodes.NOT_FOUND, f"Cart item {item_id} not found")
        return service_ok(True)

    @BaseService.log_performance
    def snapshot_cart(self, user, weather: WeatherSnapshot) -> ServiceResult[List[Dict[str, Any]]]:
        """
        Price every item in the cart and return frozen copies.

        Nothing is written: a failed submission leaves the cart exactly as it was.

        Returns:
            ServiceResult with a list of item dicts carrying the server-side price,
            VALIDATION_ERROR when the cart is empty
        """
        items = list(CartItem.objects.select_related("cart").filter(cart__user=user).order_by("added_at"))
        if not items:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Cart is empty")

        snapshot = []
        for item in items:
            entry = item.to_snapshot()
            entry["price"] = str(self.pricing_service.price_for_weather(weather, item.job_size))
            snapshot.append(entry)
        return service_ok(snapshot)

    def clear_items(self, user, item_ids: Iterable) -> int:
        """Delete the given items from the user's cart. Runs inside the caller's transaction."""
        deleted, _ = CartItem.objects.filter(cart__user=user, pk__in=list(item_ids)).delete()
        return deleted
