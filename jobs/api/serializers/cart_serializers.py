import logging

from rest_framework import serializers

from infrastructure.container import container
from infrastructure.storage import StorageException
from jobs.cart.domain.models import CartItem

logger = logging.getLogger(__name__)


class AddCartItemRequestSerializer(serializers.Serializer):
    object_type = serializers.ChoiceField(choices=[choice for choice, _ in CartItem.OBJECT_TYPE_CHOICES])
    attributes = serializers.DictField(required=False, default=dict)
    job_size = serializers.ChoiceField(
        choices=[choice for choice, _ in CartItem.JOB_SIZE_CHOICES], required=False, allow_null=True
    )
    image_ref = serializers.CharField(required=False, allow_blank=True, default="")
    message = serializers.CharField(required=False, allow_blank=True, default="")
    zip_code = serializers.RegexField(r"^\d{5}(-\d{4})?$", required=False, allow_blank=True)


class CartItemSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(source="cart.user_id", read_only=True)
    image_url = serializers.SerializerMethodField()

    class Meta:
        model = CartItem
        fields = [
            "id",
            "user_id",
            "object_type",
            "job_size",
            "price",
            "attributes",
            "message",
            "image_ref",
            "image_url",
            "added_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_image_url(self, obj):
        if not obj.image_ref:
            return None
        try:
            return container.storage().get_url(obj.image_ref)
        except StorageException:
            logger.warning(f"Could not resolve image for cart item {obj.id}")
            return None
