from rest_framework import serializers

from accounts.models import Address, Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ["id", "message", "created_at", "read"]
        read_only_fields = fields


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = ["id", "name", "number", "unit", "street", "city", "state", "zip_code", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]
