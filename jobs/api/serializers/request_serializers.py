from rest_framework import serializers

from jobs.ledger.domain.models import ActiveRequest, CompletedRequest


class SubmitRequestSerializer(serializers.Serializer):
    address_id = serializers.UUIDField()
    payment_token = serializers.CharField(max_length=255)
    submission_id = serializers.UUIDField(required=False, help_text="Client-chosen id; makes resubmission safe")


REQUEST_FIELDS = [
    "id",
    "stage",
    "customer",
    "provider",
    "cart",
    "address",
    "weather",
    "subtotal",
    "tax_amount",
    "charge_amount",
    "charge_currency",
    "created_at",
    "accepted_at",
    "started_at",
    "updated_at",
]


class ActiveRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = ActiveRequest
        fields = REQUEST_FIELDS + ["cancellation_count"]
        read_only_fields = fields


class CompletedRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = CompletedRequest
        fields = REQUEST_FIELDS + ["completed_at", "payout_amount"]
        read_only_fields = fields


def serialize_request(instance):
    if isinstance(instance, CompletedRequest):
        return CompletedRequestSerializer(instance).data
    return ActiveRequestSerializer(instance).data
