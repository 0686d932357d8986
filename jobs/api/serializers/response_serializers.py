from rest_framework import serializers


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    code = serializers.CharField(help_text="Error kind (validation_error, not_found, conflict, ...)")
    detail = serializers.CharField(help_text="Human-readable error message")
