from rest_framework import status
from rest_framework.response import Response

from jobs.services.base import ErrorCodes, ServiceResult

ERROR_STATUS = {
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCodes.PAYMENT_FAILURE: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCodes.PAYOUT_FAILURE: status.HTTP_502_BAD_GATEWAY,
    ErrorCodes.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(result: ServiceResult) -> Response:
    """Map a failed ServiceResult to an HTTP response carrying only {code, detail}."""
    http_status = ERROR_STATUS.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({"code": result.error, "detail": result.error_detail}, status=http_status)
