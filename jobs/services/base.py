"""
Base classes and utilities for the service layer.

This module provides the ServiceResult type returned by every service operation
and the BaseService class shared by the cart, ledger, notification and payout
services.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    A result type that encapsulates success or failure from service operations.

    Expected failures (validation, conflicts, declined payments) travel as
    values; only genuinely unexpected errors are raised.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code from ErrorCodes (present if ok=False)
        error_detail: Client-safe message (present if ok=False)

    Examples:
        >>> result = ledger.accept_request(request_id, provider)
        >>> if not result.ok and result.error == ErrorCodes.CONFLICT:
        ...     return Response({"code": result.error}, 409)
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None


def service_ok(value: T = None) -> ServiceResult[T]:
    """
    Create a successful ServiceResult.

    Args:
        value: The success value

    Returns:
        ServiceResult with ok=True and the value
    """
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "") -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., ErrorCodes.CONFLICT)
        error_detail: Client-safe message; never a raw gateway or database message

    Returns:
        ServiceResult with ok=False and error information

    Example:
        >>> return service_err(ErrorCodes.NOT_FOUND, f"Request {request_id} does not exist")
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error)


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class CartService(BaseService):
            def __init__(self, pricing_service=None):
                super().__init__()
                self.pricing_service = pricing_service or PricingService()

            @BaseService.log_performance
            def list_items(self, user):
                self.logger.info(f"Listing cart for user {user.id}")
    """

    def __init__(self):
        """Initialize base service with logger."""
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log performance of service methods.

        Logs execution time, the error code of failed results and any
        exception that escapes the method (which is re-raised).
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000  # ms

                if isinstance(result, ServiceResult):
                    if result.ok:
                        self.logger.info(f"{method_name} completed successfully in {elapsed_time:.2f}ms")
                    else:
                        self.logger.warning(
                            f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms"
                        )
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper


class ErrorCodes:
    """Error codes returned by the service layer."""

    # Caller-facing kinds
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PAYMENT_FAILURE = "payment_failure"
    PAYOUT_FAILURE = "payout_failure"
    INTERNAL_ERROR = "internal_error"

    # Payout internals, surfaced to callers as PAYOUT_FAILURE
    ACCOUNT_NOT_ONBOARDED = "account_not_onboarded"
    GATEWAY_ERROR = "gateway_error"
