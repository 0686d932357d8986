"""
Shared service primitives for the jobs, accounts and payment_system apps.

Domain services live with their models and are imported from there:

    from jobs.cart.domain.services import CartService, PricingService
    from jobs.ledger.domain.services import RequestLedgerService

This package only holds the result type and base class they all build on,
so importing it never pulls in a domain service.
"""

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


__all__ = [
    "BaseService",
    "ServiceResult",
    "ErrorCodes",
    "service_ok",
    "service_err",
]
