"""
Payment Service Abstraction Layer
==================================

Provides a unified interface for charges, transfers and provider onboarding.
"""

from .factory import PaymentFactory
from .interface import (
    AccountLink,
    ChargeRecord,
    ConnectedAccount,
    PaymentDeclined,
    PaymentException,
    PaymentProviderInterface,
    PaymentStatus,
    PaymentTimeout,
    TransferRecord,
)
from .stripe_provider import StripeProvider

__all__ = [
    "PaymentProviderInterface",
    "ChargeRecord",
    "TransferRecord",
    "ConnectedAccount",
    "AccountLink",
    "PaymentStatus",
    "PaymentException",
    "PaymentDeclined",
    "PaymentTimeout",
    "StripeProvider",
    "PaymentFactory",
]
