"""
Payment Provider Interface
===========================

Abstract base class defining the contract for payment operations.
Covers the two money movements of a job (charge the customer, transfer the
provider share) plus the Connect onboarding calls a provider needs before the
first transfer.

All amounts cross this boundary as integers in the smallest currency unit.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class PaymentStatus(str, Enum):
    """Payment status enumeration."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class ChargeRecord:
    """
    Represents a captured customer charge.

    Attributes:
        charge_id: Gateway charge identifier
        amount: Charged amount in smallest currency unit (cents)
        currency: ISO currency code (e.g., 'usd')
        status: Current charge status
        created: Unix timestamp reported by the gateway
        metadata: Custom data attached to the charge
    """

    charge_id: str
    amount: int
    currency: str
    status: PaymentStatus
    created: int
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TransferRecord:
    """
    Represents a transfer to a connected account.

    Attributes:
        transfer_id: Gateway transfer identifier
        amount: Transferred amount in smallest currency unit
        currency: ISO currency code
        destination_account: Connected account that received the funds
        transfer_group: Grouping key (the request id)
    """

    transfer_id: str
    amount: int
    currency: str
    destination_account: str
    transfer_group: Optional[str] = None
    created: Optional[int] = None


@dataclass
class ConnectedAccount:
    account_id: str
    details_submitted: bool = False
    payouts_enabled: bool = False


@dataclass
class AccountLink:
    url: str
    expires_at: Optional[int] = None


class PaymentProviderInterface(ABC):
    """
    Abstract interface for payment provider operations.

    Concrete implementations:
        - StripeProvider: Stripe charges and Connect transfers
    """

    @abstractmethod
    def create_charge(
        self,
        amount: int,
        currency: str,
        source_token: str,
        idempotency_key: str,
        metadata: Optional[Dict[str, Any]] = None,
        description: str = "",
    ) -> ChargeRecord:
        """
        Capture a charge against a customer payment token.

        Args:
            amount: Amount in smallest currency unit
            currency: ISO currency code
            source_token: Opaque payment token from the client
            idempotency_key: Key that makes retries of this call collapse into one charge
            metadata: Custom data to attach (must include 'request_id')
            description: Statement description

        Returns:
            ChargeRecord of the captured charge

        Raises:
            PaymentDeclined: If the gateway refuses the charge
            PaymentTimeout: If the outcome could not be determined
            PaymentException: For any other gateway failure
        """
        pass

    @abstractmethod
    def find_charge(self, request_id: str) -> Optional[ChargeRecord]:
        """
        Look up a successful charge previously created for a request.

        Used after a timeout to learn whether the charge actually happened.

        Returns:
            ChargeRecord or None when no charge exists
        """
        pass

    @abstractmethod
    def create_transfer(
        self,
        amount: int,
        currency: str,
        destination_account: str,
        idempotency_key: str,
        transfer_group: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> TransferRecord:
        """
        Transfer funds to a connected account.

        Args:
            amount: Amount in smallest currency unit
            currency: ISO currency code
            destination_account: Connected account id of the provider
            idempotency_key: Key that makes retries collapse into one transfer
            transfer_group: Grouping key used to find the transfer again
            metadata: Custom data

        Returns:
            TransferRecord

        Raises:
            PaymentTimeout: If the outcome could not be determined
            PaymentException: If the transfer fails
        """
        pass

    @abstractmethod
    def find_transfer(self, transfer_group: str) -> Optional[TransferRecord]:
        """Return the transfer created for a transfer group, or None."""
        pass

    @abstractmethod
    def create_connected_account(self, email: str, metadata: Optional[Dict[str, Any]] = None) -> ConnectedAccount:
        """Create a connected account for a provider."""
        pass

    @abstractmethod
    def create_account_link(self, account_id: str, refresh_url: str, return_url: str) -> AccountLink:
        """Create an onboarding link for a connected account."""
        pass


class PaymentException(Exception):
    """Base exception for payment operations."""

    pass


class PaymentDeclined(PaymentException):
    """The gateway refused the charge (card declined, invalid token...)."""

    pass


class PaymentTimeout(PaymentException):
    """The gateway did not answer in time; the outcome is unknown."""

    pass
