class PayoutError(Exception):
    """Base class for payout exceptions."""

    code = "payout_failure"


class AccountNotOnboarded(PayoutError):
    """The provider has no connected account to receive funds. Not retryable."""

    code = "account_not_onboarded"


class PayoutGatewayError(PayoutError):
    """The gateway failed or its outcome is unknown. Retryable with the same key."""

    code = "gateway_error"
