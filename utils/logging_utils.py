from typing import Any, Dict, Iterable

# Keys that must never reach log output in clear text.
SENSITIVE_KEYS = ("payment_token", "source_token", "stripe_account_id", "destination_account", "email")


def mask_value(value: Any) -> Any:
    """Mask tokens, account ids and emails for log output."""
    if not isinstance(value, str):
        return value
    if "@" in value:  # email
        name, _, domain = value.partition("@")
        return (name[:2] + "***@" + domain) if name else "***@" + domain
    if len(value) > 12:
        return value[:4] + "..." + value[-4:]
    return "***"


def sanitize_payload(payload: Dict, allowed_keys: Iterable[str]) -> Dict:
    """Return a filtered copy of payload with only allowed keys, sensitive values masked."""
    result = {}
    for key in allowed_keys:
        if key in payload:
            value = payload[key]
            result[key] = mask_value(value) if key in SENSITIVE_KEYS else value
    return result
