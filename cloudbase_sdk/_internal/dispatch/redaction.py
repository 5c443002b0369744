"""Redaction of secrets before request data reaches the debug log."""

from collections.abc import Iterable
from typing import Any

REDACT_KEYS: frozenset[str] = frozenset({
    "app_pwd",
    "cb_auth_password",
    "cb_shared_password",
    "password",
    "secret",
    "token",
    "api_key",
    "authorization",
})

REDACTED_VALUE = "[REDACTED]"


def redact_fields(fields: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Redact sensitive form fields.

    Args:
        fields: Form field name/value pairs, in order.

    Returns:
        A new list with sensitive values replaced by "[REDACTED]".
    """
    return [
        (name, REDACTED_VALUE if name.lower() in REDACT_KEYS else value) for name, value in fields
    ]


def _is_sensitive(key: Any) -> bool:
    return isinstance(key, str) and key.lower() in REDACT_KEYS


def redact_payload(payload: Any) -> Any:
    """Return a copy of native JSON data with sensitive keys redacted.

    Mappings are walked at every depth, including inside lists and tuples.
    Tuples come back as lists, matching their JSON form.
    """
    if isinstance(payload, dict):
        return {
            key: REDACTED_VALUE if _is_sensitive(key) else redact_payload(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple)):
        return [redact_payload(item) for item in payload]
    return payload
