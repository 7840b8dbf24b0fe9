"""PII masking for log events and surfaced error context.

Contact details held on consent records are personal data: they may
travel through the engine but must never reach a log sink or an error
payload in clear text.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Final

# ---------------------------------------------------------------------------
# PII sanitisation patterns
# ---------------------------------------------------------------------------

_EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"
)

# International numbers with a leading '+', or a bare run of 10-15 digits.
# We preserve only the last 4 digits.
_PHONE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?:\+\d[\d\s-]{5,}(\d{4})|\b\d{6,11}(\d{4})\b)"
)


def mask_email(text: str) -> str:
    """Mask email addresses in *text*."""
    return _EMAIL_PATTERN.sub("[EMAIL_REDACTED]", text)


def mask_phone(text: str) -> str:
    """Mask phone numbers in *text*, preserving only the last 4 digits.

    ``+44 7700 900123`` becomes ``XXXXXX0123``.
    """

    def _mask(match: re.Match[str]) -> str:
        last_four = match.group(1) or match.group(2)
        return f"XXXXXX{last_four}"

    return _PHONE_PATTERN.sub(_mask, text)


def redact_pii(text: str) -> str:
    """Apply all PII masking routines to *text*.

    Emails go first so digits inside an address are not taken for a
    phone number.
    """
    text = mask_email(text)
    text = mask_phone(text)
    return text


def redact_value(value: Any) -> Any:
    """Recursively mask strings inside mappings and sequences."""
    if isinstance(value, str):
        return redact_pii(value)
    if isinstance(value, Mapping):
        return {k: redact_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [redact_value(v) for v in value]
    if isinstance(value, tuple):
        return tuple(redact_value(v) for v in value)
    return value
