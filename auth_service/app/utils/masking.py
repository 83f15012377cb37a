"""
Masking of secret values in log output.
"""

import logging
import re

_JWT_PATTERN = re.compile(r"eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*")
_OPAQUE_TOKEN_PATTERN = re.compile(r"(?<![A-Za-z0-9_-])[A-Za-z0-9_-]{40,}(?![A-Za-z0-9_-])")
# 6-digit codes after a "code" label or as a quoted value (SQL parameters, JSON)
_LABELLED_CODE_PATTERN = re.compile(r"""(code['"]?\s*[=:]?\s*['"]?)\d{6}(?!\d)""", re.IGNORECASE)
_QUOTED_CODE_PATTERN = re.compile(r"""(?<=['"])\d{6}(?=['"])""")

REDACTED = "[REDACTED]"


def mask_secret(value) -> str:
    """
    Mask a secret for display, keeping the first and last two characters.

    Values of 4 characters or fewer are masked entirely.
    """
    if value is None:
        return ""
    value = str(value)
    if len(value) <= 4:
        return "*" * len(value)
    return f"{value[:2]}{'*' * (len(value) - 4)}{value[-2:]}"


def redact(text: str) -> str:
    """Replace JWTs, long opaque tokens and 6-digit codes in free text"""
    text = _JWT_PATTERN.sub(REDACTED, text)
    text = _OPAQUE_TOKEN_PATTERN.sub(REDACTED, text)
    text = _LABELLED_CODE_PATTERN.sub(r"\1" + REDACTED, text)
    return _QUOTED_CODE_PATTERN.sub(REDACTED, text)


class SecretRedactingFilter(logging.Filter):
    """Logging filter that redacts secrets from every record it sees"""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True
