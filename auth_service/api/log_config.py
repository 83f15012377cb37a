"""Logging setup for the API process."""

import logging
import sys

from auth_service.app.utils.masking import SecretRedactingFilter

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Send logs to stdout and redact secrets on every root handler.

    Handlers installed by someone else (uvicorn, pytest) are kept and get
    the redacting filter too.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    for handler in root.handlers:
        if not any(isinstance(f, SecretRedactingFilter) for f in handler.filters):
            handler.addFilter(SecretRedactingFilter())
