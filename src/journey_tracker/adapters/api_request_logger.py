"""Utility for logging backend requests when JT_LOG_REQUESTS is enabled."""

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

_SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}


def should_log_requests() -> bool:
    """Check if request logging is enabled via the JT_LOG_REQUESTS environment variable."""
    return os.getenv("JT_LOG_REQUESTS", "").lower() == "true"


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Replace values of credential-bearing headers."""
    return {
        k: "***REDACTED***" if k.lower() in _SENSITIVE_HEADERS else v for k, v in headers.items()
    }


def log_api_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    payload: Any = None,
) -> None:
    """Log a backend request if JT_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method.
        url: Request URL.
        headers: Request headers; credentials are redacted.
        payload: JSON body.
    """
    if not should_log_requests():
        return

    lines = [f"{method} {url}"]
    if headers:
        lines.append(f"Headers: {json.dumps(redact_headers(headers), indent=2)}")
    if payload is not None:
        try:
            lines.append(f"Payload: {json.dumps(payload, indent=2, default=str)}")
        except (TypeError, ValueError):
            lines.append(f"Payload: {payload}")

    logger.info("Backend request:\n" + "\n".join(lines))
