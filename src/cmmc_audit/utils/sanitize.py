"""Error message sanitization for console and report output."""

from __future__ import annotations

import os
import re

MAX_ERROR_LENGTH = 200


def sanitize_error(message: str) -> str:
    """Flatten command output into a single line and redact the user's home path."""
    if not message:
        return message

    sanitized = re.sub(r"\s+", " ", message).strip()

    # Redact user home paths
    home = os.environ.get("USERPROFILE") or os.environ.get("HOME") or ""
    if home and home not in ("/", "\\"):
        sanitized = sanitized.replace(home, "[USER_HOME]")

    if len(sanitized) > MAX_ERROR_LENGTH:
        sanitized = sanitized[: MAX_ERROR_LENGTH - 3] + "..."
    return sanitized
