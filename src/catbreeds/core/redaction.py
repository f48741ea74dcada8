"""Secret redaction for log lines and error messages.

SECURITY: the Cat API key travels in the ``x-api-key`` header. Anything that
logs request headers or echoes transport errors must go through these helpers
so the key never lands in logs or user-facing messages.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional

# Regex to detect potential API keys / bearer tokens in strings
_SECRET_PATTERN = re.compile(
    r"(?i)"
    r"(?:"
    r"(?:x-api-key|api[_-]?key|token|bearer|authorization|secret)"
    r"[\s:=]+"
    r")"
    r"['\"]?([^\s'\"&]{8,})['\"]?",
)

# Headers that should never appear in logs/errors
_SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "x-api-key",
        "api-key",
        "apikey",
        "cookie",
        "set-cookie",
    }
)

REDACTED = "****"


def redact_secrets(text: str) -> str:
    """Remove API keys and sensitive tokens from a text string.

    Scans for patterns like ``x-api-key: ...``, ``api_key=...`` or
    ``Bearer ...`` and replaces the secret portion with ``"****"``.

    Args:
        text: Input text that may contain secrets.

    Returns:
        Text with secrets replaced by the redacted placeholder.
    """
    if not text:
        return text

    def _replace(match: re.Match[str]) -> str:
        return match.group(0).replace(match.group(1), REDACTED)

    return _SECRET_PATTERN.sub(_replace, text)


def redact_headers(headers: Optional[Mapping[str, str]]) -> dict[str, str]:
    """Return a copy of *headers* with sensitive values redacted.

    Args:
        headers: HTTP header mapping (case-insensitive keys).

    Returns:
        New dict with sensitive header values replaced by ``"****"``.
    """
    result: dict[str, str] = {}
    for key, value in (headers or {}).items():
        if key.lower() in _SENSITIVE_HEADERS:
            result[key] = REDACTED
        else:
            result[key] = value
    return result
