"""Redaction helpers for `extra=` payloads attached to provider log records."""

from __future__ import annotations

import re
from typing import Any, Optional

_REDACTED_VALUE = "***REDACTED***"
_SENSITIVE_KEYS = ("authorization", "token", "api_key", "apikey", "secret")
# Source code and prompts are large and may contain anything; log their size only
_PAYLOAD_KEYS = ("content", "prompt", "messages", "snippet")
_TOKEN_PATTERNS = (
    re.compile(r"(?i)(bearer\s+)[^\s,;]+"),
    re.compile(r"(?i)(token\s*[=:]\s*)[^\s,;]+"),
    re.compile(r"(?i)(api[_-]?key\s*[=:]\s*)[^\s,;]+"),
    re.compile(r"(sk-or-)[^\s,;]+"),
)


def sanitize_for_log(value: Any, *, key: Optional[str] = None) -> Any:
    """Return a recursively sanitized copy of a log payload."""

    if isinstance(value, dict):
        sanitized: dict[str, Any] = {}
        for raw_key, raw_value in value.items():
            field = str(raw_key)
            if _matches(field, _SENSITIVE_KEYS):
                sanitized[field] = _REDACTED_VALUE
            else:
                sanitized[field] = sanitize_for_log(raw_value, key=field)
        return sanitized

    if isinstance(value, (list, tuple)):
        return [sanitize_for_log(item, key=key) for item in value]

    if isinstance(value, str):
        if key and _matches(key, _PAYLOAD_KEYS) and value.strip():
            return f"<redacted payload ({len(value)} chars)>"
        redacted = value
        for pattern in _TOKEN_PATTERNS:
            redacted = pattern.sub(rf"\1{_REDACTED_VALUE}", redacted)
        return redacted

    return value


def sanitize_log_extra(**kwargs: Any) -> dict[str, Any]:
    return {key: sanitize_for_log(value, key=key) for key, value in kwargs.items()}


def _matches(field_name: str, keywords: tuple[str, ...]) -> bool:
    lowered = field_name.lower()
    return any(keyword in lowered for keyword in keywords)
