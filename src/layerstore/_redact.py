"""Helpers for safe debug logging.

Layer values are arbitrary application data and may hold credentials or
very large blobs.  Only what a log line needs is kept: values under
secret-looking keys are masked and long text is cut.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "accesstoken",
        "refreshtoken",
        "apikey",
        "authorization",
        "cookie",
        "privatekey",
    }
)

_REDACTED = "<redacted>"


def _is_sensitive(key: Hashable) -> bool:
    normalized = str(key).lower().replace("_", "").replace("-", "")
    return normalized in _SENSITIVE_VALUE_KEYS


def _truncate(text: str, max_string: int) -> str:
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text


def redact_for_log(value: Any, *, max_string: int = 128) -> Any:
    """Return a log-friendly form of a layer value.

    Scalars are kept, strings are truncated, and mappings keep their shape
    with sensitive entries masked.  Anything else is logged through its
    truncated ``repr``.
    """
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _truncate(value, max_string)
    if isinstance(value, Mapping):
        return {
            str(k): _REDACTED if _is_sensitive(k) else redact_for_log(v, max_string=max_string)
            for k, v in value.items()
        }
    return _truncate(repr(value), max_string)


def redact_entry_for_log(key: Hashable, value: Any, *, max_string: int = 128) -> Any:
    """Redact a single ``key -> value`` entry, masking the value if the key is sensitive."""
    if _is_sensitive(key):
        return _REDACTED
    return redact_for_log(value, max_string=max_string)
