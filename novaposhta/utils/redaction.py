"""Secret redaction for request logging.

Every Nova Poshta request envelope carries the API key, so the transport
passes the envelope through here before logging it. Key names are matched
case-insensitively by substring, at any depth of nested dicts and lists.
"""

from typing import Any

# Substring patterns matched case-insensitively against dict keys
SENSITIVE_KEY_PATTERNS = frozenset({"apikey", "api_key", "password", "token"})

REDACTED = "***REDACTED***"


def _is_sensitive_key(key: str, patterns: frozenset[str]) -> bool:
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in patterns)


def _redact(value: Any, patterns: frozenset[str]) -> Any:
    if isinstance(value, dict):
        return redact_for_logging(value, patterns)
    if isinstance(value, (list, tuple)):
        return [_redact(item, patterns) for item in value]
    return value


def redact_for_logging(
    obj: dict[str, Any],
    patterns: frozenset[str] = SENSITIVE_KEY_PATTERNS,
) -> dict[str, Any]:
    """Return a copy of a request envelope safe to write to logs.

    Args:
        obj: Envelope or any nested dict; not mutated.
        patterns: Key substrings whose values are masked.

    Returns:
        New dict with sensitive values replaced by '***REDACTED***'.
    """
    return {
        key: REDACTED if _is_sensitive_key(str(key), patterns) else _redact(value, patterns)
        for key, value in obj.items()
    }
