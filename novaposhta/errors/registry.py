"""Error code registry with E-XXXX format codes.

Errors raised by the client are organized into categories:
- E-1xxx: Validation errors (local checks before any remote call)
- E-3xxx: Nova Poshta API and transport errors
- E-4xxx: System/internal errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    VALIDATION = "validation"  # E-1xxx
    API = "api"  # E-3xxx
    SYSTEM = "system"  # E-4xxx


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action the caller should take to resolve.
        is_retryable: Whether the operation can be retried unchanged.
    """

    code: str
    category: ErrorCategory
    title: str
    message_template: str
    remediation: str
    is_retryable: bool = False


ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Validation errors (E-1xxx)
    "E-1001": ErrorCode(
        code="E-1001",
        category=ErrorCategory.VALIDATION,
        title="Missing Required Field",
        message_template="{field} is required field for {entity}",
        remediation="Supply a non-empty value for the field and retry.",
    ),
    "E-1002": ErrorCode(
        code="E-1002",
        category=ErrorCategory.VALIDATION,
        title="Unsupported Common Method",
        message_template="'{method}' is not a supported Common model method.",
        remediation="Use one of the CommonMethod enum members.",
    ),
    # API errors (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.API,
        title="Nova Poshta API Unreachable",
        message_template="Request {model}.{method} failed: {reason}",
        remediation="Check network connectivity and the configured timeout, then retry.",
        is_retryable=True,
    ),
    "E-3002": ErrorCode(
        code="E-3002",
        category=ErrorCategory.API,
        title="Nova Poshta HTTP Error",
        message_template="Request {model}.{method} returned HTTP {status_code}.",
        remediation="Wait a few minutes and retry. Check the API status if the issue persists.",
        is_retryable=True,
    ),
    # System errors (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.SYSTEM,
        title="Area Dataset Unavailable",
        message_template="Could not load bundled area dataset: {reason}",
        remediation="Reinstall the package; the bundled areas.json is missing or corrupt.",
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)

