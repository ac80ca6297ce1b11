"""Error handling framework for the Nova Poshta client.

This package provides:
- Error code registry with E-XXXX format codes
- NovaPoshtaError exception hierarchy for local failures
- Error formatting for display

Error categories:
- E-1xxx: Validation errors
- E-3xxx: API and transport errors
- E-4xxx: System/internal errors
"""

from novaposhta.errors.formatter import (
    DocumentValidationError,
    NovaPoshtaError,
    TransportError,
    format_error,
)
from novaposhta.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    # Exceptions
    "NovaPoshtaError",
    "DocumentValidationError",
    "TransportError",
    "format_error",
]
