"""Exception types and formatting for client errors.

Only local failures are raised: missing shipment fields and transport
breakdowns. Provider-side business errors travel inside ResultEnvelope.
"""

from dataclasses import dataclass, field

from novaposhta.errors.registry import get_error


@dataclass
class NovaPoshtaError(Exception):
    """Client error with code, message, and context.

    Attributes:
        code: Error code in E-XXXX format.
        message: Human-readable error message.
        remediation: Action the caller should take to resolve.
        is_retryable: Whether the operation can be retried unchanged.
        details: Additional context dictionary.
    """

    code: str
    message: str
    remediation: str = ""
    is_retryable: bool = False
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code}: {self.message}"

    @classmethod
    def from_code(cls, code: str, **kwargs: object) -> "NovaPoshtaError":
        """Create error from registry code with context substitution.

        Args:
            code: Error code in E-XXXX format.
            **kwargs: Context values for message template substitution.
                The special key 'details' is stored on the error instead.

        Returns:
            Instance of the calling class with formatted message.
        """
        details = kwargs.pop("details", {})
        if not isinstance(details, dict):
            details = {}

        error_def = get_error(code)
        if not error_def:
            return cls(
                code=code,
                message=f"Unknown error: {code}",
                remediation="Contact support.",
                details=details,
            )

        message = error_def.message_template
        try:
            message = message.format(**kwargs)
        except KeyError:
            # Keep template if some placeholders are missing
            pass

        return cls(
            code=error_def.code,
            message=message,
            remediation=error_def.remediation,
            is_retryable=error_def.is_retryable,
            details={**kwargs, **details},
        )


class DocumentValidationError(NovaPoshtaError):
    """A mandatory shipment field is missing; raised before any remote call."""

    @classmethod
    def missing(cls, field_name: str, entity: str) -> "DocumentValidationError":
        """Build the E-1001 error for a missing field.

        Args:
            field_name: Name of the missing field (e.g. 'Phone').
            entity: What the field belongs to ('recipient', 'new Internet document').
        """
        return cls.from_code("E-1001", field=field_name, entity=entity)


class TransportError(NovaPoshtaError):
    """The request never produced a usable HTTP response."""


def format_error(error: NovaPoshtaError, include_remediation: bool = True) -> str:
    """Format error for display to user.

    Args:
        error: The NovaPoshtaError to format.
        include_remediation: Whether to include remediation steps.

    Returns:
        Multi-line formatted string suitable for user display.
    """
    lines = [f"{error.code}: {error.message}"]
    if include_remediation and error.remediation:
        lines.append(f"  Action: {error.remediation}")
    return "\n".join(lines)
