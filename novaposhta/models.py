"""Models shared by the transport, the raw API service, and the resolvers."""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, Field, model_validator


class ResponseFormat(str, Enum):
    """Wire format used for requests and responses."""

    JSON = "json"
    XML = "xml"


class CounterpartyProperty(str, Enum):
    """Role of a counterparty in a shipment."""

    SENDER = "Sender"
    RECIPIENT = "Recipient"


class CommonMethod(str, Enum):
    """Zero-argument reference-data methods of the ``Common`` model."""

    TYPES_OF_COUNTERPARTIES = "getTypesOfCounterparties"
    BACKWARD_DELIVERY_CARGO_TYPES = "getBackwardDeliveryCargoTypes"
    CARGO_DESCRIPTION_LIST = "getCargoDescriptionList"
    CARGO_TYPES = "getCargoTypes"
    DOCUMENT_STATUSES = "getDocumentStatuses"
    OWNERSHIP_FORMS_LIST = "getOwnershipFormsList"
    PALLETS_LIST = "getPalletsList"
    PAYMENT_FORMS = "getPaymentForms"
    TIME_INTERVALS = "getTimeIntervals"
    SERVICE_TYPES = "getServiceTypes"
    TIRES_WHEELS_LIST = "getTiresWheelsList"
    TRAYS_LIST = "getTraysList"
    TYPES_OF_ALTERNATIVE_PAYERS = "getTypesOfAlternativePayers"
    TYPES_OF_PAYERS = "getTypesOfPayers"
    TYPES_OF_PAYERS_FOR_REDELIVERY = "getTypesOfPayersForRedelivery"


class ResultEnvelope(BaseModel):
    """Uniform result shape returned by every operation.

    ``success`` is False exactly when ``errors`` is non-empty; the validator
    rejects any other combination.
    """

    success: bool = True
    data: list[Any] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    info: list[Any] = Field(default_factory=list)

    @model_validator(mode="after")
    def success_matches_errors(self) -> "ResultEnvelope":
        """Ensure success and errors agree."""
        if self.success == bool(self.errors):
            raise ValueError("success must be False iff errors is non-empty")
        return self

    @classmethod
    def ok(cls, data: list[Any] | None = None, **kwargs: Any) -> "ResultEnvelope":
        """Build a successful envelope around ``data``."""
        return cls(success=True, data=list(data or []), **kwargs)

    @classmethod
    def failure(cls, *errors: str, data: list[Any] | None = None) -> "ResultEnvelope":
        """Build an unsuccessful envelope carrying ``errors``."""
        return cls(success=False, data=list(data or []), errors=list(errors))

    def first(self) -> dict[str, Any]:
        """Return the first record, or an empty dict when there is none."""
        if self.data and isinstance(self.data[0], dict):
            return self.data[0]
        return {}

    def first_ref(self) -> str:
        """Return the ``Ref`` of the first record, or an empty string."""
        return str(self.first().get("Ref") or "")


def _freeze(value: Any) -> Any:
    """Recursively turn dicts into read-only mappings and lists into tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class ApiRequest:
    """Immutable description of one remote call.

    Parameters are frozen at every depth: nested dicts become read-only
    mappings and lists become tuples, so neither the request nor the
    caller's original params can change what is sent.

    Attributes:
        model_name: Provider entity type, e.g. 'Address' or 'InternetDocument'.
        called_method: Operation name, e.g. 'getCities' or 'save'.
        method_properties: Read-only view of the call parameters, or None.
    """

    model_name: str = "Common"
    called_method: str = ""
    method_properties: Mapping[str, Any] | None = field(default=None)

    def __post_init__(self) -> None:
        if self.method_properties is not None:
            object.__setattr__(self, "method_properties", _freeze(self.method_properties))

    @classmethod
    def for_model(cls, model_name: str) -> "ApiRequest":
        """Start a request against ``model_name`` with no method or params."""
        return cls(model_name=model_name)

    def with_method(self, called_method: str) -> "ApiRequest":
        """Return a copy targeting ``called_method`` with params cleared."""
        return replace(self, called_method=called_method, method_properties=None)

    def with_params(self, params: Mapping[str, Any] | None) -> "ApiRequest":
        """Return a copy carrying ``params``."""
        return replace(self, method_properties=params)

    def properties_payload(self) -> dict[str, Any] | None:
        """Return a mutable deep copy of the parameters for serialization."""
        if self.method_properties is None:
            return None
        return _thaw(self.method_properties)
