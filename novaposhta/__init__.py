"""Nova Poshta API client with city, warehouse and counterparty resolution."""

from novaposhta.client import NovaPoshtaClient
from novaposhta.config import NovaPoshtaConfig, load_config
from novaposhta.errors import DocumentValidationError, NovaPoshtaError, TransportError
from novaposhta.models import (
    ApiRequest,
    CommonMethod,
    CounterpartyProperty,
    ResponseFormat,
    ResultEnvelope,
)

__all__ = [
    "NovaPoshtaClient",
    "NovaPoshtaConfig",
    "load_config",
    "NovaPoshtaError",
    "DocumentValidationError",
    "TransportError",
    "ApiRequest",
    "CommonMethod",
    "CounterpartyProperty",
    "ResponseFormat",
    "ResultEnvelope",
]
