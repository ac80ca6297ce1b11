"""NovaPoshtaClient — single entry point for raw calls and resolvers.

Example:
    client = NovaPoshtaClient.from_config(load_config())
    city = client.get_city("Одеса", "Одеська")
    warehouse = client.get_warehouse(city.first_ref(), "Відділення №3")
"""

import logging
from typing import Any, Mapping

import httpx

from novaposhta.config import DEFAULT_API_URI, NovaPoshtaConfig
from novaposhta.models import ResponseFormat, ResultEnvelope
from novaposhta.resolvers.area_index import get_area
from novaposhta.resolvers.city_resolver import CityResolver
from novaposhta.resolvers.counterparty_resolver import CounterpartyResolver
from novaposhta.resolvers.warehouse_resolver import WarehouseResolver
from novaposhta.services.document_assembler import DocumentAssembler
from novaposhta.services.novaposhta_service import NovaPoshtaService
from novaposhta.services.transport import HttpTransport, Transport

logger = logging.getLogger(__name__)


class NovaPoshtaClient(NovaPoshtaService):
    """Raw API operations plus identifier resolution and waybill assembly.

    Inherits every raw method from NovaPoshtaService and adds get_area,
    get_city, get_warehouse and new_internet_document.
    """

    def __init__(self, transport: Transport) -> None:
        super().__init__(transport)
        self._warehouse_resolver = WarehouseResolver(self)
        self._city_resolver = CityResolver(self, self._warehouse_resolver)
        self._counterparty_resolver = CounterpartyResolver(self)
        self._assembler = DocumentAssembler(
            self,
            city_resolver=self._city_resolver,
            warehouse_resolver=self._warehouse_resolver,
            counterparty_resolver=self._counterparty_resolver,
        )

    @classmethod
    def create(
        cls,
        api_key: str,
        language: str = "ru",
        response_format: ResponseFormat | str = ResponseFormat.JSON,
        timeout: float = 0,
        api_uri: str = DEFAULT_API_URI,
        http_client: httpx.Client | None = None,
    ) -> "NovaPoshtaClient":
        """Build a client talking to the API over HTTP.

        Args:
            api_key: Nova Poshta API key.
            language: Response language code.
            response_format: 'json' or 'xml'.
            timeout: Seconds per remote call; 0 disables.
            api_uri: Base API URI.
            http_client: Optional pre-built httpx.Client.
        """
        transport = HttpTransport(
            api_key=api_key,
            api_uri=api_uri,
            language=language,
            response_format=ResponseFormat(response_format),
            timeout=timeout,
            client=http_client,
        )
        return cls(transport)

    @classmethod
    def from_config(cls, config: NovaPoshtaConfig) -> "NovaPoshtaClient":
        """Build a client from a loaded NovaPoshtaConfig."""
        if not config.api_key:
            logger.warning("Nova Poshta API key is empty; requests will be rejected")
        return cls.create(
            api_key=config.api_key,
            language=config.language,
            response_format=config.response_format,
            timeout=config.timeout,
            api_uri=config.api_uri,
        )

    def get_area(self, find_by_string: str = "", ref: str = "") -> ResultEnvelope:
        """Look up an area in the bundled index (no remote call)."""
        return get_area(find_by_string, ref)

    def get_city(
        self,
        city_name: str,
        area_name: str = "",
        warehouse_description: str = "",
    ) -> ResultEnvelope:
        """Resolve a city by name; see CityResolver.get_city."""
        return self._city_resolver.get_city(city_name, area_name, warehouse_description)

    def get_warehouse(self, city_ref: str, description: str = "") -> ResultEnvelope:
        """Resolve one warehouse of a city; see WarehouseResolver.get_warehouse."""
        return self._warehouse_resolver.get_warehouse(city_ref, description)

    def new_internet_document(
        self,
        sender: Mapping[str, Any],
        recipient: Mapping[str, Any],
        params: Mapping[str, Any],
    ) -> ResultEnvelope:
        """Create an express waybill; see DocumentAssembler.new_internet_document."""
        return self._assembler.new_internet_document(sender, recipient, params)
