"""Nova Poshta service layer — one method per remote API call.

Each method builds an immutable ApiRequest, hands it to the transport, and
normalizes the answer into a ResultEnvelope. Transport failures are logged
and returned as unsuccessful envelopes, so composite operations built on
top of this layer never see an exception from the network.

Example:
    svc = NovaPoshtaService(HttpTransport(api_key="..."))
    cities = svc.get_cities(find_by_string="Київ")
    if cities.success:
        city_ref = cities.first_ref()
"""

import logging
from typing import Any, Iterable, Mapping

from novaposhta.errors import NovaPoshtaError, TransportError, format_error
from novaposhta.models import (
    ApiRequest,
    CommonMethod,
    CounterpartyProperty,
    ResultEnvelope,
)
from novaposhta.services.response_normalizer import normalize
from novaposhta.services.transport import Transport

logger = logging.getLogger(__name__)


class NovaPoshtaService:
    """Raw Nova Poshta API operations returning ResultEnvelope.

    All methods are synchronous and perform exactly one remote call.
    Only the first page is ever requested; there is no caching.
    """

    def __init__(self, transport: Transport) -> None:
        """Initialize with a transport.

        Args:
            transport: Object with ``send(ApiRequest) -> bytes`` and a
                ``response_format`` attribute.
        """
        self._transport = transport

    # ── Dispatch ──────────────────────────────────────────────────────

    def execute(self, request: ApiRequest) -> ResultEnvelope:
        """Send a prepared request and normalize the response.

        Args:
            request: The call to perform.

        Returns:
            Normalized envelope. Transport failures become an unsuccessful
            envelope whose error carries the E-3xxx message.
        """
        try:
            raw = self._transport.send(request)
        except TransportError as e:
            logger.warning(
                "%s.%s failed\n%s",
                request.model_name,
                request.called_method,
                format_error(e),
            )
            return ResultEnvelope.failure(str(e))
        return normalize(raw, self._transport.response_format)

    def _request(
        self,
        model_name: str,
        called_method: str,
        params: Mapping[str, Any] | None = None,
    ) -> ResultEnvelope:
        return self.execute(
            ApiRequest.for_model(model_name).with_method(called_method).with_params(params)
        )

    # ── Generic model operations ──────────────────────────────────────

    def save(self, model_name: str, params: Mapping[str, Any]) -> ResultEnvelope:
        """Create a record of ``model_name`` (e.g. 'Counterparty')."""
        return self._request(model_name, "save", params)

    def update(self, model_name: str, params: Mapping[str, Any]) -> ResultEnvelope:
        """Update a record of ``model_name``; ``params`` must include its Ref."""
        return self._request(model_name, "update", params)

    def delete(self, model_name: str, params: Mapping[str, Any]) -> ResultEnvelope:
        """Delete a record of ``model_name``; ``params`` must include its Ref."""
        return self._request(model_name, "delete", params)

    def common(self, method: CommonMethod | str) -> ResultEnvelope:
        """Call a zero-argument reference-data method of the Common model.

        Args:
            method: A CommonMethod member or its string value
                (e.g. 'getCargoTypes').

        Returns:
            Normalized envelope with the reference list.

        Raises:
            NovaPoshtaError: E-1002 when ``method`` is not in CommonMethod.
        """
        try:
            method = CommonMethod(method)
        except ValueError:
            raise NovaPoshtaError.from_code("E-1002", method=method)
        return self._request("Common", method.value)

    # ── Tracking ──────────────────────────────────────────────────────

    def documents_tracking(self, track: str) -> ResultEnvelope:
        """Get the delivery status of one express waybill."""
        return self._request(
            "TrackingDocument",
            "getStatusDocuments",
            {"Documents": [{"DocumentNumber": track}]},
        )

    # ── Address model ─────────────────────────────────────────────────

    def get_cities(
        self, page: int = 0, find_by_string: str = "", ref: str = ""
    ) -> ResultEnvelope:
        """Search cities by substring of the name or by Ref."""
        return self._request(
            "Address",
            "getCities",
            {"Page": page, "FindByString": find_by_string, "Ref": ref},
        )

    def get_warehouses(self, city_ref: str, page: int = 0) -> ResultEnvelope:
        """List warehouses of a city."""
        return self._request(
            "Address", "getWarehouses", {"CityRef": city_ref, "Page": page}
        )

    def get_warehouse_types(self) -> ResultEnvelope:
        return self._request("Address", "getWarehouseTypes")

    def find_nearest_warehouse(self, search_strings: str | Iterable[str]) -> ResultEnvelope:
        """Find warehouses nearest to free-form address strings."""
        if isinstance(search_strings, str):
            search_strings = [search_strings]
        return self._request(
            "Address",
            "findNearestWarehouse",
            {"SearchStringArray": list(search_strings)},
        )

    def get_street(
        self, city_ref: str, find_by_string: str = "", page: int = 0
    ) -> ResultEnvelope:
        return self._request(
            "Address",
            "getStreet",
            {"FindByString": find_by_string, "CityRef": city_ref, "Page": page},
        )

    def get_areas(self, ref: str = "", page: int = 0) -> ResultEnvelope:
        """List areas known to the remote API (not the bundled index)."""
        return self._request("Address", "getAreas", {"Ref": ref, "Page": page})

    # ── Counterparty model ────────────────────────────────────────────

    def get_counterparties(
        self,
        counterparty_property: CounterpartyProperty | str = CounterpartyProperty.RECIPIENT,
        page: int | None = None,
        find_by_string: str | None = None,
        city_ref: str | None = None,
    ) -> ResultEnvelope:
        """List counterparties of one role; any filter can be skipped.

        Args:
            counterparty_property: 'Sender' or 'Recipient' (empty → Recipient).
            page: Page number; omitted when falsy.
            find_by_string: Name fragment; omitted when falsy.
            city_ref: City Ref filter; omitted when falsy.
        """
        prop = counterparty_property or CounterpartyProperty.RECIPIENT
        params: dict[str, Any] = {"CounterpartyProperty": CounterpartyProperty(prop).value}
        if page:
            params["Page"] = page
        if find_by_string:
            params["FindByString"] = find_by_string
        if city_ref:
            params["City"] = city_ref
        return self._request("Counterparty", "getCounterparties", params)

    def clone_loyalty_counterparty_sender(self, city_ref: str) -> ResultEnvelope:
        return self._request(
            "Counterparty", "cloneLoyaltyCounterpartySender", {"CityRef": city_ref}
        )

    def get_counterparty_contact_persons(self, ref: str) -> ResultEnvelope:
        return self._request("Counterparty", "getCounterpartyContactPersons", {"Ref": ref})

    def get_counterparty_addresses(self, ref: str, page: int = 0) -> ResultEnvelope:
        return self._request(
            "Counterparty", "getCounterpartyAddresses", {"Ref": ref, "Page": page}
        )

    def get_counterparty_options(self, ref: str) -> ResultEnvelope:
        return self._request("Counterparty", "getCounterpartyOptions", {"Ref": ref})

    def get_counterparty_by_edrpou(self, edrpou: str, city_ref: str) -> ResultEnvelope:
        """Find a legal-entity counterparty by its EDRPOU registry code."""
        return self._request(
            "Counterparty",
            "getCounterpartyByEDRPOU",
            {"EDRPOU": edrpou, "cityRef": city_ref},
        )

    # ── InternetDocument model ────────────────────────────────────────

    def get_document_price(
        self,
        city_sender: str,
        city_recipient: str,
        service_type: str,
        weight: float,
        cost: float,
    ) -> ResultEnvelope:
        """Estimate delivery cost between two cities."""
        return self._request(
            "InternetDocument",
            "getDocumentPrice",
            {
                "CitySender": city_sender,
                "CityRecipient": city_recipient,
                "ServiceType": service_type,
                "Weight": weight,
                "Cost": cost,
            },
        )

    def get_document_delivery_date(
        self,
        city_sender: str,
        city_recipient: str,
        service_type: str,
        date_time: str,
    ) -> ResultEnvelope:
        """Estimate the delivery date for a shipment sent on ``date_time``."""
        return self._request(
            "InternetDocument",
            "getDocumentDeliveryDate",
            {
                "CitySender": city_sender,
                "CityRecipient": city_recipient,
                "ServiceType": service_type,
                "DateTime": date_time,
            },
        )

    def get_document_list(self, params: Mapping[str, Any] | None = None) -> ResultEnvelope:
        return self._request("InternetDocument", "getDocumentList", params or None)

    def get_document(self, ref: str) -> ResultEnvelope:
        return self._request("InternetDocument", "getDocument", {"Ref": ref})

    def generate_report(self, params: Mapping[str, Any]) -> ResultEnvelope:
        return self._request("InternetDocument", "generateReport", params)
