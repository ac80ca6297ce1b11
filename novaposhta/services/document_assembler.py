"""Assemble and submit a new express waybill (InternetDocument).

Turns human-supplied sender/recipient data into the references the API
needs, then submits one InternetDocument.save call with the merged fields.

Resolution order is fixed because each step consumes the previous one's
Ref:

    sender city → sender warehouse → sender counterparty
    recipient city → recipient warehouse → recipient counterparty

Any reference the caller already supplies skips its lookup. Missing
mandatory fields raise DocumentValidationError before the first remote
call. A lookup that fails afterwards is only logged: the reference stays
empty and assembly continues, leaving the final save to report the
problem.

Example:
    assembler = DocumentAssembler(service)
    result = assembler.new_internet_document(
        sender={"LastName": "Іванов", "FirstName": "Петро", "Phone": "0501234567",
                "City": "Київ", "Region": "Київська", "Warehouse": "Відділення №1"},
        recipient={"LastName": "Петренко", "FirstName": "Олена", "Phone": "0671112233",
                   "City": "Львів", "Warehouse": "Відділення №5"},
        params={"Description": "Документи", "Weight": 0.5, "Cost": 300,
                "CargoType": "Documents"},
    )
"""

import logging
from datetime import date
from typing import Any, Mapping

from novaposhta.errors import DocumentValidationError
from novaposhta.models import CounterpartyProperty, ResultEnvelope
from novaposhta.resolvers.city_resolver import CityResolver
from novaposhta.resolvers.counterparty_resolver import CounterpartyResolver
from novaposhta.resolvers.warehouse_resolver import WarehouseResolver
from novaposhta.services.novaposhta_service import NovaPoshtaService

logger = logging.getLogger(__name__)

DOCUMENTS_CARGO = "Documents"
DEFAULT_VOLUME_GENERAL = "0.0004"

# Applied to shipment params when absent, in this order
PARAM_DEFAULTS: dict[str, str] = {
    "ServiceType": "WarehouseWarehouse",
    "PaymentMethod": "Cash",
    "PayerType": "Recipient",
    "SeatsAmount": "1",
    "CargoType": "Cargo",
}

RECIPIENT_REQUIRED = ("FirstName", "LastName", "Phone")
PARAMS_REQUIRED = ("Description", "Weight", "Cost")


def _is_blank(value: Any) -> bool:
    """True for None, blank or "0" strings, numeric zero and empty containers."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in ("", "0")
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (Mapping, list, tuple)):
        return not value
    return False


def _set_default(record: dict[str, Any], key: str, value: Any) -> None:
    if _is_blank(record.get(key)):
        record[key] = value


def check_recipient(recipient: Mapping[str, Any]) -> dict[str, Any]:
    """Validate recipient fields and apply recipient defaults.

    Args:
        recipient: Caller-supplied recipient fields (not mutated).

    Returns:
        New dict with ``CounterpartyType`` defaulted to PrivatePerson.

    Raises:
        DocumentValidationError: FirstName, LastName or Phone is missing,
            or neither City nor a pre-resolved CityRef/CityRecipient is given.
    """
    checked = dict(recipient)
    for name in RECIPIENT_REQUIRED:
        if _is_blank(checked.get(name)):
            raise DocumentValidationError.missing(name, "recipient")
    has_city_ref = not (
        _is_blank(checked.get("CityRef")) and _is_blank(checked.get("CityRecipient"))
    )
    if _is_blank(checked.get("City")) and not has_city_ref:
        raise DocumentValidationError.missing("City", "recipient")

    _set_default(checked, "CounterpartyType", "PrivatePerson")
    return checked


def check_params(params: Mapping[str, Any], today: date | None = None) -> dict[str, Any]:
    """Validate shipment params and fill in defaults for absent fields.

    Args:
        params: Caller-supplied shipment params (not mutated).
        today: Date used for the DateTime default; defaults to today.

    Returns:
        New dict with defaults applied. Explicit values are never replaced.

    Raises:
        DocumentValidationError: Description, Weight or Cost is missing.
    """
    checked = dict(params)
    for name in PARAMS_REQUIRED:
        if _is_blank(checked.get(name)):
            raise DocumentValidationError.missing(name, "new Internet document")

    _set_default(checked, "DateTime", (today or date.today()).strftime("%d.%m.%Y"))
    for key, value in PARAM_DEFAULTS.items():
        _set_default(checked, key, value)
    if checked["CargoType"] != DOCUMENTS_CARGO:
        _set_default(checked, "VolumeGeneral", DEFAULT_VOLUME_GENERAL)
        _set_default(checked, "VolumeWeight", checked["Weight"])
    return checked


def full_name(person: Mapping[str, Any]) -> str:
    """Build 'LastName FirstName MiddleName', skipping absent parts."""
    parts = (person.get("LastName"), person.get("FirstName"), person.get("MiddleName"))
    return " ".join(str(p).strip() for p in parts if not _is_blank(p)).strip()


def _contact_person_ref(counterparty: Mapping[str, Any]) -> str:
    """Dig the first contact person Ref out of a Counterparty.save response."""
    contact = counterparty.get("ContactPerson")
    if isinstance(contact, Mapping):
        data = contact.get("data", contact)
        if isinstance(data, Mapping) and "item" in data:
            # XML responses wrap list entries in <item>
            data = data["item"]
        if isinstance(data, list):
            data = data[0] if data else {}
        if isinstance(data, Mapping):
            return str(data.get("Ref") or "")
    return ""


class DocumentAssembler:
    """Resolve references for both parties and create the waybill."""

    def __init__(
        self,
        service: NovaPoshtaService,
        city_resolver: CityResolver | None = None,
        warehouse_resolver: WarehouseResolver | None = None,
        counterparty_resolver: CounterpartyResolver | None = None,
    ) -> None:
        """Initialize with the raw API service and optional resolvers.

        Args:
            service: Raw API service used for saves and lookups.
            city_resolver: Defaults to a CityResolver over ``service``.
            warehouse_resolver: Defaults to a WarehouseResolver over ``service``.
            counterparty_resolver: Defaults to a CounterpartyResolver over ``service``.
        """
        self._service = service
        self._warehouses = warehouse_resolver or WarehouseResolver(service)
        self._cities = city_resolver or CityResolver(service, self._warehouses)
        self._counterparties = counterparty_resolver or CounterpartyResolver(service)

    # ── Resolution steps ──────────────────────────────────────────────

    def _resolve_city_ref(self, party: Mapping[str, Any], role: str) -> str:
        city = self._cities.get_city(
            str(party.get("City") or ""),
            str(party.get("Region") or ""),
            str(party.get("Warehouse") or ""),
        )
        if not city.success:
            logger.warning("%s city %r not resolved: %s", role, party.get("City"), city.errors)
        return city.first_ref()

    def _resolve_warehouse_ref(self, city_ref: str, description: str, role: str) -> str:
        warehouse = self._warehouses.get_warehouse(city_ref, description)
        if not warehouse.success:
            logger.warning(
                "%s warehouse %r not resolved in city %s: %s",
                role,
                description,
                city_ref,
                warehouse.errors,
            )
        return warehouse.first_ref()

    def _prepare_sender(self, sender: dict[str, Any]) -> dict[str, Any]:
        city_ref = sender.get("CitySender") or sender.get("CityRef")
        if _is_blank(city_ref):
            city_ref = self._resolve_city_ref(sender, "Sender")
        sender["CitySender"] = city_ref
        sender["CityRef"] = city_ref

        if _is_blank(sender.get("SenderAddress")) and city_ref and sender.get("Warehouse"):
            sender["SenderAddress"] = self._resolve_warehouse_ref(
                city_ref, str(sender["Warehouse"]), "Sender"
            )

        if _is_blank(sender.get("Sender")):
            sender["CounterpartyProperty"] = CounterpartyProperty.SENDER.value
            name = full_name(sender)
            _set_default(sender, "Description", name)
            match = self._counterparties.find_counterparty(
                CounterpartyProperty.SENDER,
                name,
                city_ref,
                phone=str(sender.get("Phone") or ""),
            )
            if match is not None:
                sender["Sender"] = match.ref
                sender["ContactSender"] = match.contact_ref
                sender["SendersPhone"] = match.phone
            else:
                logger.warning("No existing sender counterparty named %r", name)
        return sender

    def _prepare_recipient(self, recipient: dict[str, Any]) -> dict[str, Any]:
        recipient["CounterpartyProperty"] = CounterpartyProperty.RECIPIENT.value
        recipient["RecipientsPhone"] = recipient["Phone"]

        city_ref = recipient.get("CityRecipient") or recipient.get("CityRef")
        if _is_blank(city_ref):
            city_ref = self._resolve_city_ref(recipient, "Recipient")
        recipient["CityRecipient"] = city_ref
        recipient["CityRef"] = city_ref

        if _is_blank(recipient.get("RecipientAddress")):
            if city_ref:
                recipient["RecipientAddress"] = self._resolve_warehouse_ref(
                    city_ref, str(recipient.get("Warehouse") or ""), "Recipient"
                )
            else:
                logger.warning("Recipient warehouse skipped: no city reference")
                recipient["RecipientAddress"] = ""

        if _is_blank(recipient.get("Recipient")):
            created = self._service.save("Counterparty", recipient)
            if not created.success:
                logger.warning("Recipient counterparty not created: %s", created.errors)
            recipient["Recipient"] = created.first_ref()
            recipient["ContactRecipient"] = _contact_person_ref(created.first())
        return recipient

    # ── Public API ────────────────────────────────────────────────────

    def prepare_internet_document(
        self,
        sender: Mapping[str, Any],
        recipient: Mapping[str, Any],
        params: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Validate, resolve references, and merge the waybill fields.

        Args:
            sender: Sender fields (LastName, FirstName, MiddleName, Phone,
                City, Region, Warehouse) and/or pre-resolved refs
                (CitySender, SenderAddress, Sender, ContactSender).
            recipient: Recipient fields, same shape with Recipient* refs.
            params: Shipment params (Description, Weight, Cost, ...).

        Returns:
            Merged request fields; on key collisions recipient wins over
            sender and params win over both.

        Raises:
            DocumentValidationError: Before any remote call, when a
                mandatory recipient or shipment field is missing.
        """
        checked_recipient = check_recipient(recipient)
        checked_params = check_params(params)

        prepared_sender = self._prepare_sender(dict(sender))
        prepared_recipient = self._prepare_recipient(checked_recipient)
        return {**prepared_sender, **prepared_recipient, **checked_params}

    def new_internet_document(
        self,
        sender: Mapping[str, Any],
        recipient: Mapping[str, Any],
        params: Mapping[str, Any],
    ) -> ResultEnvelope:
        """Create a new express waybill.

        Args:
            sender: See prepare_internet_document.
            recipient: See prepare_internet_document.
            params: See prepare_internet_document.

        Returns:
            Envelope of the InternetDocument.save call.

        Raises:
            DocumentValidationError: When a mandatory field is missing.
        """
        document = self.prepare_internet_document(sender, recipient, params)
        result = self._service.save("InternetDocument", document)
        if result.success:
            logger.info(
                "Created internet document %s",
                result.first().get("IntDocNumber", result.first_ref()),
            )
        else:
            logger.warning("Internet document not created: %s", result.errors)
        return result
