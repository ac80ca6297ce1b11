"""Find an existing counterparty so a shipment does not create a duplicate."""

import logging
from dataclasses import dataclass

from novaposhta.models import CounterpartyProperty
from novaposhta.services.novaposhta_service import NovaPoshtaService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CounterpartyMatch:
    """An existing counterparty and its first contact person.

    Attributes:
        ref: Counterparty Ref.
        contact_ref: Ref of the first contact person, or '' if none.
        phone: Contact phone, falling back to the caller-supplied phone.
    """

    ref: str
    contact_ref: str
    phone: str


class CounterpartyResolver:
    """Look up counterparties by role, full name and city. No caching."""

    def __init__(self, service: NovaPoshtaService) -> None:
        self._service = service

    def find_counterparty(
        self,
        counterparty_property: CounterpartyProperty | str,
        full_name: str,
        city_ref: str,
        phone: str = "",
    ) -> CounterpartyMatch | None:
        """Return the first matching counterparty, or None if one must be created.

        Args:
            counterparty_property: Sender or Recipient.
            full_name: 'LastName FirstName MiddleName' search string.
            city_ref: City Ref the counterparty is registered in.
            phone: Fallback phone when the contact person has none.
        """
        found = self._service.get_counterparties(
            counterparty_property, 1, full_name, city_ref
        )
        ref = found.first_ref()
        if not ref:
            logger.debug("No %s counterparty named %r", counterparty_property, full_name)
            return None

        contact = self._service.get_counterparty_contact_persons(ref).first()
        return CounterpartyMatch(
            ref=ref,
            contact_ref=str(contact.get("Ref") or ""),
            phone=str(contact.get("Phones") or phone or ""),
        )
