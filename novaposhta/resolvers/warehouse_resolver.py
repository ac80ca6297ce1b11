"""Resolve one warehouse of a city from a free-form description."""

import logging
from typing import Any

from novaposhta.models import ResultEnvelope
from novaposhta.services.novaposhta_service import NovaPoshtaService

logger = logging.getLogger(__name__)

WAREHOUSE_NOT_FOUND = "Warehouse was not found"


def _matches(warehouse: dict[str, Any], needle: str) -> bool:
    for name in ("Description", "DescriptionRu"):
        value = warehouse.get(name)
        if isinstance(value, str) and needle in value.casefold():
            return True
    return False


class WarehouseResolver:
    """Pick a single warehouse among the ones the API lists for a city."""

    def __init__(self, service: NovaPoshtaService) -> None:
        self._service = service

    def get_warehouse(self, city_ref: str, description: str = "") -> ResultEnvelope:
        """Resolve a warehouse of ``city_ref``.

        The first listed warehouse is the default. When the city has more
        than one and ``description`` is given, the first warehouse whose
        Description or DescriptionRu contains it (case-insensitive) is
        chosen instead; no match keeps the default.

        Args:
            city_ref: City Ref.
            description: Fragment of the warehouse description, e.g. 'Branch 5'.

        Returns:
            Envelope with exactly one warehouse, or an unsuccessful envelope
            with "Warehouse was not found" when the city has none.
        """
        warehouses = self._service.get_warehouses(city_ref)
        records = [w for w in warehouses.data if isinstance(w, dict)]
        if not records:
            logger.info("No warehouses for city %s", city_ref)
            return ResultEnvelope.failure(*warehouses.errors, WAREHOUSE_NOT_FOUND)

        chosen = records[0]
        if len(records) > 1 and description:
            needle = description.casefold()
            chosen = next((w for w in records if _matches(w, needle)), chosen)
        return ResultEnvelope.ok([chosen], warnings=warehouses.warnings)
