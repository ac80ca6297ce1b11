"""Resolve a city name, narrowed by area and warehouse, to one city record.

City names repeat across Ukraine, so a name search often returns several
settlements. Disambiguation runs in two stages:

1. Area: the area name is looked up in the bundled area index and only
   cities whose ``Area`` equals that Ref are kept.
2. Warehouse: if several cities still remain, the first one whose resolved
   warehouse description equals the given description exactly wins.

Several cities surviving both stages are returned as they are.
"""

import logging
from typing import Any

from novaposhta.models import ResultEnvelope
from novaposhta.resolvers.area_index import find_area, get_area_index
from novaposhta.resolvers.warehouse_resolver import WarehouseResolver
from novaposhta.services.novaposhta_service import NovaPoshtaService

logger = logging.getLogger(__name__)

CITY_NOT_FOUND = "City was not found"


class CityResolver:
    """Turn a human city name into the provider's city record."""

    def __init__(
        self,
        service: NovaPoshtaService,
        warehouse_resolver: WarehouseResolver | None = None,
    ) -> None:
        self._service = service
        self._warehouses = warehouse_resolver or WarehouseResolver(service)

    def _filter_by_area(
        self, cities: list[dict[str, Any]], area_name: str
    ) -> list[dict[str, Any]]:
        if not area_name:
            return []
        area = find_area(get_area_index(), area_name)
        if not area:
            logger.info("Area %r not found in area index", area_name)
            return []
        area_ref = area[0]["Ref"]
        return [city for city in cities if city.get("Area") == area_ref]

    def _filter_by_warehouse(
        self, cities: list[dict[str, Any]], warehouse_description: str
    ) -> list[dict[str, Any]]:
        for city in cities:
            warehouse = self._warehouses.get_warehouse(
                city.get("Ref", ""), warehouse_description
            ).first()
            if warehouse_description in (
                warehouse.get("Description"),
                warehouse.get("DescriptionRu"),
            ):
                return [city]
        return cities

    def get_city(
        self,
        city_name: str,
        area_name: str = "",
        warehouse_description: str = "",
    ) -> ResultEnvelope:
        """Resolve ``city_name`` to a city record.

        Args:
            city_name: City name or fragment, in either language.
            area_name: Area (region) name used when the name is ambiguous.
            warehouse_description: Exact warehouse description used as a
                last resort when several cities remain in the area.

        Returns:
            Envelope with the candidate cities (normally one), or an
            unsuccessful envelope with "City was not found".
        """
        cities = self._service.get_cities(0, city_name)
        records = [c for c in cities.data if isinstance(c, dict)]

        if len(records) > 1:
            candidates = self._filter_by_area(records, area_name)
        else:
            candidates = records

        if len(candidates) > 1 and warehouse_description:
            candidates = self._filter_by_warehouse(candidates, warehouse_description)

        if not candidates:
            logger.info(
                "City %r not resolved (area=%r, %d remote matches)",
                city_name,
                area_name,
                len(records),
            )
            return ResultEnvelope.failure(*cities.errors, CITY_NOT_FOUND)
        if len(candidates) > 1:
            logger.debug("City %r still ambiguous: %d candidates", city_name, len(candidates))
        return ResultEnvelope.ok(candidates)
