"""Tests for CityResolver disambiguation."""

import pytest

from novaposhta.resolvers.city_resolver import CITY_NOT_FOUND, CityResolver
from tests.helpers.fake_transport import (
    KYIV_AREA_REF,
    LVIV_AREA_REF,
    ODESA_AREA_REF,
    city,
    envelope,
    warehouse,
)

# Three settlements named "Іванівка" in different areas
IVANIVKA_KYIV = city("iv-kyiv", "Іванівка", KYIV_AREA_REF)
IVANIVKA_ODESA_1 = city("iv-odesa-1", "Іванівка", ODESA_AREA_REF)
IVANIVKA_ODESA_2 = city("iv-odesa-2", "Іванівка", ODESA_AREA_REF)


@pytest.fixture
def resolver(service):
    return CityResolver(service)


def _warehouses_by_city(params):
    """getWarehouses responder keyed by CityRef."""
    by_city = {
        "iv-odesa-1": [warehouse("w-o1", "Пункт приймання-видачі: вул. Шкільна, 1", "iv-odesa-1")],
        "iv-odesa-2": [warehouse("w-o2", "Відділення №1: вул. Центральна, 5", "iv-odesa-2")],
    }
    return envelope(by_city.get(params["CityRef"], []))


class TestSingleMatch:
    """A unique name needs no disambiguation."""

    def test_single_city_returned(self, resolver, fake_transport):
        fake_transport.add("Address", "getCities", envelope([city("lviv", "Львів", LVIV_AREA_REF)]))

        result = resolver.get_city("Львів")

        assert result.success is True
        assert result.first_ref() == "lviv"

    def test_single_city_ignores_area(self, resolver, fake_transport):
        """Area name is not checked when only one city matches."""
        fake_transport.add("Address", "getCities", envelope([city("lviv", "Львів", LVIV_AREA_REF)]))

        assert resolver.get_city("Львів", "Одеська").first_ref() == "lviv"

    def test_searches_by_name(self, resolver, fake_transport):
        resolver.get_city("Львів")

        params = fake_transport.last_call("Address", "getCities").properties_payload()
        assert params == {"Page": 0, "FindByString": "Львів", "Ref": ""}


class TestAreaDisambiguation:
    """Several cities with one name are narrowed by area."""

    def test_area_selects_city(self, resolver, fake_transport):
        fake_transport.add(
            "Address", "getCities", envelope([IVANIVKA_KYIV, IVANIVKA_ODESA_1])
        )

        result = resolver.get_city("Іванівка", "Київська")

        assert [c["Ref"] for c in result.data] == ["iv-kyiv"]

    def test_narrowed_cities_share_area_ref(self, resolver, fake_transport):
        fake_transport.add(
            "Address",
            "getCities",
            envelope([IVANIVKA_KYIV, IVANIVKA_ODESA_1, IVANIVKA_ODESA_2]),
        )

        result = resolver.get_city("Іванівка", "Одеська область")

        assert result.success is True
        assert {c["Area"] for c in result.data} == {ODESA_AREA_REF}
        assert len(result.data) == 2

    def test_duplicates_without_area_not_found(self, resolver, fake_transport):
        fake_transport.add(
            "Address", "getCities", envelope([IVANIVKA_KYIV, IVANIVKA_ODESA_1])
        )

        result = resolver.get_city("Іванівка")

        assert result.success is False
        assert result.errors == [CITY_NOT_FOUND]

    def test_unknown_area_not_found(self, resolver, fake_transport):
        fake_transport.add(
            "Address", "getCities", envelope([IVANIVKA_KYIV, IVANIVKA_ODESA_1])
        )

        assert resolver.get_city("Іванівка", "Atlantis").errors == [CITY_NOT_FOUND]

    def test_area_without_matching_city(self, resolver, fake_transport):
        fake_transport.add(
            "Address", "getCities", envelope([IVANIVKA_KYIV, IVANIVKA_ODESA_1])
        )

        assert resolver.get_city("Іванівка", "Львівська").success is False


class TestWarehouseDisambiguation:
    """Cities still ambiguous after the area filter are narrowed by warehouse."""

    def test_exact_warehouse_description_selects_city(self, resolver, fake_transport):
        fake_transport.add(
            "Address", "getCities", envelope([IVANIVKA_ODESA_1, IVANIVKA_ODESA_2])
        )
        fake_transport.add("Address", "getWarehouses", _warehouses_by_city)

        result = resolver.get_city(
            "Іванівка", "Одеська", "Відділення №1: вул. Центральна, 5"
        )

        assert [c["Ref"] for c in result.data] == ["iv-odesa-2"]

    def test_stops_at_first_exact_match(self, resolver, fake_transport):
        fake_transport.add(
            "Address", "getCities", envelope([IVANIVKA_ODESA_1, IVANIVKA_ODESA_2])
        )
        fake_transport.add("Address", "getWarehouses", _warehouses_by_city)

        resolver.get_city("Іванівка", "Одеська", "Пункт приймання-видачі: вул. Шкільна, 1")

        assert fake_transport.methods().count("Address.getWarehouses") == 1

    def test_partial_description_keeps_all_candidates(self, resolver, fake_transport):
        """Only an exact description narrows; otherwise candidates are kept."""
        fake_transport.add(
            "Address", "getCities", envelope([IVANIVKA_ODESA_1, IVANIVKA_ODESA_2])
        )
        fake_transport.add("Address", "getWarehouses", _warehouses_by_city)

        result = resolver.get_city("Іванівка", "Одеська", "Центральна")

        assert result.success is True
        assert len(result.data) == 2

    def test_warehouses_not_consulted_for_single_candidate(self, resolver, fake_transport):
        fake_transport.add(
            "Address", "getCities", envelope([IVANIVKA_KYIV, IVANIVKA_ODESA_1])
        )

        resolver.get_city("Іванівка", "Київська", "Відділення №1")

        assert "Address.getWarehouses" not in fake_transport.methods()


class TestNoMatch:
    """Empty and failed lookups."""

    def test_no_cities(self, resolver, fake_transport):
        fake_transport.add("Address", "getCities", envelope([]))

        result = resolver.get_city("Неіснуюче")

        assert result.success is False
        assert result.errors == [CITY_NOT_FOUND]
        assert result.data == []

    def test_remote_failure(self, resolver, fake_transport):
        fake_transport.add("Address", "getCities", envelope(errors=["API key is invalid"]))

        result = resolver.get_city("Київ")

        assert result.errors == ["API key is invalid", CITY_NOT_FOUND]
