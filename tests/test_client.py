"""Tests for NovaPoshtaClient wiring and construction."""

import json
import logging

import httpx
import pytest

from novaposhta import NovaPoshtaClient, NovaPoshtaConfig
from novaposhta.errors import DocumentValidationError
from novaposhta.models import ResponseFormat
from novaposhta.services.transport import HttpTransport
from tests.helpers.fake_transport import (
    KYIV_AREA_REF,
    FakeTransport,
    city,
    envelope,
    warehouse,
)


@pytest.fixture
def client(fake_transport: FakeTransport) -> NovaPoshtaClient:
    return NovaPoshtaClient(fake_transport)


class TestResolutionOperations:
    """Client exposes the resolvers alongside raw calls."""

    def test_get_area_is_local(self, client, fake_transport):
        result = client.get_area("Київська")

        assert result.first_ref() == KYIV_AREA_REF
        assert fake_transport.calls == []

    def test_get_city(self, client, fake_transport):
        fake_transport.add("Address", "getCities", envelope([city("kyiv", "Київ", KYIV_AREA_REF)]))

        assert client.get_city("Київ", "Київська").first_ref() == "kyiv"

    def test_get_warehouse(self, client, fake_transport):
        fake_transport.add(
            "Address",
            "getWarehouses",
            envelope([
                warehouse("w-1", "Відділення №1", "kyiv"),
                warehouse("w-3", "Відділення №3", "kyiv"),
            ]),
        )

        assert client.get_warehouse("kyiv", "№3").first_ref() == "w-3"

    def test_raw_calls_inherited(self, client, fake_transport):
        client.documents_tracking("20450000000001")

        assert fake_transport.methods() == ["TrackingDocument.getStatusDocuments"]

    def test_new_internet_document_validates(self, client, fake_transport):
        with pytest.raises(DocumentValidationError):
            client.new_internet_document({}, {"FirstName": "Олена"}, {})

        assert fake_transport.calls == []


class TestConstruction:
    """Tests for create() and from_config()."""

    def test_create_over_http(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "data": [{"Ref": "a"}]})

        client = NovaPoshtaClient.create(
            api_key="k",
            language="ua",
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        result = client.get_warehouse_types()

        assert result.first_ref() == "a"
        assert seen["url"] == "https://api.novaposhta.ua/v2.0/json/"
        assert seen["body"]["apiKey"] == "k"
        assert seen["body"]["language"] == "ua"
        assert seen["body"]["calledMethod"] == "getWarehouseTypes"

    def test_from_config(self):
        config = NovaPoshtaConfig(
            api_key="k",
            api_uri="https://api.example.test/v2.0/",
            response_format="xml",
            timeout=4,
        )

        client = NovaPoshtaClient.from_config(config)

        assert isinstance(client._transport, HttpTransport)
        assert client._transport.response_format == ResponseFormat.XML
        assert client._transport.endpoint == "https://api.example.test/v2.0/xml/"

    def test_from_config_warns_on_empty_key(self, caplog):
        with caplog.at_level(logging.WARNING, logger="novaposhta.client"):
            NovaPoshtaClient.from_config(NovaPoshtaConfig())

        assert "API key is empty" in caplog.text
