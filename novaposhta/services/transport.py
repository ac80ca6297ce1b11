"""HTTP transport for the Nova Poshta JSON/XML endpoints.

Thin wrapper around a synchronous httpx client. Serializes an ApiRequest
into the provider's request body, posts it, and returns the raw response
bytes. Anything that prevents a usable HTTP response is raised as
TransportError so callers can tell it apart from an empty business result.

Example:
    transport = HttpTransport(api_key="...", response_format=ResponseFormat.JSON)
    raw = transport.send(ApiRequest("Address", "getCities", {"FindByString": "Київ"}))
"""

import json
import logging
from typing import Any, Protocol

import httpx
import xmltodict

from novaposhta.config import DEFAULT_API_URI
from novaposhta.errors import TransportError
from novaposhta.models import ApiRequest, ResponseFormat
from novaposhta.utils.redaction import redact_for_logging

logger = logging.getLogger(__name__)

_CONTENT_TYPES = {
    ResponseFormat.JSON: "application/json",
    ResponseFormat.XML: "text/xml",
}


class Transport(Protocol):
    """Anything able to deliver an ApiRequest and return the raw body."""

    response_format: ResponseFormat

    def send(self, request: ApiRequest) -> bytes:
        ...


def build_request_body(
    request: ApiRequest,
    api_key: str,
    language: str,
) -> dict[str, Any]:
    """Assemble the provider's request envelope.

    Args:
        request: The call to serialize.
        api_key: Static API credential.
        language: Response language code.

    Returns:
        Dict with apiKey, modelName, calledMethod, language, methodProperties.
    """
    return {
        "apiKey": api_key,
        "modelName": request.model_name,
        "calledMethod": request.called_method,
        "language": language,
        "methodProperties": request.properties_payload(),
    }


def serialize_body(body: dict[str, Any], response_format: ResponseFormat) -> str:
    """Serialize a request envelope as JSON or XML.

    Args:
        body: Envelope produced by build_request_body.
        response_format: Target wire format.

    Returns:
        Serialized request body.
    """
    if response_format == ResponseFormat.XML:
        # xmltodict renders None as an empty element
        return xmltodict.unparse({"root": body}, full_document=True)
    return json.dumps(body, ensure_ascii=False)


class HttpTransport:
    """Posts serialized requests to the Nova Poshta API over HTTPS.

    Owns its httpx.Client unless one is injected. A single timeout value is
    applied to connect and read; zero disables it.
    """

    def __init__(
        self,
        api_key: str,
        api_uri: str = DEFAULT_API_URI,
        language: str = "ru",
        response_format: ResponseFormat = ResponseFormat.JSON,
        timeout: float = 0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize transport settings.

        Args:
            api_key: Nova Poshta API key.
            api_uri: Base API URI without the format suffix.
            language: Response language code.
            response_format: JSON or XML wire format.
            timeout: Seconds per call; 0 disables the timeout.
            client: Pre-built httpx.Client (tests inject a MockTransport here).
        """
        self._api_key = api_key
        self._api_uri = api_uri.rstrip("/")
        self._language = language
        self.response_format = ResponseFormat(response_format)
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout if timeout > 0 else None),
        )

    @property
    def endpoint(self) -> str:
        """Return the URL for the configured wire format."""
        return f"{self._api_uri}/{self.response_format.value}/"

    def send(self, request: ApiRequest) -> bytes:
        """Post one request and return the raw response body.

        Args:
            request: Call to deliver.

        Returns:
            Response body bytes, possibly empty.

        Raises:
            TransportError: On connection failure, timeout, or non-2xx status.
        """
        envelope = build_request_body(request, self._api_key, self._language)
        body = serialize_body(envelope, self.response_format)
        logger.debug(
            "POST %s %s.%s body=%s",
            self.endpoint,
            request.model_name,
            request.called_method,
            redact_for_logging(envelope),
        )

        try:
            response = self._client.post(
                self.endpoint,
                content=body.encode("utf-8"),
                headers={"Content-Type": _CONTENT_TYPES[self.response_format]},
            )
        except httpx.TimeoutException as e:
            logger.warning(
                "Timeout calling %s.%s", request.model_name, request.called_method
            )
            raise TransportError.from_code(
                "E-3001",
                model=request.model_name,
                method=request.called_method,
                reason=f"timed out: {e}",
            ) from e
        except httpx.HTTPError as e:
            logger.warning(
                "Transport failure calling %s.%s: %s",
                request.model_name,
                request.called_method,
                e,
            )
            raise TransportError.from_code(
                "E-3001",
                model=request.model_name,
                method=request.called_method,
                reason=str(e),
            ) from e

        if response.status_code >= 400:
            raise TransportError.from_code(
                "E-3002",
                model=request.model_name,
                method=request.called_method,
                status_code=response.status_code,
            )
        return response.content

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
