"""Raw response → ResultEnvelope normalization.

The provider answers with {success, data, errors, warnings, info} in JSON,
or the same structure under a <root> element in XML. Field shapes vary:
errors can be a list, a code→message dict, or a single string, and XML
collapses one-element lists. Everything is coerced into ResultEnvelope.
Empty or unparseable input produces an unsuccessful envelope instead of
raising.
"""

import json
import logging
from typing import Any
from xml.parsers.expat import ExpatError

import xmltodict

from novaposhta.models import ResponseFormat, ResultEnvelope

logger = logging.getLogger(__name__)

EMPTY_RESPONSE = "Empty response from Nova Poshta API"
MALFORMED_RESPONSE = "Malformed response from Nova Poshta API"
REQUEST_FAILED = "Request failed"


def _as_list(value: Any) -> list[Any]:
    """Coerce a provider field into a list."""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        # XML renders repeated children as {"item": [...]}
        if set(value) == {"item"}:
            return _as_list(value["item"])
        return [value]
    return [value]


def _as_messages(value: Any) -> list[str]:
    """Flatten errors/warnings into plain strings."""
    if isinstance(value, dict) and set(value) != {"item"}:
        return [str(message) for message in value.values() if message not in (None, "")]
    return [str(message) for message in _as_list(value) if message not in (None, "")]


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1")
    return bool(value)


def _decode(raw: bytes | str | dict | None, response_format: ResponseFormat) -> Any:
    """Parse the raw body into Python data; raises ValueError when unparseable."""
    if isinstance(raw, dict):
        return raw
    text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
    if response_format == ResponseFormat.XML:
        try:
            parsed = xmltodict.parse(text)
        except ExpatError as e:
            raise ValueError(str(e)) from e
        return parsed.get("root", parsed)
    return json.loads(text)


def normalize(
    raw: bytes | str | dict | None,
    response_format: ResponseFormat = ResponseFormat.JSON,
) -> ResultEnvelope:
    """Wrap a raw provider response into a ResultEnvelope.

    Args:
        raw: Response body as returned by the transport (or an already
            decoded dict).
        response_format: Wire format the body is encoded in.

    Returns:
        ResultEnvelope; unsuccessful for empty, malformed, or failed responses.
    """
    if raw is None or (not isinstance(raw, dict) and not raw.strip()):
        return ResultEnvelope.failure(EMPTY_RESPONSE)

    try:
        payload = _decode(raw, response_format)
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning("Could not parse %s response: %s", response_format.value, e)
        return ResultEnvelope.failure(MALFORMED_RESPONSE)

    if not isinstance(payload, dict):
        return ResultEnvelope.failure(MALFORMED_RESPONSE)

    errors = _as_messages(payload.get("errors"))
    success = _as_bool(payload.get("success")) and not errors
    if not success and not errors:
        errors = [REQUEST_FAILED]

    return ResultEnvelope(
        success=success,
        data=_as_list(payload.get("data")),
        errors=errors,
        warnings=_as_messages(payload.get("warnings")),
        info=_as_list(payload.get("info")),
    )
