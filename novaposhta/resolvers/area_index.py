"""Static area index loaded from the bundled areas.json snapshot.

The remote API offers no "find area by name" call, so area lookups run
against a fixed dataset keyed by area Ref. The dataset is loaded once per
process on first use and is read-only afterwards.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from novaposhta.errors import NovaPoshtaError
from novaposhta.models import ResultEnvelope

logger = logging.getLogger(__name__)

AREAS_FILE = Path(__file__).resolve().parent.parent / "data" / "areas.json"
AREA_NOT_FOUND = "Area was not found"

# Fields scanned by name lookup, in priority order
_SEARCH_FIELDS = ("Area", "AreaRu", "Description", "DescriptionRu")

_lock = threading.Lock()
_areas: Mapping[str, Mapping[str, Any]] | None = None


def _load(path: Path) -> Mapping[str, Mapping[str, Any]]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise NovaPoshtaError.from_code("E-4001", reason=str(e)) from e
    if not isinstance(raw, dict):
        raise NovaPoshtaError.from_code("E-4001", reason="expected a JSON object")
    return MappingProxyType(
        {ref: MappingProxyType(dict(area)) for ref, area in raw.items()}
    )


def get_area_index() -> Mapping[str, Mapping[str, Any]]:
    """Return the process-wide area index, loading it on first call.

    Returns:
        Read-only mapping of area Ref to area record, in dataset order.

    Raises:
        NovaPoshtaError: E-4001 when the bundled dataset cannot be read.
    """
    global _areas
    if _areas is None:
        with _lock:
            if _areas is None:
                _areas = _load(AREAS_FILE)
                logger.debug("Loaded %d areas from %s", len(_areas), AREAS_FILE)
    return _areas


def reset_area_index() -> None:
    """Drop the loaded index so the next access reloads it. Test helper."""
    global _areas
    with _lock:
        _areas = None


def _contains(value: Any, needle: str) -> bool:
    return isinstance(value, str) and needle in value.casefold()


def find_area(
    areas: Mapping[str, Mapping[str, Any]],
    find_by_string: str = "",
    ref: str = "",
) -> list[dict[str, Any]]:
    """Find at most one area by name fragment or by Ref.

    A non-empty ``find_by_string`` wins over ``ref``: the first area (in
    index order) whose Area, AreaRu, Description or DescriptionRu contains
    it case-insensitively is returned. Otherwise the area keyed by ``ref``
    is returned.

    Args:
        areas: Index as returned by get_area_index().
        find_by_string: Name fragment in either language.
        ref: Canonical area Ref.

    Returns:
        A list with the matching area (its ``Ref`` filled in), or an empty
        list when nothing was supplied or nothing matched.
    """
    if find_by_string:
        needle = find_by_string.casefold()
        for key, area in areas.items():
            if any(_contains(area.get(name), needle) for name in _SEARCH_FIELDS):
                return [{**area, "Ref": key}]
        return []
    if ref and ref in areas:
        return [{**areas[ref], "Ref": ref}]
    return []


def get_area(find_by_string: str = "", ref: str = "") -> ResultEnvelope:
    """Look up an area in the bundled index.

    Args:
        find_by_string: Name fragment in either language.
        ref: Canonical area Ref.

    Returns:
        Envelope with one area, or an unsuccessful envelope with
        "Area was not found".
    """
    data = find_area(get_area_index(), find_by_string, ref)
    if not data:
        return ResultEnvelope.failure(AREA_NOT_FOUND)
    return ResultEnvelope.ok(data)
