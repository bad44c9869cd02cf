"""Decoders turning parsed model output into sheet tables and slide lists.

Each accepted response shape has its own decoder.  A decoder returns ``None``
when the payload is not in its shape so callers can try the next one.
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Callable

from docgen.core.errors import StructuringFailed
from docgen.domain import SheetTable, Slide

SLIDE_FIELDS = ("title", "content", "notes")


def extract_json_object(raw: str) -> str:
    """Return the text between the first ``{`` and the last ``}`` when both exist."""

    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end == -1 or end < start:
        return raw
    return raw[start : end + 1]


def parse_mapping(raw: str) -> dict[str, Any]:
    candidate = extract_json_object(raw)
    try:
        payload = json.loads(candidate)
    except (json.JSONDecodeError, ValueError, RecursionError) as exc:
        raise StructuringFailed("Could not convert the AI response into structured data.") from exc
    if not isinstance(payload, dict):
        raise StructuringFailed("The AI response is not a JSON object.")
    return payload


def stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


# ----------------------------------------------------------------------
# sheet tables
# ----------------------------------------------------------------------
def _decode_rows(value: Any) -> list[list[str]] | None:
    if not isinstance(value, list):
        return None
    if not all(isinstance(row, list) for row in value):
        return None
    return [[stringify(cell) for cell in row] for row in value]


def decode_sheet_table(payload: Mapping[str, Any]) -> SheetTable:
    """Keep every key whose value is a list of lists, stringifying each cell."""

    table: SheetTable = {}
    for sheet_name, value in payload.items():
        rows = _decode_rows(value)
        if rows is not None:
            table[str(sheet_name)] = rows
    return table


# ----------------------------------------------------------------------
# slides
# ----------------------------------------------------------------------
def coerce_slide(entry: Mapping[Any, Any]) -> Slide:
    fields = {str(key).strip().lower(): value for key, value in entry.items()}
    return Slide(**{name: stringify(fields.get(name)) for name in SLIDE_FIELDS})


def decode_keyed_slides(payload: Mapping[str, Any]) -> list[Slide] | None:
    """``{"slides": [{...}, ...]}``; a mapping of slide mappings is accepted too."""

    raw_slides = payload.get("slides")
    if isinstance(raw_slides, Mapping):
        raw_slides = list(raw_slides.values())
    if not isinstance(raw_slides, list):
        return None
    return [coerce_slide(item) for item in raw_slides if isinstance(item, Mapping)]


def decode_implicit_slides(payload: Mapping[str, Any]) -> list[Slide] | None:
    """``{"slide1": {...}, "slide2": {...}}`` in response key order."""

    entries = [value for value in payload.values() if isinstance(value, Mapping)]
    if not entries:
        return None
    return [coerce_slide(entry) for entry in entries]


SLIDE_SHAPES: tuple[Callable[[Mapping[str, Any]], list[Slide] | None], ...] = (
    decode_keyed_slides,
    decode_implicit_slides,
)


def decode_slides(payload: Mapping[str, Any]) -> list[Slide]:
    for decoder in SLIDE_SHAPES:
        slides = decoder(payload)
        if slides is None:
            continue
        if not slides:
            raise StructuringFailed("The AI response did not contain any slides.")
        return slides
    raise StructuringFailed("The AI response did not contain any slides.")
