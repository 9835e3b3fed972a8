"""Parsers for structured transcript exports (CSV and JSON)."""

import json
from typing import Any

from ..constants import (
    JSON_SPEAKER_FIELDS,
    JSON_TEXT_FIELDS,
    JSON_TIMESTAMP_FIELDS,
    MAX_UTTERANCES,
    SPEAKER_COLUMN_SYNONYMS,
    TEXT_COLUMN_SYNONYMS,
    TIMESTAMP_COLUMN_SYNONYMS,
    JsonField,
    SourceKind,
)
from ..errors import MalformedInputError, MissingColumnError
from ..models import ParseResult, Utterance
from .base import build_result, is_usable_text, optional_text


def _split_cells(line: str) -> list[str]:
    # Plain comma split; quoted commas are not supported.
    return [cell.strip().strip('"').strip() for cell in line.split(",")]


def find_column(headers: list[str], synonyms: tuple[str, ...]) -> int | None:
    """Find the first header containing any of the synonyms.

    Args:
        headers: Header cells in column order.
        synonyms: Substrings that identify the column.

    Returns:
        int | None: Index of the first matching column, or None.
    """
    for position, header in enumerate(headers):
        lowered = header.lower()
        if any(synonym in lowered for synonym in synonyms):
            return position
    return None


def _cell(cells: list[str], column: int | None) -> str | None:
    if column is None or column >= len(cells):
        return None
    return cells[column] or None


def parse_csv(text: str) -> ParseResult:
    """Parse a CSV transcript export.

    The first line is the header. Text, timestamp and speaker columns are
    found by synonym; only the text column is required. Retained rows keep
    their original data row number as index.

    Args:
        text: Decoded CSV content.

    Returns:
        ParseResult: Utterances for rows with usable text.

    Raises:
        MissingColumnError: If no header matches a text column synonym.
    """
    lines = text.splitlines()
    headers = _split_cells(lines[0]) if lines else []

    text_column = find_column(headers, TEXT_COLUMN_SYNONYMS)
    if text_column is None:
        raise MissingColumnError(
            f"No text column found in CSV header {headers}; "
            f"expected a column containing one of {list(TEXT_COLUMN_SYNONYMS)}"
        )
    timestamp_column = find_column(headers, TIMESTAMP_COLUMN_SYNONYMS)
    speaker_column = find_column(headers, SPEAKER_COLUMN_SYNONYMS)

    data_rows = lines[1:]
    truncated = len(data_rows) > MAX_UTTERANCES

    utterances: list[Utterance] = []
    skipped = 0
    for row_number, line in enumerate(data_rows[:MAX_UTTERANCES]):
        cells = _split_cells(line)
        row_text = _cell(cells, text_column)
        if not is_usable_text(row_text):
            skipped += 1
            continue

        utterances.append(
            Utterance(
                text=row_text.strip(),
                index=row_number,
                speaker=_cell(cells, speaker_column),
                timestamp=_cell(cells, timestamp_column),
            )
        )

    return build_result(
        utterances=utterances,
        skipped=skipped,
        truncated=truncated,
        source_kind=SourceKind.CSV,
    )


def _json_items(payload: Any) -> list[Any]:
    """Locate the list of message items in a JSON payload."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in (JsonField.MESSAGES, JsonField.DATA):
            if isinstance(payload.get(key), list):
                return payload[key]
    return [payload]


def _first_field(item: dict[str, Any], fields: tuple[str, ...]) -> Any:
    for name in fields:
        if item.get(name) is not None:
            return item[name]
    return None


def _json_item_text(item: Any) -> Any:
    """Extract the text of a JSON item, serializing it as a last resort."""
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        value = _first_field(item, JSON_TEXT_FIELDS)
        if value is not None:
            return value
    return json.dumps(item, default=str)


def parse_json(text: str) -> ParseResult:
    """Parse a JSON transcript export.

    Accepts an array, an object with a ``messages`` or ``data`` array, or
    any other value treated as a single item. Items keep their array
    position as index.

    Args:
        text: Decoded JSON content.

    Returns:
        ParseResult: Utterances for items with usable string text.

    Raises:
        MalformedInputError: If the content is not valid JSON.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Invalid JSON transcript: {e}") from e

    items = _json_items(payload)
    truncated = len(items) > MAX_UTTERANCES

    utterances: list[Utterance] = []
    skipped = 0
    for position, item in enumerate(items[:MAX_UTTERANCES]):
        item_text = _json_item_text(item)
        if not isinstance(item_text, str) or not is_usable_text(item_text):
            skipped += 1
            continue

        speaker = timestamp = None
        if isinstance(item, dict):
            speaker = optional_text(_first_field(item, JSON_SPEAKER_FIELDS))
            timestamp = optional_text(_first_field(item, JSON_TIMESTAMP_FIELDS))

        utterances.append(
            Utterance(
                text=item_text.strip(),
                index=position,
                speaker=speaker,
                timestamp=timestamp,
            )
        )

    return build_result(
        utterances=utterances,
        skipped=skipped,
        truncated=truncated,
        source_kind=SourceKind.JSON,
    )
