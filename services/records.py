"""
Turn a purchase-order download response into a single order record.

The backend answers with either a JSON object or CSV text (header row plus
data rows). Records are plain dicts; fields the backend left out are simply
absent and render as "-" in the PDF.
"""
import csv
import io
import json
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class RecordParseError(ValueError):
    """The response could not be read as JSON or CSV."""


def _decode_labels(record: dict) -> dict:
    """CSV exports carry labels as a JSON string in a single cell."""
    labels = record.get("labels")
    if isinstance(labels, str):
        text = labels.strip()
        if not text:
            record["labels"] = []
        else:
            try:
                decoded = json.loads(text)
            except ValueError as e:
                raise RecordParseError(f"labels column is not valid JSON: {e}") from e
            record["labels"] = decoded if isinstance(decoded, list) else [decoded]
    return record


def _pick_row(rows: list[dict], po_number: Optional[str]) -> Optional[dict]:
    rows = [r for r in rows if isinstance(r, dict) and any(str(v or "").strip() for v in r.values())]
    if not rows:
        return None

    if po_number:
        for row in rows:
            if str(row.get("po_number") or "").strip() == po_number:
                if len(rows) > 1:
                    logger.warning(
                        "PO %s: %d rows returned, using the matching row", po_number, len(rows)
                    )
                return row

    if len(rows) > 1:
        logger.warning(
            "PO %s: %d rows returned and none matched, using the first (%d discarded)",
            po_number, len(rows), len(rows) - 1,
        )
    return rows[0]


def parse_csv_rows(text: str) -> list[dict]:
    """Parse CSV text with a header row, skipping blank lines."""
    try:
        reader = csv.DictReader(io.StringIO(text.strip()))
        rows = []
        for row in reader:
            if None in row:
                raise RecordParseError(f"row {reader.line_num} has more cells than the header")
            rows.append({k.strip(): (v.strip() if isinstance(v, str) else v) for k, v in row.items()})
        return rows
    except csv.Error as e:
        raise RecordParseError(f"Malformed CSV: {e}") from e


def parse_order_record(response: Any, po_number: Optional[str] = None) -> Optional[dict]:
    """
    Return the order record in *response*, or None when there is none.

    Raises RecordParseError for malformed JSON/CSV or an unexpected type.
    When several rows come back the row matching *po_number* wins, else the
    first row is used.
    """
    if response is None:
        return None

    if isinstance(response, bytes):
        response = response.decode("utf-8", errors="replace")

    if isinstance(response, str):
        text = response.strip()
        if not text:
            return None
        if text[0] in "{[":
            try:
                response = json.loads(text)
            except ValueError as e:
                raise RecordParseError(f"Malformed JSON: {e}") from e
        else:
            row = _pick_row(parse_csv_rows(text), po_number)
            return _decode_labels(row) if row is not None else None

    if isinstance(response, dict):
        return _decode_labels(dict(response)) if response else None
    if isinstance(response, list):
        row = _pick_row(response, po_number)
        return _decode_labels(dict(row)) if row is not None else None

    raise RecordParseError(f"Unexpected response type: {type(response).__name__}")
