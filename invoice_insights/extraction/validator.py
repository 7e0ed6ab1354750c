"""Validates the parsed model response and coerces entry fields to their types."""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

from invoice_insights.extraction.exceptions import ExtractionValidationError
from invoice_insights.extraction.models import (
    DEFAULT_GST_PERCENTAGE,
    DEFAULT_STATUS,
    NUMERIC_FIELDS,
    STRING_FIELDS,
    FieldValue,
)

_MAX_ENTRIES = 200
_MISSING_MARKERS = frozenset({"", "n/a", "na", "none", "null", "-"})
_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")


def validate_entries(data: dict[str, Any]) -> list[dict[str, FieldValue]]:
    """Validate the ``invoices`` payload and build typed field mappings.

    Unknown keys are dropped; every known field is present in the output,
    ``None`` when absent or unusable.

    Raises:
        ExtractionValidationError: if the payload shape is wrong.
    """
    raw_entries = data.get("invoices")
    if not isinstance(raw_entries, list):
        raise ExtractionValidationError("'invoices' must be a list")
    if len(raw_entries) > _MAX_ENTRIES:
        raise ExtractionValidationError(
            f"Too many invoice entries: {len(raw_entries)} (max {_MAX_ENTRIES})"
        )
    return [_build_entry(item, i) for i, item in enumerate(raw_entries)]


def _build_entry(raw: Any, index: int) -> dict[str, FieldValue]:
    if not isinstance(raw, dict):
        raise ExtractionValidationError(f"Invoice entry at index {index} must be an object")
    entry: dict[str, FieldValue] = {}
    for key in STRING_FIELDS:
        entry[key] = coerce_text(raw.get(key))
    for key in NUMERIC_FIELDS:
        entry[key] = coerce_decimal(raw.get(key))
    if entry["gst_percentage"] is None:
        entry["gst_percentage"] = DEFAULT_GST_PERCENTAGE
    if entry["status"] is None:
        entry["status"] = DEFAULT_STATUS
    return entry


def coerce_text(raw: Any) -> str | None:
    """Strip a text value; empty strings and N/A markers become None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float, Decimal)):
        return str(raw)
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if text.lower() in _MISSING_MARKERS:
        return None
    return text


def coerce_decimal(raw: Any) -> Decimal | None:
    """Convert numbers and numeric strings such as "₹1,250.50" or "18%" to Decimal."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else None
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        value = Decimal(str(raw))
        return value if value.is_finite() else None
    if not isinstance(raw, str):
        return None
    cleaned = _NON_NUMERIC_RE.sub("", raw)
    if cleaned in {"", "-", ".", "-."}:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None
