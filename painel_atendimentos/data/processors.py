"""Text processing utilities shared by the attendance dashboard."""
from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping

from unidecode import unidecode

import pandas as pd


__all__ = [
    "cell_to_text",
    "normalize_column_name",
    "first_nonempty",
    "record_value",
    "format_number",
    "format_percentage",
]


def cell_to_text(value: Any) -> str:
    """Return a trimmed string for a spreadsheet cell, mapping missing data to ''."""
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def normalize_column_name(value: Any) -> str:
    """Normalize column names by removing accents and collapsing whitespace."""
    text = unidecode(str(value)).strip().lower()
    text = re.sub(r"\s+", " ", text)
    return text


def first_nonempty(series: Iterable[Any]) -> str:
    """Return the first non-empty textual value from an iterable."""
    for value in series:
        text = cell_to_text(value)
        if text:
            return text
    return ""


def record_value(record: Mapping[str, str], *columns: str, default: str = "") -> str:
    """Look up the first non-empty value among ``columns`` in a record."""
    return first_nonempty(record.get(column) for column in columns) or default


def format_number(value: Any) -> str:
    """Format a number with pt-BR separators (``1.234,5``)."""
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return "—"
    if math.isnan(numeric) or math.isinf(numeric):
        return "—"
    if numeric.is_integer():
        return f"{int(numeric):,}".replace(",", ".")
    formatted = f"{numeric:,.3f}".rstrip("0").rstrip(".")
    return formatted.replace(",", "X").replace(".", ",").replace("X", ".")


def format_percentage(value: Any) -> str:
    try:
        return f"{float(value):.1f}%"
    except (TypeError, ValueError):
        return "—"
