"""Parsing of the heterogeneous date strings found in agenda exports."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, NamedTuple, Optional, Tuple

import pandas as pd

from .processors import cell_to_text


__all__ = ["DayKey", "parse_day_key", "format_date"]

logger = logging.getLogger(__name__)


class DayKey(NamedTuple):
    """Calendar day a record belongs to, independent of any timezone."""

    day: int
    month: int
    year: int

    @classmethod
    def from_date(cls, value: date) -> "DayKey":
        return cls(value.day, value.month, value.year)

    def as_date(self) -> date:
        return date(self.year, self.month, self.day)

    @property
    def sort_key(self) -> Tuple[int, int, int]:
        return (self.year, self.month, self.day)

    def label(self) -> str:
        return f"{self.day:02d}/{self.month:02d}/{self.year}"


def _build_key(year: str, month: str, day: str) -> Optional[DayKey]:
    try:
        return DayKey.from_date(date(int(year), int(month), int(day)))
    except (TypeError, ValueError, OverflowError):
        return None


def _generic_parse(text: str) -> Optional[DayKey]:
    try:
        parsed = pd.to_datetime(text, utc=True, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return DayKey(parsed.day, parsed.month, parsed.year)


def parse_day_key(value: Any) -> Optional[DayKey]:
    """Parse ``DD/MM/YYYY[ HH:MM]``, ``YYYY-MM-DD[ HH:MM]`` or free text.

    Returns ``None`` when the value does not describe a valid calendar day;
    callers skip such records in date-keyed views.
    """
    text = cell_to_text(value)
    if not text:
        return None

    date_part = text.split(" ")[0]
    if "/" in text:
        parts = date_part.split("/")
        if len(parts) == 3:
            key = _build_key(parts[2], parts[1], parts[0])
        else:
            key = _generic_parse(text)
    elif "-" in text:
        parts = date_part.split("-")
        if len(parts) == 3 and all(part.isdigit() for part in parts):
            key = _build_key(parts[0], parts[1], parts[2])
        else:
            key = _generic_parse(date_part)
    else:
        key = _generic_parse(text)

    if key is None:
        logger.debug("Data não reconhecida: %r", text)
    return key


def format_date(value: Any) -> str:
    """Render a date string as ``DD/MM/YYYY``; unparseable text is returned as-is."""
    text = cell_to_text(value)
    if not text:
        return "N/A"
    key = parse_day_key(text)
    if key is None:
        return text
    return key.label()
