"""High-level interface for accessing appointment datasets."""
from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

import pandas as pd

from .dates import parse_day_key
from .loader import Record, load_grid, parse_csv
from .processors import record_value
from .settings import DEFAULT_SETTINGS, Settings

if TYPE_CHECKING:
    from ..services.aggregation import DashboardResult


class AtendimentoDataFacade:
    """Facade that centralises data access patterns used by the dashboard."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or DEFAULT_SETTINGS

    def load_grid(self, source: Any, filename: Optional[str] = None) -> List[List[str]]:
        """Load a grid from a path, bytes or upload buffer."""
        return load_grid(source, filename)

    def load_dataset(self, source: Any, filename: Optional[str] = None) -> "DashboardResult":
        """Load a spreadsheet and return the full :class:`DashboardResult`."""
        from ..services.aggregation import build_dashboard

        return build_dashboard(self.load_grid(source, filename), self.settings)

    def load_csv_text(self, csv_text: str) -> "DashboardResult":
        from ..services.aggregation import build_dashboard

        return build_dashboard(parse_csv(csv_text), self.settings)

    def filter_records_by_date(
        self,
        records: Sequence[Record],
        *,
        start=None,
        end=None,
        date_columns: Optional[Sequence[str]] = None,
    ) -> List[Record]:
        """Keep records whose appointment day lies within ``[start, end]``.

        Records without a parseable date are left out of the filtered view.
        """
        columns = tuple(date_columns or self.settings.appointment_date_columns)
        start_day = _as_date(start)
        end_day = _as_date(end)
        if start_day is None and end_day is None:
            return list(records)

        filtered: List[Record] = []
        for record in records:
            key = parse_day_key(record_value(record, *columns))
            if key is None:
                continue
            day = key.as_date()
            if start_day is not None and day < start_day:
                continue
            if end_day is not None and day > end_day:
                continue
            filtered.append(record)
        return filtered


def _as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        key = parse_day_key(value)
        if key is None:
            raise ValueError(f"Data inválida: {value!r}")
        return key.as_date()
    return pd.to_datetime(value).date()


__all__ = ["AtendimentoDataFacade"]
