"""Data access layer for the attendance dashboard."""
from .dates import DayKey, format_date, parse_day_key
from .errors import (
    EmptyInputError,
    MalformedFileError,
    MissingStatusColumnError,
    PlanilhaError,
    UnsupportedFileError,
)
from .facade import AtendimentoDataFacade
from .loader import (
    Record,
    find_status_column,
    load_excel_grid,
    load_grid,
    normalize_csv,
    normalize_rows,
    parse_csv,
)
from .processors import (
    cell_to_text,
    first_nonempty,
    format_number,
    format_percentage,
    normalize_column_name,
    record_value,
)
from .settings import DEFAULT_SETTINGS, Settings
from .status import StatusCategory, classify_status, is_valid_status, tally_key

__all__ = [
    "AtendimentoDataFacade",
    "DayKey",
    "format_date",
    "parse_day_key",
    "PlanilhaError",
    "EmptyInputError",
    "MissingStatusColumnError",
    "MalformedFileError",
    "UnsupportedFileError",
    "Record",
    "find_status_column",
    "load_excel_grid",
    "load_grid",
    "normalize_csv",
    "normalize_rows",
    "parse_csv",
    "cell_to_text",
    "first_nonempty",
    "format_number",
    "format_percentage",
    "normalize_column_name",
    "record_value",
    "DEFAULT_SETTINGS",
    "Settings",
    "StatusCategory",
    "classify_status",
    "is_valid_status",
    "tally_key",
]
