"""Spreadsheet reading helpers for appointment exports."""
from __future__ import annotations

import io
import logging
import re
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .errors import EmptyInputError, MalformedFileError, MissingStatusColumnError, UnsupportedFileError
from .processors import cell_to_text, normalize_column_name
from .settings import DEFAULT_SETTINGS, Settings


__all__ = [
    "Record",
    "parse_csv",
    "find_status_column",
    "normalize_rows",
    "normalize_csv",
    "load_grid",
    "load_excel_grid",
]

logger = logging.getLogger(__name__)

Record = Mapping[str, str]
Grid = Sequence[Sequence[Any]]

SUPPORTED_EXTENSIONS = re.compile(r"\.(xlsx|xls|csv)$", re.IGNORECASE)


def parse_csv(csv_text: str) -> List[List[str]]:
    """Split semicolon-delimited text into rows, honouring double quotes.

    A ``"`` toggles the quoted state and is never part of the value; a ``;``
    outside quotes ends the field. Lines that are blank after trimming are
    skipped.
    """
    rows: List[List[str]] = []
    for line in csv_text.split("\n"):
        if not line.strip():
            continue
        row: List[str] = []
        current: List[str] = []
        in_quotes = False
        for char in line:
            if char == '"':
                in_quotes = not in_quotes
            elif char == ";" and not in_quotes:
                row.append("".join(current).strip())
                current = []
            else:
                current.append(char)
        row.append("".join(current).strip())
        rows.append(row)
    return rows


def find_status_column(headers: Sequence[Any], settings: Settings = DEFAULT_SETTINGS) -> Optional[int]:
    """Heuristically locate the status column in a header row.

    Headers are matched case- and accent-insensitively against the status
    keywords. When nothing matches, ``settings.status_fallback_index`` is used
    if the header row is long enough. Returns ``None`` when not found.
    """
    keywords = [normalize_column_name(keyword) for keyword in settings.status_keywords]
    for idx, header in enumerate(headers):
        header_norm = normalize_column_name(cell_to_text(header))
        if header_norm and any(keyword in header_norm for keyword in keywords):
            return idx

    fallback = settings.status_fallback_index
    if fallback is not None and len(headers) > fallback:
        logger.info("Coluna de status não identificada pelo nome; usando a posição %d", fallback)
        return fallback
    return None


def _to_record(headers: Sequence[str], row: Sequence[Any]) -> Record:
    values = {}
    for col_idx, header in enumerate(headers):
        values[header] = cell_to_text(row[col_idx]) if col_idx < len(row) else ""
    return MappingProxyType(values)


def normalize_rows(grid: Grid, settings: Settings = DEFAULT_SETTINGS) -> Tuple[List[Record], str]:
    """Turn a header + data grid into records.

    Returns the records in row order together with the name of the status
    column. Rows without a status value are dropped.
    """
    if grid is None or len(grid) == 0:
        logger.warning("Planilha sem linhas")
        raise EmptyInputError()

    headers = [cell_to_text(header) for header in grid[0]]
    status_idx = find_status_column(headers, settings)
    if status_idx is None:
        logger.warning("Nenhuma coluna de status entre %d cabeçalhos", len(headers))
        raise MissingStatusColumnError()
    status_column = headers[status_idx]

    records: List[Record] = []
    for row in grid[1:]:
        record = _to_record(headers, row if row is not None else [])
        status_value = record.get(status_column, "")
        if not status_value or status_value == '""':
            continue
        records.append(record)

    logger.info(
        "%d registros válidos de %d linhas (coluna de status: %r)",
        len(records),
        len(grid) - 1,
        status_column,
    )
    return records, status_column


def normalize_csv(csv_text: str, settings: Settings = DEFAULT_SETTINGS) -> Tuple[List[Record], str]:
    return normalize_rows(parse_csv(csv_text), settings)


def _source_name(source: Any, filename: Optional[str]) -> str:
    if filename:
        return str(filename)
    if isinstance(source, (str, Path)):
        return str(source)
    return str(getattr(source, "name", "") or "")


def _read_bytes(source: Any) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, Path)):
        return Path(source).read_bytes()
    data = source.read()
    return data.encode("utf-8") if isinstance(data, str) else data


def load_excel_grid(source: Any) -> List[List[str]]:
    """Read the first sheet of an Excel workbook as a grid of strings."""
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    try:
        df = pd.read_excel(source, sheet_name=0, header=None, dtype=str)
    except Exception as exc:
        logger.warning("Falha ao ler planilha: %s", exc)
        raise MalformedFileError() from exc
    df = df.dropna(how="all")
    return [[cell_to_text(value) for value in row] for row in df.itertuples(index=False, name=None)]


def load_grid(source: Any, filename: Optional[str] = None) -> List[List[str]]:
    """Load an ``.xlsx``, ``.xls`` or ``.csv`` file into a grid of strings.

    ``source`` may be a path, raw bytes or a binary file-like object (such as
    an upload widget's buffer); ``filename`` overrides the name used to detect
    the format.
    """
    name = _source_name(source, filename)
    if not SUPPORTED_EXTENSIONS.search(name):
        raise UnsupportedFileError()

    if name.lower().endswith(".csv"):
        try:
            text = _read_bytes(source).decode("utf-8-sig")
        except (OSError, UnicodeDecodeError, AttributeError) as exc:
            logger.warning("Falha ao ler CSV %s: %s", name, exc)
            raise MalformedFileError() from exc
        return parse_csv(text)
    return load_excel_grid(source)
