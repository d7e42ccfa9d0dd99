"""Column names and heuristics used to read appointment spreadsheets."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple


__all__ = ["Settings", "DEFAULT_SETTINGS", "UNDEFINED_STATUS_LABEL"]


UNDEFINED_STATUS_LABEL = "Não definido"

STATUS_KEYWORDS: Tuple[str, ...] = (
    "status",
    "situação",
    "situacao",
    "estado",
    "state",
    "condição",
    "condicao",
)

# Position of the status column in the clinic's agenda export template.
STATUS_FALLBACK_INDEX = 10


def _as_str_tuple(values: Any, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if not values:
        return default
    if isinstance(values, str):
        values = [values]
    out = tuple(str(v).strip() for v in values if v is not None and str(v).strip())
    return out or default


@dataclass(frozen=True)
class Settings:
    """Names and heuristics that depend on the spreadsheet template.

    ``status_fallback_index`` is used when no header matches the status
    keywords and the header row is longer than that index. Set it to
    ``None`` to disable the positional fallback.
    """

    status_keywords: Tuple[str, ...] = STATUS_KEYWORDS
    status_fallback_index: Optional[int] = STATUS_FALLBACK_INDEX
    patient_columns: Tuple[str, ...] = ("Paciente", "Nome do Paciente")
    unknown_patient_label: str = "Paciente não identificado"
    status_column: str = "Status"
    appointment_date_columns: Tuple[str, ...] = ("Início previsto", "Data")
    undefined_status_label: str = UNDEFINED_STATUS_LABEL
    planned_start_column: str = "Início previsto"
    planned_end_column: str = "Fim previsto"
    actual_start_column: str = "Início real"

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "Settings":
        """Build settings from a loose mapping, keeping defaults for missing keys."""
        raw = dict(raw or {})
        defaults = cls()

        fallback = raw.get("status_fallback_index", defaults.status_fallback_index)
        if fallback is not None:
            try:
                fallback = int(fallback)
            except (TypeError, ValueError):
                fallback = defaults.status_fallback_index
            else:
                if fallback < 0:
                    fallback = None

        def text(key: str) -> str:
            value = raw.get(key)
            value = str(value).strip() if value is not None else ""
            return value or getattr(defaults, key)

        return cls(
            status_keywords=_as_str_tuple(raw.get("status_keywords"), defaults.status_keywords),
            status_fallback_index=fallback,
            patient_columns=_as_str_tuple(raw.get("patient_columns"), defaults.patient_columns),
            unknown_patient_label=text("unknown_patient_label"),
            status_column=text("status_column"),
            appointment_date_columns=_as_str_tuple(
                raw.get("appointment_date_columns"), defaults.appointment_date_columns
            ),
            undefined_status_label=text("undefined_status_label"),
            planned_start_column=text("planned_start_column"),
            planned_end_column=text("planned_end_column"),
            actual_start_column=text("actual_start_column"),
        )


DEFAULT_SETTINGS = Settings()
