"""Services responsible for attendance KPIs and derived tables."""
from __future__ import annotations

from typing import Iterable, Mapping, MutableMapping, Optional, Sequence

import pandas as pd

from ..data.dates import format_date, parse_day_key
from ..data.loader import Record
from ..data.processors import cell_to_text, format_number, format_percentage, record_value
from ..data.settings import DEFAULT_SETTINGS, Settings
from ..data.status import StatusCategory, classify_status
from .aggregation import (
    DashboardResult,
    DashboardStats,
    PatientStat,
    calculate_dashboard_stats,
    sort_patients,
)


__all__ = [
    "AttendanceAnalyzer",
    "records_to_frame",
    "status_breakdown",
    "daily_attendance",
    "daily_status_breakdown",
    "patient_table",
    "STACKED_COLUMNS",
]

BREAKDOWN_LABELS = (
    ("Presenças", StatusCategory.ATTENDED),
    ("Faltas", StatusCategory.ABSENT),
    ("Cancelamentos", StatusCategory.CANCELLED),
    ("Desmarcados", StatusCategory.THERAPIST_CANCELLED),
)

STACKED_COLUMNS = {
    StatusCategory.ATTENDED: "Atendidos",
    StatusCategory.ABSENT: "Faltas",
    StatusCategory.CANCELLED: "Cancelados",
    StatusCategory.THERAPIST_CANCELLED: "Desmarcados",
}

PATIENT_COLUMNS = [
    "Paciente",
    "Total",
    "Atendidas",
    "Faltas",
    "Canceladas",
    "Desmarcadas",
    "Taxa de Presença (%)",
    "Último Agendamento",
]


def records_to_frame(records: Iterable[Record]) -> pd.DataFrame:
    """Return the records as a string DataFrame, columns in header order."""
    return pd.DataFrame([dict(record) for record in records], dtype=str)


def status_breakdown(status_tally: Mapping[str, int]) -> pd.DataFrame:
    """Counts and share of the four known statuses over all tallied records."""
    total = sum(status_tally.values())
    rows = []
    for label, category in BREAKDOWN_LABELS:
        count = int(status_tally.get(category.value, 0))
        rows.append(
            {
                "Indicador": label,
                "Status": category.value,
                "Quantidade": count,
                "Percentual (%)": round(count / total * 100, 1) if total else 0.0,
            }
        )
    return pd.DataFrame(rows, columns=["Indicador", "Status", "Quantidade", "Percentual (%)"])


def daily_attendance(
    records: Iterable[Record],
    status_column: str,
    settings: Settings = DEFAULT_SETTINGS,
) -> pd.DataFrame:
    """Attended appointments per calendar day, in chronological order.

    Every day with a parseable planned date is listed, even with zero
    attendances. Only the exact status "Atendido" counts as an attendance.
    The planned end is used when the planned start is empty.
    """
    rows = []
    for record in records:
        day = parse_day_key(
            record_value(record, settings.planned_start_column, settings.planned_end_column)
        )
        if day is None:
            continue
        attended = cell_to_text(record.get(status_column, "")) == StatusCategory.ATTENDED.value
        rows.append({"Data": day.as_date(), "Atendido": int(attended)})

    if not rows:
        return pd.DataFrame(columns=["Dia", "Data", "Atendimentos"])

    grouped = (
        pd.DataFrame(rows)
        .groupby("Data")["Atendido"]
        .sum()
        .reset_index(name="Atendimentos")
        .sort_values("Data")
        .reset_index(drop=True)
    )
    grouped["Atendimentos"] = grouped["Atendimentos"].astype(int)
    grouped.insert(0, "Dia", grouped["Data"].apply(lambda value: value.strftime("%d/%m/%Y")))
    return grouped


def daily_status_breakdown(
    records: Iterable[Record],
    status_column: str,
    settings: Settings = DEFAULT_SETTINGS,
) -> pd.DataFrame:
    """Per-day counts of each status category for the stacked bar chart.

    Attended appointments are placed on their actual start date; the others
    on their planned start date. Records without a usable date are skipped.
    """
    columns = ["Dia", "Data", *STACKED_COLUMNS.values(), "Total"]
    rows = []
    for record in records:
        category = classify_status(record.get(status_column, ""))
        if category not in STACKED_COLUMNS:
            continue
        if category is StatusCategory.ATTENDED:
            date_column = settings.actual_start_column
        else:
            date_column = settings.planned_start_column
        day = parse_day_key(record.get(date_column, ""))
        if day is None:
            continue
        rows.append({"Data": day.as_date(), "Categoria": STACKED_COLUMNS[category]})

    if not rows:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame(rows)
    table = (
        pd.crosstab(df["Data"], df["Categoria"])
        .reindex(columns=list(STACKED_COLUMNS.values()), fill_value=0)
        .sort_index()
        .reset_index()
    )
    table.columns.name = None
    table["Total"] = table[list(STACKED_COLUMNS.values())].sum(axis=1)
    table.insert(0, "Dia", table["Data"].apply(lambda value: value.strftime("%d/%m/%Y")))
    return table[columns]


def patient_table(
    patients: Iterable[PatientStat],
    *,
    sort_by: str = "total",
    descending: bool = True,
) -> pd.DataFrame:
    """Tabular view of the qualifying patients for the ranking table."""
    ordered = sort_patients(patients, by=sort_by, descending=descending)
    rows = [
        {
            "Paciente": patient.name,
            "Total": patient.total_appointments,
            "Atendidas": patient.atendido_count,
            "Faltas": patient.absences,
            "Canceladas": patient.cancelado_count,
            "Desmarcadas": patient.desmarcado_count,
            "Taxa de Presença (%)": round(patient.attendance_rate, 1),
            "Último Agendamento": format_date(patient.last_appointment),
        }
        for patient in ordered
    ]
    return pd.DataFrame(rows, columns=PATIENT_COLUMNS)


class AttendanceAnalyzer:
    """Compute attendance KPIs, rankings and helper tables for one upload."""

    def __init__(self, result: DashboardResult, settings: Optional[Settings] = None) -> None:
        self.result = result
        self.settings = settings or DEFAULT_SETTINGS

    @property
    def records(self) -> Sequence[Record]:
        return self.result.records

    @property
    def patients(self) -> Sequence[PatientStat]:
        return self.result.patients

    def get_kpi_summary(self) -> DashboardStats:
        """Return the main indicators, recomputed from the stored aggregates."""
        return calculate_dashboard_stats(
            self.result.records, self.result.status_tally, self.result.patients
        )

    def build_summary_metadata(self) -> MutableMapping[str, object]:
        """Produce the dictionary used on the summary cards."""
        kpis = self.get_kpi_summary()
        tally = self.result.status_tally
        return {
            "Agendamentos": format_number(kpis.total_appointments),
            "Atendimentos": format_number(tally.get(StatusCategory.ATTENDED.value, 0)),
            "Faltas": format_number(kpis.total_absences),
            "Taxa de presença": format_percentage(kpis.overall_attendance_rate),
            "Pacientes elegíveis": format_number(kpis.total_patients),
            "Pacientes sem faltas": format_number(kpis.perfect_attendance),
            "Taxa de pacientes sem faltas": format_percentage(kpis.attendance_rate),
            "Coluna de status": self.result.status_column,
        }

    def records_frame(self) -> pd.DataFrame:
        return records_to_frame(self.result.records)

    def status_breakdown(self) -> pd.DataFrame:
        return status_breakdown(self.result.status_tally)

    def build_daily_attendance(self) -> pd.DataFrame:
        return daily_attendance(self.result.records, self.result.status_column, self.settings)

    def build_daily_breakdown(self) -> pd.DataFrame:
        return daily_status_breakdown(
            self.result.records, self.result.status_column, self.settings
        )

    def patient_table(self, sort_by: str = "total", descending: bool = True) -> pd.DataFrame:
        return patient_table(self.result.patients, sort_by=sort_by, descending=descending)

    def top_patients(self, limit: int = 15) -> pd.DataFrame:
        """Return the patients with most counted appointments."""
        return self.patient_table().head(limit).reset_index(drop=True)

    def perfect_attendance_table(self) -> pd.DataFrame:
        """Patients without absences, by number of counted appointments."""
        perfect = [patient for patient in self.result.patients if patient.has_perfect_attendance]
        return patient_table(perfect, sort_by="total", descending=True)
