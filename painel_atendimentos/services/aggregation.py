"""Aggregations that turn appointment records into dashboard figures."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, MutableMapping, Optional, Sequence

from ..data.errors import EmptyInputError
from ..data.loader import Record, normalize_rows, parse_csv
from ..data.processors import record_value
from ..data.settings import DEFAULT_SETTINGS, Settings
from ..data.status import StatusCategory, classify_status, is_valid_status, tally_key


__all__ = [
    "PatientStat",
    "DashboardStats",
    "DashboardResult",
    "analyze_status",
    "calculate_patient_stats",
    "calculate_dashboard_stats",
    "sort_patients",
    "build_dashboard",
    "build_dashboard_from_csv",
]

logger = logging.getLogger(__name__)

StatusTally = Dict[str, int]


@dataclass
class PatientStat:
    """Running counters for one patient, keyed by the patient's name."""

    name: str
    total_appointments: int = 0
    attendances: int = 0
    absences: int = 0
    cancellations: int = 0
    atendido_count: int = 0
    cancelado_count: int = 0
    desmarcado_count: int = 0
    last_appointment: str = ""
    statuses: List[str] = field(default_factory=list)
    has_at_least_one_attended: bool = False

    @property
    def attendance_rate(self) -> float:
        """Attended over attended plus absences, in percent; cancellations are ignored."""
        denominator = self.atendido_count + self.absences
        if not denominator:
            return 0.0
        return self.atendido_count / denominator * 100

    @property
    def has_perfect_attendance(self) -> bool:
        return self.total_appointments > 0 and self.absences == 0

    def is_qualifying(self) -> bool:
        if not self.has_at_least_one_attended:
            return False
        return any(is_valid_status(status) for status in self.statuses)

    def as_dict(self) -> MutableMapping[str, object]:
        return {
            "name": self.name,
            "total_appointments": self.total_appointments,
            "attendances": self.attendances,
            "absences": self.absences,
            "cancellations": self.cancellations,
            "atendido_count": self.atendido_count,
            "cancelado_count": self.cancelado_count,
            "desmarcado_count": self.desmarcado_count,
            "last_appointment": self.last_appointment,
            "statuses": list(self.statuses),
            "has_at_least_one_attended": self.has_at_least_one_attended,
            "attendance_rate": self.attendance_rate,
        }


@dataclass(frozen=True)
class DashboardStats:
    """Top level KPIs shown on the dashboard cards."""

    total_appointments: int = 0
    total_absences: int = 0
    overall_attendance_rate: float = 0.0
    total_patients: int = 0
    perfect_attendance: int = 0
    attendance_rate: float = 0.0

    def as_dict(self) -> MutableMapping[str, float]:
        return {
            "total_appointments": self.total_appointments,
            "total_absences": self.total_absences,
            "overall_attendance_rate": self.overall_attendance_rate,
            "total_patients": self.total_patients,
            "perfect_attendance": self.perfect_attendance,
            "attendance_rate": self.attendance_rate,
        }


@dataclass(frozen=True)
class DashboardResult:
    """Read-only outcome of one pipeline run."""

    records: List[Record]
    status_column: str
    status_tally: Mapping[str, int]
    patients: List[PatientStat]
    stats: DashboardStats


def analyze_status(
    records: Iterable[Record],
    status_column: str,
    *,
    undefined_label: str = DEFAULT_SETTINGS.undefined_status_label,
) -> StatusTally:
    """Count records per literal (trimmed) status text."""
    tally: StatusTally = {}
    for record in records:
        key = tally_key(record.get(status_column, ""), undefined_label=undefined_label)
        tally[key] = tally.get(key, 0) + 1
    return tally


def _apply_record(patient: PatientStat, status: str, appointment_date: str) -> None:
    if is_valid_status(status):
        patient.total_appointments += 1

    patient.statuses.append(status)

    if appointment_date:
        patient.last_appointment = appointment_date

    category = classify_status(status)
    if category is StatusCategory.ATTENDED:
        patient.attendances += 1
        patient.atendido_count += 1
        patient.has_at_least_one_attended = True
    elif category is StatusCategory.ABSENT:
        patient.absences += 1
    elif category is StatusCategory.CANCELLED:
        patient.cancellations += 1
        patient.cancelado_count += 1
    elif category is StatusCategory.THERAPIST_CANCELLED:
        patient.desmarcado_count += 1


def calculate_patient_stats(
    records: Iterable[Record], settings: Settings = DEFAULT_SETTINGS
) -> List[PatientStat]:
    """Group records by patient name and keep the qualifying patients.

    A patient qualifies when at least one appointment was attended and at
    least one status is attended, cancelled or rescheduled by the therapist.
    ``last_appointment`` holds the last non-empty date seen in row order.
    """
    patients: Dict[str, PatientStat] = {}
    for record in records:
        name = record_value(
            record, *settings.patient_columns, default=settings.unknown_patient_label
        )
        status = record_value(record, settings.status_column)
        appointment_date = record_value(record, *settings.appointment_date_columns)

        patient = patients.get(name)
        if patient is None:
            patient = patients[name] = PatientStat(name=name)
        _apply_record(patient, status, appointment_date)

    qualifying = [patient for patient in patients.values() if patient.is_qualifying()]
    logger.debug("%d de %d pacientes elegíveis", len(qualifying), len(patients))
    return qualifying


def calculate_dashboard_stats(
    records: Sequence[Record],
    status_tally: Mapping[str, int],
    patients: Sequence[PatientStat],
) -> DashboardStats:
    total_appointments = len(records)
    total_absences = status_tally.get(StatusCategory.ABSENT.value, 0)
    total_attended = status_tally.get(StatusCategory.ATTENDED.value, 0)
    overall_attendance_rate = (
        total_attended / total_appointments * 100 if total_appointments else 0.0
    )

    total_patients = len(patients)
    perfect_attendance = sum(1 for patient in patients if patient.has_perfect_attendance)
    attendance_rate = perfect_attendance / total_patients * 100 if total_patients else 0.0

    return DashboardStats(
        total_appointments=total_appointments,
        total_absences=total_absences,
        overall_attendance_rate=overall_attendance_rate,
        total_patients=total_patients,
        perfect_attendance=perfect_attendance,
        attendance_rate=attendance_rate,
    )


_SORT_KEYS = {
    "name": lambda patient: patient.name.lower(),
    "rate": lambda patient: (patient.attendance_rate, patient.name.lower()),
    "total": lambda patient: (patient.total_appointments, patient.name.lower()),
}


def sort_patients(
    patients: Iterable[PatientStat], by: str = "name", *, descending: bool = False
) -> List[PatientStat]:
    """Return patients ordered by name, attendance rate or total appointments."""
    try:
        key = _SORT_KEYS[by]
    except KeyError:
        raise ValueError(f"Ordenação desconhecida: {by!r}") from None
    return sorted(patients, key=key, reverse=descending)


def build_dashboard(
    grid: Sequence[Sequence[object]], settings: Optional[Settings] = None
) -> DashboardResult:
    """Run the whole aggregation for a header + data grid.

    Raises a :class:`~painel_atendimentos.data.errors.PlanilhaError` when the
    grid cannot produce a dashboard; no partial result is returned.
    """
    settings = settings or DEFAULT_SETTINGS
    records, status_column = normalize_rows(grid, settings)
    if not records:
        logger.warning("Nenhum registro com status preenchido")
        raise EmptyInputError()

    status_tally = analyze_status(
        records, status_column, undefined_label=settings.undefined_status_label
    )
    patients = calculate_patient_stats(records, settings)
    stats = calculate_dashboard_stats(records, status_tally, patients)
    logger.info(
        "Dashboard calculado: %d agendamentos, %d pacientes elegíveis",
        stats.total_appointments,
        stats.total_patients,
    )
    return DashboardResult(
        records=records,
        status_column=status_column,
        status_tally=MappingProxyType(status_tally),
        patients=patients,
        stats=stats,
    )


def build_dashboard_from_csv(csv_text: str, settings: Optional[Settings] = None) -> DashboardResult:
    return build_dashboard(parse_csv(csv_text), settings)
