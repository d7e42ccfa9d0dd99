"""Aggregation and reporting services for the attendance dashboard."""
from .aggregation import (
    DashboardResult,
    DashboardStats,
    PatientStat,
    analyze_status,
    build_dashboard,
    build_dashboard_from_csv,
    calculate_dashboard_stats,
    calculate_patient_stats,
    sort_patients,
)
from .attendance import (
    AttendanceAnalyzer,
    daily_attendance,
    daily_status_breakdown,
    patient_table,
    records_to_frame,
    status_breakdown,
)
from .charts import daily_attendance_figure, daily_stacked_figure, status_evolution_figure

__all__ = [
    "AttendanceAnalyzer",
    "DashboardResult",
    "DashboardStats",
    "PatientStat",
    "analyze_status",
    "build_dashboard",
    "build_dashboard_from_csv",
    "calculate_dashboard_stats",
    "calculate_patient_stats",
    "sort_patients",
    "daily_attendance",
    "daily_status_breakdown",
    "patient_table",
    "records_to_frame",
    "status_breakdown",
    "status_evolution_figure",
    "daily_attendance_figure",
    "daily_stacked_figure",
]
