from __future__ import annotations

from datetime import date

import plotly.graph_objects as go
import pytest

from painel_atendimentos.services import (
    AttendanceAnalyzer,
    build_dashboard,
    daily_attendance,
    daily_attendance_figure,
    daily_stacked_figure,
    patient_table,
    records_to_frame,
    status_breakdown,
    status_evolution_figure,
)


@pytest.fixture
def analyzer(agenda_grid):
    return AttendanceAnalyzer(build_dashboard(agenda_grid))


def test_status_breakdown_shares():
    table = status_breakdown({"Atendido": 6, "Falta": 2, "Cancelado": 1, "Confirmado": 1})
    assert table["Indicador"].tolist() == ["Presenças", "Faltas", "Cancelamentos", "Desmarcados"]
    assert table["Quantidade"].tolist() == [6, 2, 1, 0]
    assert table["Percentual (%)"].tolist() == [60.0, 20.0, 10.0, 0.0]


def test_status_breakdown_without_records():
    assert status_breakdown({})["Percentual (%)"].tolist() == [0.0, 0.0, 0.0, 0.0]


def test_daily_attendance_lists_every_dated_day(analyzer):
    daily = analyzer.build_daily_attendance()

    assert daily["Dia"].tolist() == [
        "01/03/2024",
        "02/03/2024",
        "04/03/2024",
        "08/03/2024",
        "09/03/2024",
        "15/03/2024",
    ]
    assert daily["Atendimentos"].tolist() == [2, 0, 1, 0, 0, 0]
    assert daily["Data"].iloc[0] == date(2024, 3, 1)


def test_daily_attendance_skips_unparseable_dates():
    records = [
        {"Status": "Atendido", "Início previsto": "sem data"},
        {"Status": "Atendido", "Início previsto": "31/12/2023"},
        {"Status": "Atendido", "Início previsto": "2024-01-02"},
    ]
    daily = daily_attendance(records, "Status")
    assert daily["Dia"].tolist() == ["31/12/2023", "02/01/2024"]


def test_daily_attendance_counts_only_the_exact_attended_status():
    records = [
        {"Status": "Não atendido", "Início previsto": "01/03/2024"},
        {"Status": "ATENDIDO", "Início previsto": "01/03/2024"},
        {"Status": "Atendido", "Início previsto": "02/03/2024"},
    ]
    daily = daily_attendance(records, "Status")
    assert daily["Dia"].tolist() == ["01/03/2024", "02/03/2024"]
    assert daily["Atendimentos"].tolist() == [0, 1]


def test_daily_attendance_empty():
    daily = daily_attendance([], "Status")
    assert daily.empty
    assert list(daily.columns) == ["Dia", "Data", "Atendimentos"]


def test_daily_breakdown_uses_actual_start_for_attended(analyzer):
    table = analyzer.build_daily_breakdown()

    assert table["Dia"].tolist() == ["01/03/2024", "02/03/2024", "04/03/2024", "08/03/2024", "15/03/2024"]
    assert table["Atendidos"].tolist() == [2, 0, 1, 0, 0]
    assert table["Faltas"].tolist() == [0, 1, 0, 1, 0]
    assert table["Cancelados"].tolist() == [0, 0, 0, 0, 1]
    assert table["Desmarcados"].tolist() == [0, 0, 0, 1, 0]
    assert table["Total"].tolist() == [2, 1, 1, 2, 1]


def test_patient_table_defaults_to_total_descending(analyzer):
    table = analyzer.patient_table()

    assert table.columns.tolist() == [
        "Paciente",
        "Total",
        "Atendidas",
        "Faltas",
        "Canceladas",
        "Desmarcadas",
        "Taxa de Presença (%)",
        "Último Agendamento",
    ]
    assert table["Paciente"].tolist() == ["Bruno", "Ana", "Paciente não identificado"]
    ana = table.set_index("Paciente").loc["Ana"]
    assert ana["Taxa de Presença (%)"] == 50.0
    assert ana["Último Agendamento"] == "15/03/2024"
    assert table.set_index("Paciente").loc["Paciente não identificado", "Último Agendamento"] == "N/A"


def test_patient_table_by_name(analyzer):
    table = patient_table(analyzer.patients, sort_by="name", descending=False)
    assert table["Paciente"].tolist() == ["Ana", "Bruno", "Paciente não identificado"]


def test_perfect_attendance_table(analyzer):
    table = analyzer.perfect_attendance_table()
    assert set(table["Paciente"]) == {"Bruno", "Paciente não identificado"}
    assert (table["Faltas"] == 0).all()


def test_top_patients_limit(analyzer):
    assert len(analyzer.top_patients(limit=2)) == 2


def test_summary_metadata(analyzer):
    summary = analyzer.build_summary_metadata()
    assert summary["Agendamentos"] == "8"
    assert summary["Atendimentos"] == "3"
    assert summary["Faltas"] == "2"
    assert summary["Taxa de presença"] == "37.5%"
    assert summary["Pacientes elegíveis"] == "3"
    assert summary["Pacientes sem faltas"] == "2"
    assert summary["Taxa de pacientes sem faltas"] == "66.7%"
    assert summary["Coluna de status"] == "Status"


def test_kpi_summary_matches_pipeline(analyzer):
    assert analyzer.get_kpi_summary() == analyzer.result.stats


def test_records_frame_keeps_header_order(analyzer):
    frame = analyzer.records_frame()
    assert frame.columns.tolist()[:3] == ["Paciente", "Profissional", "Status"]
    assert len(frame) == 8
    assert records_to_frame([]).empty


def test_figures(analyzer):
    line = status_evolution_figure(analyzer.result.status_tally)
    assert isinstance(line, go.Figure)
    assert list(line.data[0].y) == [3, 2, 1, 1]

    bars = daily_attendance_figure(analyzer.build_daily_attendance())
    assert list(bars.data[0].x)[0] == "Dia 01/03/2024"

    stacked = daily_stacked_figure(analyzer.build_daily_breakdown())
    assert [trace.name for trace in stacked.data] == ["Atendidos", "Faltas", "Cancelados", "Desmarcados"]
    assert stacked.layout.barmode == "stack"
