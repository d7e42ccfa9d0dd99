"""Plotly figures for the attendance dashboard."""
from __future__ import annotations

from typing import Mapping

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .attendance import STACKED_COLUMNS, status_breakdown


__all__ = [
    "status_evolution_figure",
    "daily_attendance_figure",
    "daily_stacked_figure",
]

STACKED_COLORS = {
    "Atendidos": "hsl(221, 83%, 53%)",
    "Faltas": "hsl(221, 83%, 63%)",
    "Cancelados": "hsl(221, 83%, 73%)",
    "Desmarcados": "hsl(221, 83%, 83%)",
}


def status_evolution_figure(status_tally: Mapping[str, int]) -> go.Figure:
    breakdown = status_breakdown(status_tally)
    breakdown["Rótulo"] = ["Presente", "Faltou", "Cancelado", "Desmarcados"]
    fig = px.line(
        breakdown,
        x="Rótulo",
        y="Quantidade",
        markers=True,
        title="Evolução dos Status de Agendamento",
    )
    fig.update_traces(line_color="#4CAF50", line_width=3, fill="tozeroy")
    fig.update_layout(xaxis_title="", yaxis_title="Quantidade", yaxis_rangemode="tozero")
    return fig


def daily_attendance_figure(daily: pd.DataFrame) -> go.Figure:
    """Bar chart of attended appointments per day."""
    data = daily.copy()
    data["Rótulo"] = "Dia " + data["Dia"].astype(str)
    fig = px.bar(
        data,
        x="Rótulo",
        y="Atendimentos",
        text="Atendimentos",
        title="Atendimentos Realizados por Dia",
    )
    fig.update_traces(marker_color="#2196F3", marker_line_color="#1976D2", marker_line_width=1)
    fig.update_layout(xaxis_title="", yaxis_title="Atendimentos", yaxis_rangemode="tozero")
    return fig


def daily_stacked_figure(breakdown: pd.DataFrame) -> go.Figure:
    """Stacked bars with each status category per day."""
    categories = list(STACKED_COLUMNS.values())
    long_df = breakdown.melt(
        id_vars=["Dia"],
        value_vars=categories,
        var_name="Status",
        value_name="Quantidade",
    )
    fig = px.bar(
        long_df,
        x="Dia",
        y="Quantidade",
        color="Status",
        barmode="stack",
        category_orders={"Status": categories, "Dia": breakdown["Dia"].tolist()},
        color_discrete_map=STACKED_COLORS,
        title="Agendamentos por Dia",
    )
    fig.update_layout(xaxis_title="", yaxis_title="Agendamentos", legend_title_text="")
    return fig
