from __future__ import annotations

import pytest


@pytest.fixture
def scenario_grid():
    return [
        ["Paciente", "Status", "Início previsto"],
        ["Ana", "Atendido", "01/03/2024"],
        ["Ana", "Falta", "02/03/2024"],
        ["Bruno", "Atendido", "01/03/2024"],
    ]


@pytest.fixture
def agenda_grid():
    return [
        ["Paciente", "Profissional", "Status", "Início previsto", "Fim previsto", "Início real"],
        ["Ana", "Dra. Lima", "Atendido", "01/03/2024 08:00", "01/03/2024 08:50", "01/03/2024 08:05"],
        ["Ana", "Dra. Lima", "Falta", "08/03/2024 08:00", "08/03/2024 08:50", ""],
        ["Ana", "Dra. Lima", "Cancelado", "15/03/2024 08:00", "15/03/2024 08:50", ""],
        ["Bruno", "Dr. Reis", "Atendido", "2024-03-01 09:00", "", "2024-03-01 09:10"],
        ["Bruno", "Dr. Reis", "Terapeuta desmarcou", "2024-03-08 09:00", "", ""],
        ["Carla", "Dr. Reis", "Falta", "02/03/2024 10:00", "", ""],
        ["Carla", "Dr. Reis", "Confirmado", "09/03/2024 10:00", "", ""],
        ["Davi", "Dra. Lima", "", "03/03/2024 10:00", "", ""],
        ["", "Dra. Lima", "Atendido", "", "04/03/2024 11:00", "04/03/2024 11:00"],
    ]
