"""Errors raised while turning a spreadsheet into dashboard data."""
from __future__ import annotations


__all__ = [
    "PlanilhaError",
    "EmptyInputError",
    "MissingStatusColumnError",
    "MalformedFileError",
    "UnsupportedFileError",
]


class PlanilhaError(ValueError):
    """Base class for failures that abort a whole dashboard run."""

    default_message = "Erro ao processar arquivo"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class EmptyInputError(PlanilhaError):
    default_message = "O arquivo está vazio ou não contém dados válidos."


class MissingStatusColumnError(PlanilhaError):
    default_message = (
        "Não foi possível encontrar uma coluna de status. Certifique-se de que existe "
        'uma coluna com "status", "situação", "estado" ou similar.'
    )


class MalformedFileError(PlanilhaError):
    default_message = "Erro ao processar o arquivo. Verifique se o arquivo não está corrompido."


class UnsupportedFileError(PlanilhaError):
    default_message = "Por favor, selecione um arquivo válido (.xlsx, .xls ou .csv)"
