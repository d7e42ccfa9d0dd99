"""Classification of free-text appointment statuses."""
from __future__ import annotations

from enum import Enum
from typing import Any

from .processors import cell_to_text
from .settings import UNDEFINED_STATUS_LABEL


__all__ = [
    "StatusCategory",
    "classify_status",
    "is_valid_status",
    "tally_key",
    "VALID_CATEGORIES",
]


class StatusCategory(str, Enum):
    ATTENDED = "Atendido"
    ABSENT = "Falta"
    CANCELLED = "Cancelado"
    THERAPIST_CANCELLED = "Terapeuta desmarcou"
    UNCLASSIFIED = "Não classificado"


# Order matters: the first matching rule wins.
_RULES = (
    (StatusCategory.ATTENDED, ("atendido",)),
    (StatusCategory.ABSENT, ("falta",)),
    (StatusCategory.CANCELLED, ("cancelado",)),
    (StatusCategory.THERAPIST_CANCELLED, ("terapeuta desmarcou", "desmarcado")),
)

_VALID_KEYWORDS = ("atendido", "cancelado", "terapeuta desmarcou", "desmarcado")

VALID_CATEGORIES = frozenset(
    {
        StatusCategory.ATTENDED,
        StatusCategory.CANCELLED,
        StatusCategory.THERAPIST_CANCELLED,
    }
)


def classify_status(text: Any) -> StatusCategory:
    """Classify a status text into a :class:`StatusCategory`.

    Rules (case-insensitive substring match, first match wins):
      - 'atendido' -> ATTENDED
      - 'falta' -> ABSENT
      - 'cancelado' -> CANCELLED
      - 'terapeuta desmarcou' or 'desmarcado' -> THERAPIST_CANCELLED
      - anything else -> UNCLASSIFIED
    """
    lowered = cell_to_text(text).lower()
    if not lowered:
        return StatusCategory.UNCLASSIFIED
    for category, keywords in _RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return StatusCategory.UNCLASSIFIED


def is_valid_status(text: Any) -> bool:
    """Return True when the status counts towards a patient's total appointments.

    Absences are not part of the total; a text mentioning both an absence and
    a valid keyword is still valid.
    """
    lowered = cell_to_text(text).lower()
    return any(keyword in lowered for keyword in _VALID_KEYWORDS)


def tally_key(text: Any, *, undefined_label: str = UNDEFINED_STATUS_LABEL) -> str:
    """Key used when counting statuses: the literal trimmed text."""
    return cell_to_text(text) or undefined_label
