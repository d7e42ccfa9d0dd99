from __future__ import annotations

from datetime import date

import pytest

from painel_atendimentos.data import (
    DayKey,
    StatusCategory,
    classify_status,
    format_date,
    format_number,
    format_percentage,
    is_valid_status,
    parse_day_key,
    tally_key,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Atendido", StatusCategory.ATTENDED),
        ("  ATENDIDO  ", StatusCategory.ATTENDED),
        ("Falta", StatusCategory.ABSENT),
        ("Falta justificada", StatusCategory.ABSENT),
        ("Cancelado", StatusCategory.CANCELLED),
        ("Cancelado pelo paciente", StatusCategory.CANCELLED),
        ("Terapeuta desmarcou", StatusCategory.THERAPIST_CANCELLED),
        ("Desmarcado", StatusCategory.THERAPIST_CANCELLED),
        ("Confirmado", StatusCategory.UNCLASSIFIED),
        ("Confirmação pendente", StatusCategory.UNCLASSIFIED),
        ("", StatusCategory.UNCLASSIFIED),
        (None, StatusCategory.UNCLASSIFIED),
    ],
)
def test_classify_status(text, expected):
    assert classify_status(text) is expected


def test_first_matching_rule_wins():
    assert classify_status("Atendido / cancelado") is StatusCategory.ATTENDED
    assert classify_status("Falta - desmarcado") is StatusCategory.ABSENT


def test_absences_do_not_count_towards_the_total():
    assert is_valid_status("Atendido")
    assert is_valid_status("Cancelado")
    assert is_valid_status("Terapeuta desmarcou")
    assert not is_valid_status("Falta")
    assert not is_valid_status("Confirmado")


def test_tally_key_uses_literal_text():
    assert tally_key(" Atendido ") == "Atendido"
    assert tally_key("") == "Não definido"
    assert tally_key("", undefined_label="Sem status") == "Sem status"


@pytest.mark.parametrize(
    "text",
    ["05/03/2024 10:00", "05/03/2024", "5/3/2024", "2024-03-05", "2024-03-05 14:30", "2024-03-05T10:00:00"],
)
def test_parse_day_key_known_formats(text):
    assert parse_day_key(text) == DayKey(5, 3, 2024)


def test_parse_day_key_generic_fallback():
    assert parse_day_key("March 5, 2024") == DayKey(5, 3, 2024)


def test_generic_fallback_is_anchored_in_utc():
    assert parse_day_key("2024-03-05T23:30:00-03:00") == DayKey(6, 3, 2024)


def test_iso_timestamps_with_time_separator():
    assert parse_day_key("2024-03-05T10:00:00") == DayKey(5, 3, 2024)
    assert format_date("2024-03-05T10:00:00") == "05/03/2024"


@pytest.mark.parametrize("text", ["", "   ", None, "31/02/2024", "aa/bb/cccc", "sem data", "2024-13-01"])
def test_parse_day_key_unparseable_returns_none(text):
    assert parse_day_key(text) is None


def test_day_key_helpers():
    key = DayKey(5, 3, 2024)
    assert key.label() == "05/03/2024"
    assert key.as_date() == date(2024, 3, 5)
    assert key.sort_key == (2024, 3, 5)
    assert sorted([DayKey(1, 4, 2024), DayKey(30, 3, 2024)], key=lambda k: k.sort_key)[0] == DayKey(30, 3, 2024)


def test_format_date():
    assert format_date("2024-03-05 10:00") == "05/03/2024"
    assert format_date("5/3/2024") == "05/03/2024"
    assert format_date("") == "N/A"
    assert format_date("amanhã") == "amanhã"


def test_format_number_and_percentage():
    assert format_number(1234) == "1.234"
    assert format_number(1234.5) == "1.234,5"
    assert format_number("x") == "—"
    assert format_percentage(66.6666) == "66.7%"
    assert format_percentage(None) == "—"
