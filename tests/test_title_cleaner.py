from __future__ import annotations

import pytest

from tucalendario.core.title_cleaner import FALLBACK_TITLE, capitalize_first, clean_title, strip_fillers


def test_reminder_with_clock_time() -> None:
    text = "recordarme comprar pan a las 18hs"
    assert clean_title(text, nlu_substring="a las 18hs") == "Comprar pan"
    assert clean_title(text, clock_literals=["18hs"]) == "Comprar pan"


def test_prefixes_are_stripped_cumulatively() -> None:
    text = "por favor recordarme que tengo que ir al médico el viernes"
    assert clean_title(text, weekday_literal="viernes") == "Ir al médico"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("no me olvides de pagar la luz", "pagar la luz"),
        ("acordarme de llamar a Juan", "llamar a Juan"),
        ("haceme acordar que hay reunión", "hay reunión"),
        ("que tengo que estudiar", "estudiar"),
        ("podés agendar turno con el dentista", "turno con el dentista"),
        ("anotar para comprar regalo", "comprar regalo"),
    ],
)
def test_filler_prefixes(text: str, expected: str) -> None:
    assert strip_fillers(text).strip() == expected


def test_fillers_only_strip_prefixes() -> None:
    assert strip_fillers("llamar para recordarme algo") == "llamar para recordarme algo"


def test_nlu_substring_removed_once() -> None:
    text = "mañana comprar pan y mañana llevarlo"
    assert clean_title(text, nlu_substring="mañana") == "Comprar pan y mañana llevarlo"


def test_twelve_hour_literal_and_connectors() -> None:
    assert clean_title("reunión a las 9pm", clock_literals=["9pm"]) == "Reunión"
    assert clean_title("ver a Ana este jueves", weekday_literal="jueves") == "Ver a Ana"
    assert clean_title("pagar alquiler el día 5 próximo") == "Pagar alquiler 5"


def test_whitespace_is_collapsed_and_case_preserved() -> None:
    assert clean_title("  llamar   a   ANSES  ") == "Llamar a ANSES"


def test_empty_title_falls_back() -> None:
    assert clean_title("por favor") == FALLBACK_TITLE
    text = "recordarme el lunes a las 10hs"
    assert clean_title(text, nlu_substring="el lunes a las 10hs") == FALLBACK_TITLE


def test_capitalize_first() -> None:
    assert capitalize_first("") == ""
    assert capitalize_first("ñandú") == "Ñandú"
    assert capitalize_first("iPhone nuevo") == "IPhone nuevo"


def test_twelve_hour_clock_with_minutes_leaves_no_meridiem() -> None:
    text = "reunión con Pedro el jueves 9:30 pm"
    title = clean_title(text, nlu_substring="el jueves", clock_literals=["9:30", "9:30 pm"])
    assert title == "Reunión con Pedro"
