from __future__ import annotations

import pytest

from pycartelera.identity import first_present, normalize_id


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ({"imdbID": "tt01", "imdbId": "x", "id": "y"}, "tt01"),
        ({"imdbId": "tt02", "id": "y"}, "tt02"),
        ({"id": 7}, "7"),
        ({"imdbID": "  ", "id": "9"}, "9"),
        ({"imdbID": None, "imdbId": " tt03 "}, "tt03"),
        ({"Title": "No id"}, ""),
        ({}, ""),
        ("  80001 ", "80001"),
        (42, "42"),
        (7.0, "7"),
        ({"id": 80001.0}, "80001"),
        (7.5, "7.5"),
        (None, ""),
        ("", ""),
        (True, ""),
        ([1, 2], ""),
    ],
)
def test_normalize_id(value: object, expected: str) -> None:
    assert normalize_id(value) == expected


def test_normalize_id_never_raises_on_odd_input() -> None:
    assert normalize_id(object()) == ""
    assert normalize_id({"imdbID": {"nested": 1}}) == ""


def test_first_present_skips_none_and_blank() -> None:
    record = {"Title": "", "title": None, "Nombre": "Batman"}
    assert first_present(record, ("Title", "title", "Nombre")) == "Batman"
    assert first_present(record, ("missing",)) is None
