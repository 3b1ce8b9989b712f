from datetime import date

import pytest

from services.formatting import (
    build_volume,
    format_cut_off,
    format_display_date,
    format_sob_date,
    fpod_display,
    is_hazardous,
    join_container_numbers,
    parse_iso_date,
    reference_name,
)


@pytest.mark.parametrize("raw, expected", [
    ("06061800", "06/06-1800 HRS"),
    ("31120000", "31/12-0000 HRS"),
    ("06/06-1800 hrs", "06/06-1800 HRS"),
    ("", None),
    (None, None),
])
def test_format_cut_off(raw, expected):
    assert format_cut_off(raw) == expected


@pytest.mark.parametrize("raw", ["0606180", "00061800", "06001800", "06062400", "06061860", "tomorrow"])
def test_format_cut_off_rejects(raw):
    with pytest.raises(ValueError):
        format_cut_off(raw)


def test_volume_and_containers():
    equipment = [
        {"type": "40HC", "qty": 2, "container_no": "MSKU1"},
        {"type": {"type": "20DV"}, "qty": 1, "container_no": ""},
    ]
    assert build_volume(equipment) == "2 x 40HC, 1 x 20DV"
    assert join_container_numbers(equipment) == "MSKU1"
    assert is_hazardous("1 x 20haz")
    assert not is_hazardous(None)


def test_reference_rendering():
    assert reference_name({"name": "MAERSK", "email": "x"}) == "MAERSK"
    assert reference_name(None) == ""
    assert fpod_display({"name": "HOUSTON", "country": "USA"}) == "HOUSTON, USA"
    assert fpod_display({"name": "HOUSTON"}) == "HOUSTON"
    assert fpod_display("JEBEL ALI") == "JEBEL ALI"


def test_dates():
    assert parse_iso_date("2025-06-12") == date(2025, 6, 12)
    assert parse_iso_date("12-06-2025") == date(2025, 6, 12)
    assert parse_iso_date("2025-06-12T10:00:00") == date(2025, 6, 12)
    assert parse_iso_date("not a date") is None
    assert format_display_date("2025-06-12") == "12/06/2025"
    assert format_sob_date(date(2025, 6, 12)) == "12-06-2025"
    assert format_sob_date(None) == ""
