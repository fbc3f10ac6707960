import pytest
from compress_vids.ui.format import format_duration, format_percent, format_ratio, format_size


@pytest.mark.parametrize("seconds,expected", [
    (0, "0s"),
    (59.9, "59s"),
    (60, "60s"),
    (61, "1m 1s"),
    (3600, "60m 0s"),
    (3723, "1h 2m 3s"),
    (7205, "2h 5s"),
    (-3, "0s"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_size_units():
    assert format_size(512) == "0.5 KB"
    assert format_size(1024 * 1024) == "1024.0 KB"
    assert format_size(5 * 1024 * 1024) == "5.0 MB"
    assert format_size(3 * 1024 ** 3 // 2) == "1.5 GB"


def test_format_percent_and_ratio():
    assert format_percent(37.5) == "37.5%"
    assert format_ratio(40, 100) == "40.0%"
    assert format_ratio(10, 0) == "n/a"
