from datetime import date

import pytest

from memorials.dates import normalize_date


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1950-01-01", date(1950, 1, 1)),
        (" 2020-05-05 ", date(2020, 5, 5)),
        ("2020-05-05T10:30:00", date(2020, 5, 5)),
        ("2020-05-05T23:30:00-05:00", date(2020, 5, 6)),
        ("2020-05-05T00:00:00Z", date(2020, 5, 5)),
    ],
)
def test_parses_iso_dates_and_timestamps(raw, expected):
    assert normalize_date(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "yesterday", "2020-13-01", "2020-02-30", 20200505])
def test_unparsable_input_is_none(raw):
    assert normalize_date(raw) is None
