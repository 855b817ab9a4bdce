from datetime import timedelta

import pytest

from sysmon_events.utils.timeutil import parse_rfc3339, to_rfc3339


def test_parse_rfc3339_keeps_offset():
    dt = parse_rfc3339("2023-01-01T12:00:00-07:00")
    assert dt.utcoffset() == timedelta(hours=-7)
    assert to_rfc3339(dt) == "2023-01-01T12:00:00-07:00"


def test_parse_rfc3339_zulu_and_separators():
    assert parse_rfc3339("2023-01-01T12:00:00Z") == parse_rfc3339("2023-01-01 12:00:00z")
    assert parse_rfc3339("2023-01-01t12:00:00Z").utcoffset() == timedelta(0)


def test_parse_rfc3339_fraction_lengths():
    assert parse_rfc3339("2024-01-01T00:00:00.5Z").microsecond == 500000
    assert parse_rfc3339("2024-01-01T00:00:00.1234567Z").microsecond == 123456


@pytest.mark.parametrize(
    "text",
    ["", "2023-01-01", "2023-01-01T12:00:00", "2023-01-01T12:00Z", "2023-02-30T00:00:00Z", None],
)
def test_parse_rfc3339_rejects(text):
    with pytest.raises(ValueError):
        parse_rfc3339(text)


def test_to_rfc3339_requires_offset():
    with pytest.raises(ValueError):
        to_rfc3339(parse_rfc3339("2023-01-01T12:00:00Z").replace(tzinfo=None))


def test_parse_rfc3339_rejects_non_ascii_digits():
    with pytest.raises(ValueError):
        parse_rfc3339("２０２３-01-01T12:00:00Z")
    with pytest.raises(ValueError):
        parse_rfc3339("2023-01-01T12:00:0٣Z")


def test_parse_rfc3339_leap_second_folds_onto_previous_second():
    dt = parse_rfc3339("2016-12-31T23:59:60Z")
    assert (dt.hour, dt.minute, dt.second, dt.microsecond) == (23, 59, 59, 999999)
    assert dt.utcoffset() == timedelta(0)
    assert parse_rfc3339("2016-12-31T23:59:60.5+00:00") == dt
