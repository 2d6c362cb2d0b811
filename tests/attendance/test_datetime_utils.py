from datetime import date, datetime

from src.attendance_alerts.attendance_alerts.common.datetime_utils import coerce_date, parse_iso_date


def test_parse_iso_date():
    assert parse_iso_date("2024-01-31") == date(2024, 1, 31)


def test_coerce_date_accepts_common_shapes():
    assert coerce_date(date(2024, 1, 2)) == date(2024, 1, 2)
    assert coerce_date(datetime(2024, 1, 2, 9, 30)) == date(2024, 1, 2)
    assert coerce_date("2024-01-02") == date(2024, 1, 2)
    assert coerce_date("2024-01-02T23:10:00Z") == date(2024, 1, 2)
    assert coerce_date("2024-01-02T23:10:00.123+07:00") == date(2024, 1, 2)


def test_coerce_date_never_raises():
    for value in (None, "", "   ", "yesterday", "2024-13-45", 12345, object()):
        assert coerce_date(value) is None
