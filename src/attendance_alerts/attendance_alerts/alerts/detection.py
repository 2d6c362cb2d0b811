"""Client-side alert metrics over an already-fetched list of records.

Records may be :class:`AttendanceRecord` instances or plain mappings with
``date`` and ``status`` keys; string statuses are matched case-insensitively.
Both functions are total: they never raise on odd input and never mutate it.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import coerce_date
from ..core.constants import (
    DEFAULT_CONSECUTIVE_ABSENCE_THRESHOLD,
    DEFAULT_LOW_ATTENDANCE_THRESHOLD,
    EMPTY_ATTENDANCE_RATE,
)
from ..core.enums import ATTENDED_STATUSES, AttendanceStatus
from .model import ConsecutiveAbsenceResult

_ATTENDED = frozenset(s.value for s in ATTENDED_STATUSES)


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def status_of(record: Any) -> Optional[str]:
    status = _field(record, "status")
    if isinstance(status, AttendanceStatus):
        return status.value
    if isinstance(status, str):
        return status.strip().lower()
    return status


def record_date(record: Any) -> Optional[date]:
    return coerce_date(_field(record, "date"))


def date_key(record: Any) -> date:
    # unparsable or missing dates count as the earliest possible day
    return record_date(record) or date.min


def display_date(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def newest_first(records: Iterable[Any]) -> list:
    return sorted(records, key=date_key, reverse=True)


def trailing_absences(records: Iterable[Any]) -> list:
    """Absent records ending at the most recent record, newest first."""
    run = []
    for record in newest_first(records):
        if status_of(record) != AttendanceStatus.ABSENT.value:
            break
        run.append(record)
    return run


def detect_consecutive_absences(
    records: Iterable[Any],
    threshold: int = DEFAULT_CONSECUTIVE_ABSENCE_THRESHOLD,
) -> ConsecutiveAbsenceResult:
    """Count the unbroken run of absences ending at the latest record.

    Only an explicit present/late/excused record breaks the run; days with
    no record at all are simply not in the list. The date span is reported
    only when the run reaches ``threshold``.
    """
    run = trailing_absences(records)
    count = len(run)
    if count == 0 or count < threshold:
        return ConsecutiveAbsenceResult(count=count)

    return ConsecutiveAbsenceResult(
        count=count,
        start_date=display_date(_field(run[-1], "date")),
        end_date=display_date(_field(run[0], "date")),
    )


def calculate_attendance_rate(records: Sequence[Any]) -> int:
    """Percentage of present/late/excused records, rounded half up.

    An empty list counts as perfect attendance.
    """
    records = list(records)
    if not records:
        return EMPTY_ATTENDANCE_RATE

    attended = sum(1 for r in records if status_of(r) in _ATTENDED)
    ratio = Decimal(attended * 100) / Decimal(len(records))
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def is_low_attendance(rate: int, threshold: int = DEFAULT_LOW_ATTENDANCE_THRESHOLD) -> bool:
    return rate < threshold


def last_attended_date(records: Iterable[Any]) -> Optional[str]:
    for record in newest_first(records):
        if status_of(record) in _ATTENDED:
            return display_date(_field(record, "date"))
    return None
