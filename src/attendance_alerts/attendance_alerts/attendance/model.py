from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark for a student.

    ``date`` keeps the value as received (ISO string or ``date``); only the
    alert helpers interpret it.
    """

    date: Union[str, date, None]
    status: AttendanceStatus
    student_id: Optional[int] = None
    subject_id: Optional[int] = None
    subject_name: Optional[str] = None
    notes: Optional[str] = None
