from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .adapter import records_from_rows
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.student_id, a.subject_id, s.subject_name, a.attendance_date AS date, a.status, a.remarks
                FROM attendance_records a
                LEFT JOIN subjects s ON s.subject_id = a.subject_id
                WHERE a.student_id=%s
                ORDER BY a.attendance_date DESC, a.attendance_id DESC
                """,
                (int(student_id),),
            )
            return records_from_rows(fetchall(cur))
