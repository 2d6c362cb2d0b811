from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository


def _to_student(r: Dict[str, Any]) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        student_number=str(r["student_number"]),
        first_name=str(r["first_name"]),
        last_name=str(r["last_name"]),
        email=r.get("email"),
        guardian_email=r.get("guardian_email"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, student_number, first_name, last_name, email, guardian_email
                FROM students
                WHERE student_id=%s
                """,
                (int(student_id),),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def list_active(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, student_number, first_name, last_name, email, guardian_email
                FROM students
                WHERE is_active=1
                ORDER BY last_name, first_name
                """
            )
            return [_to_student(r) for r in fetchall(cur)]
