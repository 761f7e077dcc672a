"""
Database module for Attendance Tracker
SQLite record store for enrolled students and attendance events
"""

import json
import sqlite3
import logging
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Tuple

from core.attendance.errors import StorageFailure
from core.attendance.records import AttendanceRecord, Student
from logging_config import database_logger

logger = logging.getLogger(__name__)


@contextmanager
def storage_guard(operation):
    """Turn any sqlite3 error raised inside the block into StorageFailure."""
    try:
        yield
    except sqlite3.Error as exc:
        database_logger.log_error(operation, exc)
        raise StorageFailure(operation) from exc


class DatabaseManager:
    def __init__(self, db_path="attendance_tracker.db", timeout=10.0):
        self.db_path = str(db_path)
        self.timeout = timeout
        if self.db_path != ':memory:':
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.init_database()

    @contextmanager
    def get_connection(self):
        """Open a connection, commit on success, roll back on error, always close."""
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row  # access columns by name
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_database(self):
        """Create tables and indexes"""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS students (
                    id TEXT PRIMARY KEY,
                    student_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    face_descriptor TEXT NOT NULL,
                    photo TEXT,
                    enrolled_at TIMESTAMP NOT NULL,
                    last_attendance TIMESTAMP
                )
            ''')
            cursor.execute('''
                CREATE UNIQUE INDEX IF NOT EXISTS idx_students_student_id
                ON students (student_id)
            ''')

            # student_id references students.id but records outlive the student
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS attendance (
                    id TEXT PRIMARY KEY,
                    student_id TEXT NOT NULL,
                    timestamp TIMESTAMP NOT NULL,
                    attendance_date DATE NOT NULL,
                    method TEXT NOT NULL CHECK (method IN ('face-recognition', 'manual')),
                    confidence REAL
                )
            ''')
            cursor.execute('''
                CREATE INDEX IF NOT EXISTS idx_attendance_student
                ON attendance (student_id)
            ''')
            cursor.execute('''
                CREATE INDEX IF NOT EXISTS idx_attendance_date
                ON attendance (attendance_date)
            ''')

        logger.info("Database ready at %s", self.db_path)

    # === STUDENTS ===
    def add_student(self, student: Student) -> bool:
        """Insert a new student. Returns False if the student ID is taken."""
        with self.get_connection() as conn:
            try:
                conn.execute('''
                    INSERT INTO students (id, student_id, name, face_descriptor, photo,
                                          enrolled_at, last_attendance)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                ''', self._student_params(student))
            except sqlite3.IntegrityError as e:
                logger.error(f"Student ID {student.student_id} already exists: {e}")
                return False
        logger.info(f"Added student: {student.name} ({student.student_id})")
        return True

    def get_student(self, student_pk: str) -> Optional[Student]:
        with self.get_connection() as conn:
            row = conn.execute('SELECT * FROM students WHERE id = ?', (student_pk,)).fetchone()
        return Student.from_row(row) if row else None

    def get_student_by_student_id(self, student_id: str) -> Optional[Student]:
        """Lookup by the human-readable student ID"""
        with self.get_connection() as conn:
            row = conn.execute(
                'SELECT * FROM students WHERE student_id = ?', (student_id,)
            ).fetchone()
        return Student.from_row(row) if row else None

    def get_all_students(self) -> List[Student]:
        with self.get_connection() as conn:
            rows = conn.execute('SELECT * FROM students ORDER BY name, student_id').fetchall()
        return [Student.from_row(row) for row in rows]

    def count_students(self) -> int:
        with self.get_connection() as conn:
            return conn.execute('SELECT COUNT(*) FROM students').fetchone()[0]

    def update_student(self, student: Student) -> bool:
        with self.get_connection() as conn:
            cursor = conn.execute('''
                UPDATE students
                SET student_id = ?, name = ?, face_descriptor = ?, photo = ?,
                    enrolled_at = ?, last_attendance = ?
                WHERE id = ?
            ''', self._student_params(student)[1:] + (student.id,))
            return cursor.rowcount > 0

    def delete_student(self, student_pk: str) -> bool:
        """Remove a student; attendance history is kept."""
        with self.get_connection() as conn:
            cursor = conn.execute('DELETE FROM students WHERE id = ?', (student_pk,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info(f"Deleted student {student_pk}")
        return deleted

    # === ATTENDANCE ===
    def add_attendance_record(self, record: AttendanceRecord):
        with self.get_connection() as conn:
            conn.execute('''
                INSERT INTO attendance (id, student_id, timestamp, attendance_date, method, confidence)
                VALUES (?, ?, ?, ?, ?, ?)
            ''', self._record_params(record))
        logger.info(f"Recorded attendance {record.method} for student {record.student_id}")

    def add_attendance_record_once(self, record: AttendanceRecord,
                                   touch_student=True) -> Tuple[bool, AttendanceRecord]:
        """
        Insert the record unless the student already has one on the same day.

        The lookup, the insert and the student's last_attendance update run in
        one write transaction, so two callers cannot both pass the check and a
        failure leaves nothing half-written.

        Returns:
            (created, record) where record is the existing one when created is False
        """
        with self.get_connection() as conn:
            conn.execute('BEGIN IMMEDIATE')
            row = conn.execute('''
                SELECT * FROM attendance
                WHERE student_id = ? AND attendance_date = ?
                ORDER BY timestamp ASC
                LIMIT 1
            ''', (record.student_id, record.attendance_date)).fetchone()
            if row:
                return False, AttendanceRecord.from_row(row)

            conn.execute('''
                INSERT INTO attendance (id, student_id, timestamp, attendance_date, method, confidence)
                VALUES (?, ?, ?, ?, ?, ?)
            ''', self._record_params(record))
            if touch_student:
                conn.execute(
                    'UPDATE students SET last_attendance = ? WHERE id = ?',
                    (record.timestamp.isoformat(), record.student_id),
                )
        logger.info(f"Recorded attendance {record.method} for student {record.student_id}")
        return True, record

    def get_attendance_by_student(self, student_pk: str) -> List[AttendanceRecord]:
        """Attendance history of one student, newest first"""
        with self.get_connection() as conn:
            rows = conn.execute('''
                SELECT * FROM attendance
                WHERE student_id = ?
                ORDER BY timestamp DESC
            ''', (student_pk,)).fetchall()
        return [AttendanceRecord.from_row(row) for row in rows]

    def get_attendance_for_day(self, day: date) -> List[AttendanceRecord]:
        with self.get_connection() as conn:
            rows = conn.execute('''
                SELECT * FROM attendance
                WHERE attendance_date = ?
                ORDER BY timestamp ASC
            ''', (day.isoformat(),)).fetchall()
        return [AttendanceRecord.from_row(row) for row in rows]

    def get_today_attendance(self, today: Optional[date] = None) -> List[AttendanceRecord]:
        """Records from local midnight to the next midnight"""
        return self.get_attendance_for_day(today or date.today())

    def close(self):
        # Connections are per-call; nothing is held open between operations.
        logger.debug("Database %s closed", self.db_path)

    @staticmethod
    def _student_params(student: Student):
        return (
            student.id,
            student.student_id,
            student.name,
            json.dumps(list(student.face_descriptor)),
            student.photo,
            student.enrolled_at.isoformat() if student.enrolled_at else datetime.now().isoformat(),
            student.last_attendance.isoformat() if student.last_attendance else None,
        )

    @staticmethod
    def _record_params(record: AttendanceRecord):
        return (
            record.id,
            record.student_id,
            record.timestamp.isoformat(),
            record.attendance_date,
            record.method,
            record.confidence,
        )
