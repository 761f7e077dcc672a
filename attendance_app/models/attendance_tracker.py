"""
Attendance Tracker
Business logic for recognition scans, manual marks and today's attendance
"""
import logging
import threading
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.attendance.errors import AlreadyMarked, MissingInput, NoStudentsEnrolled, NotRecognized, StudentNotFound
from core.attendance.records import (
    METHOD_FACE_RECOGNITION,
    METHOD_MANUAL,
    AttendanceRecord,
    AttendanceResult,
    Student,
)
from database import storage_guard
from logging_config import face_recognition_logger
from attendance_app.utils.file_utils import load_captured_image


class AttendanceTracker:
    """Service running the attendance workflows"""

    def __init__(
        self,
        database,
        face_manager,
        broadcaster=None,
        lock=None,
        clock=datetime.now,
        image_limits=None,
        logger=None
    ):
        self.db = database
        self.face_manager = face_manager
        self.broadcaster = broadcaster
        self._lock = lock or threading.Lock()
        self._clock = clock
        self.image_limits = image_limits or {}
        self.logger = logger or logging.getLogger(__name__)

    def scan(self, image_data) -> AttendanceResult:
        """
        Recognize the face in a captured photo and mark the student present.

        Raises:
            NoStudentsEnrolled: nobody enrolled (no extraction attempted)
            NoFaceDetected / NotRecognized: nothing written
            AlreadyMarked: the student has a record today; carries its timestamp
        """
        with self._lock:
            with storage_guard('load enrolled students'):
                students = self.db.get_all_students()
            if not students:
                raise NoStudentsEnrolled()
            if not image_data:
                raise MissingInput(['image'])

            image = load_captured_image(image_data, **self.image_limits)
            descriptor = self.face_manager.extract_descriptor(image)

            match = self.face_manager.find_match(descriptor, students)
            if match is None:
                raise NotRecognized()

            student = next(s for s in students if s.id == match.id)
            face_recognition_logger.log_face_recognized(student.name, match.confidence, student.student_id)

            result = self._record(student, METHOD_FACE_RECOGNITION, match.confidence)

        self.logger.info(
            f"[Attendance] ✅ {student.name} ({student.student_id}) recognized, "
            f"confidence {match.confidence:.2f}"
        )
        self._announce(
            result,
            'Attendance Marked',
            f"{student.name} - Present ({round(match.confidence * 100)}% confidence)",
        )
        return result

    def mark_manual(self, student_pk: str) -> AttendanceResult:
        """Mark a student present without recognition"""
        with self._lock:
            with storage_guard('load the student'):
                student = self.db.get_student(student_pk)
            if student is None:
                raise StudentNotFound(student_pk)

            result = self._record(student, METHOD_MANUAL, None)

        self.logger.info(f"[Attendance] ✅ {student.name} ({student.student_id}) marked present manually")
        self._announce(result, 'Manual Attendance', f"{student.name} marked present manually.")
        return result

    def _record(self, student: Student, method: str, confidence: Optional[float]) -> AttendanceResult:
        """Same-day duplicate check, then the single write of the workflow"""
        now = self._clock()

        existing = self._find_today_record(student.id, now)
        if existing:
            raise AlreadyMarked(student, existing.timestamp, confidence)

        record = AttendanceRecord(
            id=str(uuid.uuid4()),
            student_id=student.id,
            timestamp=now,
            method=method,
            confidence=confidence,
        )
        with storage_guard('record attendance'):
            created, stored = self.db.add_attendance_record_once(record)
        if not created:
            raise AlreadyMarked(student, stored.timestamp, confidence)

        face_recognition_logger.log_attendance_marked(student.name, student.student_id, method, confidence)
        return AttendanceResult(
            student=student.with_last_attendance(now),
            record=record,
            confidence=confidence,
        )

    def _find_today_record(self, student_pk: str, now: datetime) -> Optional[AttendanceRecord]:
        with storage_guard("load today's attendance"):
            today_records = self.db.get_today_attendance(now.date())
        return next((r for r in today_records if r.student_id == student_pk), None)

    def _announce(self, result: AttendanceResult, title: str, description: str):
        if not self.broadcaster:
            return
        self.broadcaster.broadcast_notification(title, description)
        self.broadcaster.broadcast_attendance_update(
            result.student.to_dict(include_photo=False),
            result.record.to_dict(),
            result.confidence,
        )

    def get_today_attendance(self) -> List[AttendanceRecord]:
        with storage_guard("load today's attendance"):
            return self.db.get_today_attendance(self._clock().date())

    def get_today_summary(self) -> Dict[str, Any]:
        """Enrolled students split into present (with their record) and absent"""
        with storage_guard('load the attendance summary'):
            students = self.db.get_all_students()
            records = self.db.get_today_attendance(self._clock().date())

        by_student = {}
        for record in records:
            by_student.setdefault(record.student_id, record)

        present = []
        absent = []
        for student in students:
            record = by_student.get(student.id)
            if record:
                present.append({'student': student.to_dict(), 'record': record.to_dict()})
            else:
                absent.append(student.to_dict())

        return {
            'date': self._clock().date().isoformat(),
            'total': len(students),
            'present_count': len(present),
            'absent_count': len(absent),
            'present': present,
            'absent': absent,
        }

    def get_student_history(self, student_pk: str) -> List[AttendanceRecord]:
        with storage_guard('load attendance history'):
            if self.db.get_student(student_pk) is None:
                raise StudentNotFound(student_pk)
            return self.db.get_attendance_by_student(student_pk)
