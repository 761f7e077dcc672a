"""
Enrollment Service
Registers students with a face descriptor and manages the enrolled set
"""
import logging
import threading
import uuid
from datetime import datetime
from typing import List

from core.attendance.errors import DuplicateStudentId, MissingInput, StudentNotFound
from core.attendance.records import Student
from database import storage_guard
from attendance_app.utils.file_utils import load_captured_image


class EnrollmentService:
    """Enrollment workflow and operator student management"""

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

    def enroll(self, name: str, student_id: str, image_data) -> Student:
        """
        Enroll a new student from a captured photo.

        Order of checks: required inputs, face in the photo, unique student ID.
        The student row is the only write and happens last.
        """
        name = (name or '').strip()
        student_id = (student_id or '').strip()
        missing = [
            field for field, value in (('name', name), ('student_id', student_id), ('image', image_data))
            if not value
        ]
        if missing:
            raise MissingInput(missing)

        with self._lock:
            image = load_captured_image(image_data, **self.image_limits)
            descriptor = self.face_manager.extract_descriptor(image)

            with storage_guard('check existing student IDs'):
                existing = self.db.get_student_by_student_id(student_id)
            if existing:
                raise DuplicateStudentId(student_id)

            student = Student(
                id=str(uuid.uuid4()),
                student_id=student_id,
                name=name,
                face_descriptor=descriptor,
                photo=image_data if isinstance(image_data, str) else '',
                enrolled_at=self._clock(),
            )
            with storage_guard('enroll the student'):
                created = self.db.add_student(student)
            if not created:
                # Lost a race with another enrollment of the same ID
                raise DuplicateStudentId(student_id)

        self.logger.info(f"[Enrollment] ✅ Enrolled {student.name} ({student.student_id})")
        if self.broadcaster:
            self.broadcaster.broadcast_notification(
                'Student Enrolled', f"{student.name} has been successfully enrolled."
            )
            self.broadcaster.broadcast_student_event('student_enrolled', student.to_dict(include_photo=False))
        return student

    def list_students(self) -> List[Student]:
        with storage_guard('load students'):
            return self.db.get_all_students()

    def get_student(self, student_pk: str) -> Student:
        with storage_guard('load the student'):
            student = self.db.get_student(student_pk)
        if student is None:
            raise StudentNotFound(student_pk)
        return student

    def delete_student(self, student_pk: str) -> Student:
        """Remove a student; their attendance records stay in the store."""
        with self._lock:
            student = self.get_student(student_pk)
            with storage_guard('delete the student'):
                deleted = self.db.delete_student(student_pk)
            if not deleted:
                raise StudentNotFound(student_pk)

        self.logger.info(f"[Enrollment] Deleted {student.name} ({student.student_id})")
        if self.broadcaster:
            self.broadcaster.broadcast_notification(
                'Student Deleted', f"{student.name} has been removed from the system."
            )
            self.broadcaster.broadcast_student_event('student_deleted', student.to_dict(include_photo=False))
        return student
