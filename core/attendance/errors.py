"""Workflow errors surfaced to the operator as notifications.

Every error carries a stable ``code``, a short ``title`` and ``message`` for
the notification, the HTTP status used by the API layer, and optional
structured ``details``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AttendanceError(Exception):
    """Base class for recoverable enrollment/attendance failures."""

    code = 'attendance_error'
    title = 'Request Failed'
    http_status = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'success': False,
            'error': self.code,
            'title': self.title,
            'message': self.message,
        }
        payload.update(self.details)
        return payload


class MissingInput(AttendanceError):
    code = 'missing_input'
    title = 'Missing Information'

    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(
            f"Please provide: {', '.join(self.fields)}.",
            {'fields': self.fields},
        )


class InvalidImage(AttendanceError):
    code = 'invalid_image'
    title = 'Invalid Image'


class NoFaceDetected(AttendanceError):
    code = 'no_face_detected'
    title = 'No Face Detected'
    http_status = 422

    def __init__(self, message: str = 'No face detected in the image. Please try again.'):
        super().__init__(message)


class DuplicateStudentId(AttendanceError):
    code = 'duplicate_student_id'
    title = 'Student ID Exists'
    http_status = 409

    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(
            f"A student with ID {student_id} is already enrolled.",
            {'student_id': student_id},
        )


class NoStudentsEnrolled(AttendanceError):
    code = 'no_students_enrolled'
    title = 'No Students Enrolled'
    http_status = 409

    def __init__(self):
        super().__init__('Please enroll students before scanning for attendance.')


class NotRecognized(AttendanceError):
    code = 'not_recognized'
    title = 'Student Not Recognized'
    http_status = 404

    def __init__(self):
        super().__init__('Face not recognized. Please use manual attendance or re-enroll.')


class StudentNotFound(AttendanceError):
    code = 'student_not_found'
    title = 'Student Not Found'
    http_status = 404

    def __init__(self, student_pk: str):
        super().__init__(f"No student with id {student_pk}.", {'id': student_pk})


class AlreadyMarked(AttendanceError):
    """Raised instead of writing a second record for the same student and day."""

    code = 'already_marked'
    title = 'Already Present'
    http_status = 409

    def __init__(self, student, timestamp, confidence=None):
        self.student = student
        self.timestamp = timestamp
        self.confidence = confidence
        details = {
            'student': student.to_dict(include_photo=False),
            'timestamp': timestamp.isoformat(),
        }
        if confidence is not None:
            details['confidence'] = confidence
        super().__init__(f"{student.name} has already marked attendance today.", details)


class StorageFailure(AttendanceError):
    code = 'storage_failure'
    title = 'Storage Error'
    http_status = 500

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"Could not {operation}. No changes were saved, please try again.",
            {'operation': operation},
        )
