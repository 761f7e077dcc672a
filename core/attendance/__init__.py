"""
Attendance domain: records and workflow errors.
"""

from .errors import (
    AlreadyMarked,
    AttendanceError,
    DuplicateStudentId,
    InvalidImage,
    MissingInput,
    NoFaceDetected,
    NoStudentsEnrolled,
    NotRecognized,
    StorageFailure,
    StudentNotFound,
)
from .records import (
    ATTENDANCE_METHODS,
    METHOD_FACE_RECOGNITION,
    METHOD_MANUAL,
    AttendanceRecord,
    AttendanceResult,
    Student,
)

__all__ = [
    'AlreadyMarked',
    'AttendanceError',
    'DuplicateStudentId',
    'InvalidImage',
    'MissingInput',
    'NoFaceDetected',
    'NoStudentsEnrolled',
    'NotRecognized',
    'StorageFailure',
    'StudentNotFound',
    'ATTENDANCE_METHODS',
    'METHOD_FACE_RECOGNITION',
    'METHOD_MANUAL',
    'AttendanceRecord',
    'AttendanceResult',
    'Student',
]
