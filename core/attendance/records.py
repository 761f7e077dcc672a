"""
Attendance domain records
Student and AttendanceRecord as stored by the record store
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

METHOD_FACE_RECOGNITION = 'face-recognition'
METHOD_MANUAL = 'manual'
ATTENDANCE_METHODS = (METHOD_FACE_RECOGNITION, METHOD_MANUAL)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class Student:
    id: str
    student_id: str
    name: str
    face_descriptor: List[float] = field(repr=False)
    photo: str = field(default='', repr=False)
    enrolled_at: Optional[datetime] = None
    last_attendance: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'Student':
        descriptor = row['face_descriptor']
        if isinstance(descriptor, (str, bytes)):
            descriptor = json.loads(descriptor)
        return cls(
            id=row['id'],
            student_id=row['student_id'],
            name=row['name'],
            face_descriptor=[float(v) for v in descriptor],
            photo=row['photo'] or '',
            enrolled_at=_parse_timestamp(row['enrolled_at']),
            last_attendance=_parse_timestamp(row['last_attendance']),
        )

    def with_last_attendance(self, when: datetime) -> 'Student':
        return replace(self, last_attendance=when)

    def to_dict(self, include_descriptor: bool = False, include_photo: bool = True) -> Dict[str, Any]:
        payload = {
            'id': self.id,
            'student_id': self.student_id,
            'name': self.name,
            'enrolled_at': _format_timestamp(self.enrolled_at),
            'last_attendance': _format_timestamp(self.last_attendance),
        }
        if include_photo:
            payload['photo'] = self.photo
        if include_descriptor:
            payload['face_descriptor'] = list(self.face_descriptor)
        return payload


@dataclass(frozen=True)
class AttendanceRecord:
    id: str
    student_id: str
    timestamp: datetime
    method: str = METHOD_FACE_RECOGNITION
    confidence: Optional[float] = None

    def __post_init__(self):
        if self.method not in ATTENDANCE_METHODS:
            raise ValueError(f"Unknown attendance method: {self.method}")
        if self.method == METHOD_MANUAL and self.confidence is not None:
            raise ValueError("Manual attendance records carry no confidence")

    @property
    def attendance_date(self) -> str:
        """Local calendar day of the record (YYYY-MM-DD)."""
        return self.timestamp.date().isoformat()

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'AttendanceRecord':
        confidence = row['confidence']
        return cls(
            id=row['id'],
            student_id=row['student_id'],
            timestamp=_parse_timestamp(row['timestamp']),
            method=row['method'],
            confidence=float(confidence) if confidence is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'id': self.id,
            'student_id': self.student_id,
            'timestamp': _format_timestamp(self.timestamp),
            'date': self.attendance_date,
            'method': self.method,
        }
        if self.confidence is not None:
            payload['confidence'] = self.confidence
        return payload


@dataclass(frozen=True)
class AttendanceResult:
    """Outcome of a successful scan or manual mark."""

    student: Student
    record: AttendanceRecord
    confidence: Optional[float] = None

    @property
    def timestamp(self) -> datetime:
        return self.record.timestamp

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'success': True,
            'student': self.student.to_dict(),
            'record': self.record.to_dict(),
            'timestamp': _format_timestamp(self.timestamp),
        }
        if self.confidence is not None:
            payload['confidence'] = self.confidence
        return payload
