import sqlite3
from datetime import date, datetime

import pytest

from core.attendance import METHOD_FACE_RECOGNITION, METHOD_MANUAL, AttendanceRecord, StorageFailure, Student
from database import storage_guard


def _student(pk, student_id, name, descriptor=(0.0, 0.0)):
    return Student(
        id=pk,
        student_id=student_id,
        name=name,
        face_descriptor=list(descriptor),
        photo='data:image/png;base64,AAAA',
        enrolled_at=datetime(2024, 3, 1, 8, 0),
    )


def _record(pk, student_pk, when, method=METHOD_MANUAL, confidence=None):
    return AttendanceRecord(id=pk, student_id=student_pk, timestamp=when, method=method, confidence=confidence)


def test_student_round_trip(database):
    assert database.add_student(_student('p1', 'S001', 'Alice', (0.1, 0.2)))

    loaded = database.get_student('p1')

    assert loaded.student_id == 'S001'
    assert loaded.face_descriptor == [0.1, 0.2]
    assert loaded.enrolled_at == datetime(2024, 3, 1, 8, 0)
    assert loaded.last_attendance is None
    assert database.get_student_by_student_id('S001').id == 'p1'


def test_duplicate_student_id_rejected(database):
    assert database.add_student(_student('p1', 'S001', 'Alice'))
    assert not database.add_student(_student('p2', 'S001', 'Someone Else'))
    assert database.count_students() == 1


def test_students_ordered_by_name(database):
    database.add_student(_student('p1', 'S002', 'Carol'))
    database.add_student(_student('p2', 'S001', 'Alice'))
    database.add_student(_student('p3', 'S003', 'Bob'))

    assert [s.name for s in database.get_all_students()] == ['Alice', 'Bob', 'Carol']


def test_update_student(database):
    student = _student('p1', 'S001', 'Alice')
    database.add_student(student)

    assert database.update_student(student.with_last_attendance(datetime(2024, 3, 4, 9, 0)))
    assert database.get_student('p1').last_attendance == datetime(2024, 3, 4, 9, 0)
    assert not database.update_student(_student('missing', 'S999', 'Nobody'))


def test_today_attendance_is_local_calendar_day(database):
    database.add_attendance_record(_record('r1', 'p1', datetime(2024, 3, 3, 23, 59)))
    database.add_attendance_record(_record('r2', 'p1', datetime(2024, 3, 4, 0, 0)))
    database.add_attendance_record(_record('r3', 'p2', datetime(2024, 3, 4, 23, 59, 59)))
    database.add_attendance_record(_record('r4', 'p2', datetime(2024, 3, 5, 0, 0)))

    today = database.get_today_attendance(date(2024, 3, 4))

    assert [r.id for r in today] == ['r2', 'r3']


def test_add_record_once_per_day(database):
    database.add_student(_student('p1', 'S001', 'Alice'))
    first = _record('r1', 'p1', datetime(2024, 3, 4, 9, 0), METHOD_FACE_RECOGNITION, 0.8)
    second = _record('r2', 'p1', datetime(2024, 3, 4, 15, 0))

    created, stored = database.add_attendance_record_once(first)
    assert created
    assert database.get_student('p1').last_attendance == datetime(2024, 3, 4, 9, 0)

    created, stored = database.add_attendance_record_once(second)
    assert not created
    assert stored.id == 'r1'
    assert stored.confidence == pytest.approx(0.8)
    assert len(database.get_attendance_by_student('p1')) == 1

    created, _ = database.add_attendance_record_once(_record('r3', 'p1', datetime(2024, 3, 5, 9, 0)))
    assert created


def test_history_newest_first(database):
    database.add_attendance_record(_record('r1', 'p1', datetime(2024, 3, 1, 9, 0)))
    database.add_attendance_record(_record('r2', 'p1', datetime(2024, 3, 3, 9, 0)))
    database.add_attendance_record(_record('r3', 'p1', datetime(2024, 3, 2, 9, 0)))

    assert [r.id for r in database.get_attendance_by_student('p1')] == ['r2', 'r3', 'r1']


def test_delete_student_keeps_history(database):
    database.add_student(_student('p1', 'S001', 'Alice'))
    database.add_attendance_record(_record('r1', 'p1', datetime(2024, 3, 4, 9, 0)))

    assert database.delete_student('p1')
    assert database.get_student('p1') is None
    assert not database.delete_student('p1')
    assert [r.id for r in database.get_attendance_by_student('p1')] == ['r1']


def test_manual_record_rejects_confidence():
    with pytest.raises(ValueError):
        _record('r1', 'p1', datetime(2024, 3, 4, 9, 0), METHOD_MANUAL, 0.9)


def test_storage_guard_wraps_sqlite_errors():
    with pytest.raises(StorageFailure) as exc_info:
        with storage_guard('load students'):
            raise sqlite3.OperationalError('database is locked')

    assert exc_info.value.http_status == 500
    assert exc_info.value.operation == 'load students'
