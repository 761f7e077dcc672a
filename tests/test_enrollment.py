import pytest

from core.attendance import DuplicateStudentId, InvalidImage, MissingInput, NoFaceDetected, StudentNotFound

from .conftest import to_data_url


def _drain(client_queue):
    messages = []
    while not client_queue.empty():
        messages.append(client_queue.get_nowait())
    return messages


def test_enroll_creates_one_student(enrollment, database, images, clock):
    student = enrollment.enroll('Alice', 'S001', to_data_url(images['alice']))

    assert student.name == 'Alice'
    assert student.face_descriptor == [0.0, 0.0, 0.0]
    assert student.enrolled_at == clock.now
    assert database.get_student(student.id).student_id == 'S001'
    assert database.get_attendance_by_student(student.id) == []


def test_enroll_strips_inputs(enrollment, images):
    student = enrollment.enroll('  Alice ', ' S001 ', to_data_url(images['alice']))

    assert student.name == 'Alice'
    assert student.student_id == 'S001'


@pytest.mark.parametrize('name,student_id,image,missing', [
    ('', 'S001', 'x', ['name']),
    ('Alice', '   ', 'x', ['student_id']),
    ('Alice', 'S001', '', ['image']),
    ('', '', None, ['name', 'student_id', 'image']),
])
def test_missing_input(enrollment, provider, name, student_id, image, missing):
    with pytest.raises(MissingInput) as exc_info:
        enrollment.enroll(name, student_id, image)

    assert exc_info.value.fields == missing
    assert provider.extract_calls == 0


def test_no_face_detected(enrollment, database, images):
    with pytest.raises(NoFaceDetected):
        enrollment.enroll('Alice', 'S001', to_data_url(images['no_face']))

    assert database.count_students() == 0


def test_invalid_image(enrollment, database, provider):
    with pytest.raises(InvalidImage):
        enrollment.enroll('Alice', 'S001', 'data:image/png;base64,bm90IGFuIGltYWdl')

    assert provider.extract_calls == 0
    assert database.count_students() == 0


def test_duplicate_student_id(enrollment, database, images):
    enrollment.enroll('Alice', 'S001', to_data_url(images['alice']))

    with pytest.raises(DuplicateStudentId) as exc_info:
        enrollment.enroll('Bob', 'S001', to_data_url(images['bob']))

    assert exc_info.value.http_status == 409
    assert [s.name for s in database.get_all_students()] == ['Alice']


def test_enroll_notifies(enrollment, broadcaster, images):
    client_queue = broadcaster.add_client()

    enrollment.enroll('Alice', 'S001', to_data_url(images['alice']))

    messages = _drain(client_queue)
    assert messages[0].startswith('event: notification')
    assert 'Alice has been successfully enrolled.' in messages[0]
    assert messages[1].startswith('event: student_enrolled')


def test_provider_initialized_once(enrollment, provider, images):
    enrollment.enroll('Alice', 'S001', to_data_url(images['alice']))
    enrollment.enroll('Bob', 'S002', to_data_url(images['bob']))

    assert provider.load_count == 1
    assert provider.is_ready


def test_delete_student(enrollment, images):
    student = enrollment.enroll('Alice', 'S001', to_data_url(images['alice']))

    deleted = enrollment.delete_student(student.id)

    assert deleted.id == student.id
    assert enrollment.list_students() == []
    with pytest.raises(StudentNotFound):
        enrollment.delete_student(student.id)
