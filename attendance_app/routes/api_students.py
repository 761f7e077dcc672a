"""
API routes for students
Enrollment, student management and manual attendance
"""
from flask import Blueprint, jsonify, request

from attendance_app.globals import get_services
from attendance_app.utils import get_image_field, get_request_data, get_text_field, parse_bool

student_api_bp = Blueprint('student_api', __name__, url_prefix='/api/students')


@student_api_bp.route('', methods=['POST'])
def enroll_student():
    """Enroll a student (name, student_id, captured image)."""
    data = get_request_data()
    student = get_services().enrollment_service.enroll(
        name=get_text_field(data, 'name'),
        student_id=get_text_field(data, 'student_id'),
        image_data=get_image_field(data),
    )
    return jsonify({
        'success': True,
        'message': f'{student.name} has been successfully enrolled.',
        'student': student.to_dict(),
    }), 201


@student_api_bp.route('', methods=['GET'])
def list_students():
    """List enrolled students."""
    include_photo = parse_bool(request.args.get('include_photo'), default=True)
    students = get_services().enrollment_service.list_students()
    return jsonify({
        'success': True,
        'data': [s.to_dict(include_photo=include_photo) for s in students],
    })


@student_api_bp.route('/<student_pk>', methods=['GET'])
def get_student(student_pk):
    include_descriptor = parse_bool(request.args.get('include_descriptor'), default=False)
    student = get_services().enrollment_service.get_student(student_pk)
    return jsonify({'success': True, 'student': student.to_dict(include_descriptor=include_descriptor)})


@student_api_bp.route('/<student_pk>', methods=['DELETE'])
def delete_student(student_pk):
    student = get_services().enrollment_service.delete_student(student_pk)
    return jsonify({
        'success': True,
        'message': f'{student.name} has been removed from the system.',
    })


@student_api_bp.route('/<student_pk>/attendance', methods=['GET'])
def student_attendance_history(student_pk):
    """Attendance history of one student, newest first."""
    records = get_services().attendance_tracker.get_student_history(student_pk)
    return jsonify({'success': True, 'data': [r.to_dict() for r in records]})


@student_api_bp.route('/<student_pk>/attendance', methods=['POST'])
def mark_manual_attendance(student_pk):
    """Mark a student present without face recognition."""
    result = get_services().attendance_tracker.mark_manual(student_pk)
    payload = result.to_dict()
    payload['message'] = f'{result.student.name} marked present.'
    return jsonify(payload), 201
