"""
API routes for attendance
Face scan and today's attendance
"""
from flask import Blueprint, jsonify

from attendance_app.globals import get_services
from attendance_app.utils import get_image_field, get_request_data

attendance_api_bp = Blueprint('attendance_api', __name__, url_prefix='/api/attendance')


@attendance_api_bp.route('/scan', methods=['POST'])
def scan_attendance():
    """Recognize the captured face and mark attendance."""
    data = get_request_data()
    result = get_services().attendance_tracker.scan(get_image_field(data))
    payload = result.to_dict()
    payload['message'] = (
        f'{result.student.name} - Present ({round(result.confidence * 100)}% confidence)'
    )
    return jsonify(payload), 201


@attendance_api_bp.route('/today', methods=['GET'])
def today_attendance():
    records = get_services().attendance_tracker.get_today_attendance()
    return jsonify({'success': True, 'data': [r.to_dict() for r in records]})


@attendance_api_bp.route('/summary', methods=['GET'])
def today_summary():
    """Present and absent students for today."""
    summary = get_services().attendance_tracker.get_today_summary()
    return jsonify({'success': True, **summary})
