"""
API routes for system status
"""
from flask import Blueprint, jsonify

from attendance_app.globals import get_services
from database import storage_guard

system_api_bp = Blueprint('system_api', __name__, url_prefix='/api')


@system_api_bp.route('/status')
def api_system_status():
    """Provider, store and SSE status"""
    services = get_services()
    with storage_guard('count students'):
        enrolled = services.database.count_students()
    return jsonify({
        'success': True,
        'face_recognition': services.face_recognition_manager.get_stats(),
        'enrolled_students': enrolled,
        'sse_clients': services.event_broadcaster.get_client_count(),
    })
