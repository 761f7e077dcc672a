"""
Error handlers
Every failure becomes a JSON body and an operator notification
"""
from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from attendance_app.globals import get_services
from core.attendance import AttendanceError
from logging_config import api_logger


def _notify(title, description):
    get_services().event_broadcaster.broadcast_notification(title, description, 'destructive')


def handle_attendance_error(error: AttendanceError):
    """Expected enrollment/attendance failure."""
    api_logger.log_error(request.path, f"{error.code}: {error.message}", status_code=error.http_status)
    _notify(error.title, error.message)
    return jsonify(error.to_dict()), error.http_status


def handle_http_exception(error: HTTPException):
    api_logger.log_error(request.path, error.description, status_code=error.code)
    return jsonify({
        'success': False,
        'error': error.name.lower().replace(' ', '_'),
        'message': error.description,
    }), error.code


def handle_unexpected_error(error: Exception):
    """Unhandled exception: log with traceback and report a generic failure."""
    api_logger.logger.exception(f"Unhandled error on {request.method} {request.path}: {error}")
    _notify('Error', 'An unexpected error occurred. Please try again.')
    return jsonify({
        'success': False,
        'error': 'internal_error',
        'message': 'An unexpected error occurred. Please try again.',
    }), 500


def register_error_handlers(app):
    """Register error handlers with the Flask app."""
    app.register_error_handler(AttendanceError, handle_attendance_error)
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_error_handler(Exception, handle_unexpected_error)
