"""
Models Package - Business logic models
Services used by the Flask routes
"""

from .attendance_tracker import AttendanceTracker
from .enrollment_service import EnrollmentService
from .event_broadcaster import EventBroadcaster
from .face_recognition_manager import FaceRecognitionManager

__all__ = [
    'AttendanceTracker',
    'EnrollmentService',
    'EventBroadcaster',
    'FaceRecognitionManager',
]
