"""
Service registry
The services of one Flask app instance, stored in app.extensions
"""
from dataclasses import dataclass

from flask import current_app

EXTENSION_KEY = 'attendance_tracker'


@dataclass
class Services:
    database: object
    face_recognition_manager: object
    enrollment_service: object
    attendance_tracker: object
    event_broadcaster: object

    def close(self):
        """Release provider and store"""
        self.event_broadcaster.cleanup()
        self.face_recognition_manager.close()
        self.database.close()


def get_services(app=None) -> Services:
    app = app or current_app
    return app.extensions[EXTENSION_KEY]
