"""
Routes package
Registers all blueprints
"""
from .api_students import student_api_bp
from .api_attendance import attendance_api_bp
from .api_events import events_api_bp
from .api_system import system_api_bp


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    app.register_blueprint(student_api_bp)
    app.register_blueprint(attendance_api_bp)
    app.register_blueprint(events_api_bp)
    app.register_blueprint(system_api_bp)

    app.logger.info("✅ Registered all blueprints")
