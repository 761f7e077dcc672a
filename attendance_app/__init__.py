"""
App package initialization
Creates the Flask application and wires its services
"""
import os
import threading

from flask import Flask

from logging_config import setup_logging
from database import DatabaseManager
from core.recognition.provider import FaceRecognitionProvider
from attendance_app import config
from attendance_app.globals import EXTENSION_KEY, Services
from attendance_app.models import (
    AttendanceTracker,
    EnrollmentService,
    EventBroadcaster,
    FaceRecognitionManager,
)


def _build_provider(app):
    """Default embedding provider from the app config"""
    return FaceRecognitionProvider(
        detection_model=app.config['FACE_DETECTION_MODEL'],
        num_jitters=app.config['FACE_NUM_JITTERS'],
        upsample=app.config['FACE_UPSAMPLE'],
    )


def _init_services(app, embedding_provider=None):
    """Construct the services shared by all blueprints"""
    database = DatabaseManager(app.config['DATABASE_PATH'])
    app.logger.info(f"[STARTUP] Database path: {os.path.abspath(app.config['DATABASE_PATH'])}")

    provider = embedding_provider or _build_provider(app)
    face_manager = FaceRecognitionManager(
        provider=provider,
        match_threshold=app.config['FACE_MATCH_THRESHOLD'],
        logger=app.logger,
    )
    app.logger.info(
        f"[STARTUP] ✅ FaceRecognitionManager initialized "
        f"(provider={provider.name}, threshold={face_manager.match_threshold:.2f})"
    )

    broadcaster = EventBroadcaster(queue_size=app.config['SSE_QUEUE_SIZE'], logger=app.logger)
    app.logger.info("[STARTUP] ✅ EventBroadcaster initialized")

    # Enrollment and attendance never run concurrently
    workflow_lock = threading.Lock()
    image_limits = {
        'min_size': app.config['MIN_IMAGE_SIZE'],
        'max_size': app.config['MAX_IMAGE_SIZE'],
        'formats': app.config['SUPPORTED_IMAGE_FORMATS'],
    }
    clock = app.config.get('CLOCK')
    extra = {'clock': clock} if clock else {}

    enrollment_service = EnrollmentService(
        database=database,
        face_manager=face_manager,
        broadcaster=broadcaster,
        lock=workflow_lock,
        image_limits=image_limits,
        logger=app.logger,
        **extra
    )
    attendance_tracker = AttendanceTracker(
        database=database,
        face_manager=face_manager,
        broadcaster=broadcaster,
        lock=workflow_lock,
        image_limits=image_limits,
        logger=app.logger,
        **extra
    )
    app.logger.info("[STARTUP] ✅ EnrollmentService and AttendanceTracker initialized")

    return Services(
        database=database,
        face_recognition_manager=face_manager,
        enrollment_service=enrollment_service,
        attendance_tracker=attendance_tracker,
        event_broadcaster=broadcaster,
    )


def create_app(config_overrides=None, embedding_provider=None):
    """Factory function that creates the Flask application"""
    app = Flask(__name__)

    app.config.update(config.as_dict())
    if config_overrides:
        app.config.update(config_overrides)

    setup_logging(app, log_level=app.config['LOG_LEVEL'], log_dir=app.config['LOG_DIR'])
    app.logger.info(f"[STARTUP] Working directory: {os.getcwd()}")

    app.extensions[EXTENSION_KEY] = _init_services(app, embedding_provider)
    app.logger.info("[STARTUP] ✅ All services initialized successfully")

    from attendance_app.middleware import register_error_handlers, register_request_logging
    register_request_logging(app)
    register_error_handlers(app)

    from attendance_app.routes import register_blueprints
    register_blueprints(app)

    return app
