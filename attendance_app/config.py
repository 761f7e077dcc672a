"""
Configuration constants and settings
Values come from the environment (.env is loaded by run.py)
"""
import os

# Flask
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB

# Storage
DATABASE_PATH = os.getenv('DATABASE_PATH', os.path.join('data', 'attendance_tracker.db'))

# Logging
LOG_DIR = os.getenv('LOG_DIR', 'logs')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

# Captured images
SUPPORTED_IMAGE_FORMATS = {'JPEG', 'PNG', 'WEBP'}
MIN_IMAGE_SIZE = int(os.getenv('MIN_IMAGE_SIZE', '1024'))  # 1 KB
MAX_IMAGE_SIZE = int(os.getenv('MAX_IMAGE_SIZE', str(10 * 1024 * 1024)))  # 10 MB

# Face recognition: one threshold for every match call site
FACE_MATCH_THRESHOLD = float(os.getenv('FACE_MATCH_THRESHOLD', '0.5'))
FACE_DETECTION_MODEL = os.getenv('FACE_DETECTION_MODEL', 'hog')  # 'hog' or 'cnn'
FACE_NUM_JITTERS = max(1, int(os.getenv('FACE_NUM_JITTERS', '1')))
FACE_UPSAMPLE = max(0, int(os.getenv('FACE_UPSAMPLE', '1')))

# Server-Sent Events
SSE_QUEUE_SIZE = int(os.getenv('SSE_QUEUE_SIZE', '50'))
SSE_HEARTBEAT_SECONDS = int(os.getenv('SSE_HEARTBEAT_SECONDS', '30'))


def as_dict():
    """Upper-case settings of this module, ready for app.config.update()."""
    return {key: value for key, value in globals().items() if key.isupper()}
