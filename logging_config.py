"""
Logging configuration for the attendance tracker
"""

import logging
import logging.handlers
from datetime import datetime
from pathlib import Path


def setup_logging(app, log_level='INFO', log_dir='logs', max_log_size=10*1024*1024, backup_count=5):
    """
    Configure logging for the Flask application

    Args:
        app: Flask app instance
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_dir: directory for the rotating log files
        max_log_size: maximum size of one log file (bytes)
        backup_count: number of rotated files to keep
    """

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    log_level = getattr(logging, str(log_level).upper(), logging.INFO)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.handlers.RotatingFileHandler(
        log_dir / 'attendance_system.log',
        maxBytes=max_log_size,
        backupCount=backup_count,
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    error_handler = logging.handlers.RotatingFileHandler(
        log_dir / 'errors.log',
        maxBytes=max_log_size,
        backupCount=backup_count,
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Drop handlers left from a previous app instance
    for handler in root_logger.handlers[:]:
        if getattr(handler, '_attendance_tracker', False):
            root_logger.removeHandler(handler)
            handler.close()

    for handler in (file_handler, console_handler, error_handler):
        handler._attendance_tracker = True
        root_logger.addHandler(handler)

    for name in ('face_recognition', 'database', 'api'):
        logging.getLogger(name).setLevel(log_level)

    app.logger.setLevel(log_level)

    app.logger.info("=" * 50)
    app.logger.info("ATTENDANCE TRACKER STARTUP")
    app.logger.info(f"Timestamp: {datetime.now().isoformat()}")
    app.logger.info(f"Log Level: {logging.getLevelName(log_level)}")
    app.logger.info(f"Log Directory: {log_dir.absolute()}")
    app.logger.info("=" * 50)


class FaceRecognitionLogger:
    """Logger for recognition and attendance events"""

    def __init__(self):
        self.logger = logging.getLogger('face_recognition')

    def log_face_detected(self, descriptor_length):
        self.logger.debug(f"Face detected - Descriptor length: {descriptor_length}")

    def log_face_recognized(self, name, confidence, student_id=None):
        student_info = f", Student ID: {student_id}" if student_id else ""
        self.logger.info(f"Face recognized - Name: {name}, Confidence: {confidence:.3f}{student_info}")

    def log_attendance_marked(self, name, student_id, method, confidence=None):
        confidence_info = f", Confidence: {confidence:.3f}" if confidence is not None else ""
        self.logger.info(
            f"Attendance marked - Name: {name}, Student ID: {student_id}, Method: {method}{confidence_info}"
        )

    def log_recognition_error(self, error_message):
        self.logger.warning(f"Recognition error - {error_message}")


class DatabaseLogger:
    """Logger for database operations"""

    def __init__(self):
        self.logger = logging.getLogger('database')

    def log_error(self, operation, error_message):
        self.logger.error(f"DB Error - Operation: {operation}, Error: {error_message}", exc_info=True)


class APILogger:
    """Logger for API calls"""

    def __init__(self):
        self.logger = logging.getLogger('api')

    def log_request(self, method, endpoint, ip_address=None):
        ip_info = f", IP: {ip_address}" if ip_address else ""
        self.logger.info(f"API Request - {method} {endpoint}{ip_info}")

    def log_response(self, endpoint, status_code, duration=None):
        duration_info = f", Duration: {duration:.3f}s" if duration else ""
        self.logger.info(f"API Response - {endpoint}, Status: {status_code}{duration_info}")

    def log_error(self, endpoint, error_message, status_code=500):
        self.logger.error(f"API Error - {endpoint}, Status: {status_code}, Error: {error_message}")


face_recognition_logger = FaceRecognitionLogger()
database_logger = DatabaseLogger()
api_logger = APILogger()


def get_client_ip(request):
    """Client IP address, honouring proxy headers"""
    if request.headers.get('X-Forwarded-For'):
        return request.headers.get('X-Forwarded-For').split(',')[0].strip()
    elif request.headers.get('X-Real-IP'):
        return request.headers.get('X-Real-IP')
    else:
        return request.remote_addr


def log_request_info(request):
    ip_address = get_client_ip(request)
    api_logger.log_request(request.method, request.path, ip_address=ip_address)
    return ip_address
