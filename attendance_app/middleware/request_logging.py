"""
Request logging middleware
Logs every API request and its response time
"""
import time

from flask import g, request

from logging_config import api_logger, log_request_info


def log_request_start():
    g.request_started = time.perf_counter()
    log_request_info(request)


def log_request_end(response):
    started = g.pop('request_started', None)
    duration = time.perf_counter() - started if started is not None else None
    api_logger.log_response(request.path, response.status_code, duration=duration)
    return response


def register_request_logging(app):
    """Register request logging hooks with the Flask app."""
    app.before_request(log_request_start)
    app.after_request(log_request_end)
