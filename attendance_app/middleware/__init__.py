"""
Middleware package
Request logging and error handlers
"""
from .errors import register_error_handlers
from .request_logging import register_request_logging

__all__ = ['register_error_handlers', 'register_request_logging']
