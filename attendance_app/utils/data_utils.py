"""
Data utilities
Helper functions for request parsing
"""
from flask import request

from .file_utils import file_storage_to_data_url


def get_request_data():
    """Request data from JSON or form."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def get_text_field(data, key):
    """Stripped string value of a request field ('' when absent)."""
    value = data.get(key)
    if value is None:
        return ''
    return str(value).strip()


def get_image_field(data, key='image'):
    """Captured image from a base64 field, or from an uploaded file of the same name."""
    value = data.get(key)
    if value:
        return value
    return file_storage_to_data_url(request.files.get(key))


def parse_bool(value, default=None):
    """
    Parse a boolean from string, int or bool.
    Returns True, False, or default when undetermined.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in ('true', '1', 'yes', 'on'):
            return True
        if lower in ('false', '0', 'no', 'off'):
            return False
    return default
