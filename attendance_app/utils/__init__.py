"""
Utils package
"""
from .file_utils import (
    decode_image_payload,
    file_storage_to_data_url,
    validate_image_bytes,
    load_captured_image
)
from .data_utils import (
    get_request_data,
    get_text_field,
    get_image_field,
    parse_bool
)

__all__ = [
    'decode_image_payload',
    'file_storage_to_data_url',
    'validate_image_bytes',
    'load_captured_image',
    'get_request_data',
    'get_text_field',
    'get_image_field',
    'parse_bool'
]
