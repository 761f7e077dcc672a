"""
Image utilities
Decoding and validation of captured photos
"""
import base64
import binascii
import io

from PIL import Image, UnidentifiedImageError

from attendance_app.config import MAX_IMAGE_SIZE, MIN_IMAGE_SIZE, SUPPORTED_IMAGE_FORMATS
from core.attendance.errors import InvalidImage


def decode_image_payload(image_data):
    """Decode a base64 string or data URL (``data:image/jpeg;base64,...``) into bytes."""
    if isinstance(image_data, (bytes, bytearray)):
        return bytes(image_data)
    if not image_data:
        raise InvalidImage('Missing image data')
    if not isinstance(image_data, str):
        raise InvalidImage('Invalid image: expected a base64 string')

    if ',' in image_data:
        image_data = image_data.split(',', 1)[1]
    try:
        return base64.b64decode(image_data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImage('Invalid image: could not decode base64 data') from exc


def file_storage_to_data_url(file_storage):
    """Uploaded file (werkzeug FileStorage) as a base64 data URL, or None if empty."""
    if not file_storage or not file_storage.filename:
        return None
    content = file_storage.read()
    if not content:
        return None
    mimetype = file_storage.mimetype or 'image/jpeg'
    return f"data:{mimetype};base64,{base64.b64encode(content).decode('ascii')}"


def validate_image_bytes(img_bytes, min_size=MIN_IMAGE_SIZE, max_size=MAX_IMAGE_SIZE,
                         formats=SUPPORTED_IMAGE_FORMATS):
    """
    Check size limits and that Pillow recognises the image.
    Returns the detected format name (e.g. 'JPEG').
    """
    size = len(img_bytes)
    if size < min_size:
        raise InvalidImage(f"Image too small (minimum {min_size} bytes)")
    if size > max_size:
        raise InvalidImage(f"Image too large (maximum {max_size} bytes)")

    try:
        with Image.open(io.BytesIO(img_bytes)) as img:
            img_format = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise InvalidImage(f"Invalid image: {exc}") from exc

    if img_format not in formats:
        raise InvalidImage(
            f"Unsupported image format {img_format}. Allowed: {', '.join(sorted(formats))}"
        )
    return img_format


def load_captured_image(image_data, **limits):
    """Decode and validate a captured photo; returns the raw image bytes."""
    img_bytes = decode_image_payload(image_data)
    validate_image_bytes(img_bytes, **limits)
    return img_bytes
