"""
Image helpers: base64 decoding, format and size checks, numpy conversion
"""
import base64
import binascii
import io
from typing import Iterable, Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from app.core.exceptions import ImageValidationError
from app.core.enums import ImageFormat

# Pillow reports JPEG files as "JPEG", the CLI/UI world says "jpg"
FORMAT_ALIASES = {"jpg": "jpeg"}


def decode_base64_image(base64_string: str) -> bytes:
    """
    Decode a base64 string into bytes

    Args:
        base64_string: Image in base64, optionally prefixed with a data URI header

    Returns:
        Decoded image bytes

    Raises:
        ImageValidationError: If the string is not valid base64 or is empty
    """
    if "base64," in base64_string:
        base64_string = base64_string.split("base64,", 1)[1]

    try:
        image_bytes = base64.b64decode(base64_string, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageValidationError(
            f"Failed to decode base64 image: {str(e)}",
            details={"error": str(e)}
        )

    if not image_bytes:
        raise ImageValidationError("Decoded image is empty")

    return image_bytes


def validate_image_format(
    image_bytes: bytes,
    allowed_formats: Optional[Iterable[str]] = None,
) -> ImageFormat:
    """
    Detect the image format and check that it is accepted

    Args:
        image_bytes: Image bytes
        allowed_formats: Subset of ImageFormat values to accept (all when None)

    Returns:
        The detected format

    Raises:
        ImageValidationError: If the data is not an image or the format is not accepted
    """
    allowed = {
        FORMAT_ALIASES.get(fmt, fmt)
        for fmt in (allowed_formats or [f.value for f in ImageFormat])
    }

    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            format_lower = img.format.lower() if img.format else "unknown"
    except (UnidentifiedImageError, OSError) as e:
        raise ImageValidationError(
            f"Failed to validate image format: {str(e)}",
            details={"error": str(e)}
        )

    try:
        image_format = ImageFormat(format_lower)
    except ValueError:
        image_format = None

    if image_format is None or image_format.value not in allowed:
        raise ImageValidationError(
            f"Unsupported image format: {format_lower}",
            details={
                "format": format_lower,
                "supported_formats": sorted(allowed)
            }
        )

    return image_format


def validate_image_size(image_bytes: bytes, max_size_mb: int = 5) -> None:
    """
    Check the image size

    Args:
        image_bytes: Image bytes
        max_size_mb: Maximum size in megabytes

    Raises:
        ImageValidationError: If the image is too large
    """
    size_mb = len(image_bytes) / (1024 * 1024)

    if size_mb > max_size_mb:
        raise ImageValidationError(
            f"Image size {size_mb:.2f}MB exceeds maximum {max_size_mb}MB",
            details={
                "size_mb": round(size_mb, 2),
                "max_size_mb": max_size_mb
            }
        )


def bytes_to_numpy(image_bytes: bytes) -> np.ndarray:
    """
    Convert image bytes into an RGB numpy array for the OCR engine

    Args:
        image_bytes: Image bytes

    Returns:
        Numpy array of the image (RGB)

    Raises:
        ImageValidationError: If the conversion failed
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            if img.mode != 'RGB':
                img = img.convert('RGB')
            return np.array(img)

    except (UnidentifiedImageError, OSError) as e:
        raise ImageValidationError(
            f"Failed to convert image to numpy array: {str(e)}",
            details={"error": str(e)}
        )
