"""Helpers for moving images between data URLs, bytes and PIL."""

import base64
import binascii
import io
import logging
import re

from PIL import Image

logger = logging.getLogger(__name__)

_DATA_URL_HEADER = re.compile(r"^data:(?P<mime>[^;,]+)(?P<params>(;[^;,]*)*);base64$")


def to_data_url(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 data URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def split_data_url(data_url: str) -> tuple[str, str]:
    """Split a base64 data URL into (mime_type, base64_payload).

    Raises:
        ValueError: if the string is not a base64 data URL with a payload.
    """
    header, sep, payload = data_url.partition(",")
    match = _DATA_URL_HEADER.match(header)
    if not sep or not match or not payload:
        raise ValueError("Invalid image data URL format.")
    return match.group("mime"), payload


def decode_data_url(data_url: str) -> tuple[bytes, str]:
    """Decode a base64 data URL into (bytes, mime_type)."""
    mime_type, payload = split_data_url(data_url)
    try:
        return base64.b64decode(payload, validate=True), mime_type
    except binascii.Error as e:
        raise ValueError("Invalid image data URL format.") from e


def load_image(data_url: str) -> Image.Image:
    """Decode a data URL into a fully loaded PIL Image."""
    data, _ = decode_data_url(data_url)
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def encode_image(image: Image.Image, format: str = "JPEG", quality: int = 95) -> str:
    """Encode a PIL Image as a data URL.

    JPEG has no alpha channel, so images are flattened to RGB first.

    Args:
        image: Image to encode
        format: Pillow format name ("JPEG" or "PNG")
        quality: JPEG quality (ignored for PNG)

    Returns:
        ``data:image/...;base64,...`` string
    """
    buffer = io.BytesIO()
    if format == "JPEG":
        if image.mode != "RGB":
            image = image.convert("RGB")
        image.save(buffer, format="JPEG", quality=quality)
        mime_type = "image/jpeg"
    else:
        image.save(buffer, format=format)
        mime_type = Image.MIME.get(format, f"image/{format.lower()}")
    logger.debug(f"Encoded {image.size[0]}x{image.size[1]} image as {mime_type}")
    return to_data_url(buffer.getvalue(), mime_type)
