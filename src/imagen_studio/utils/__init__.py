"""Utility modules for image encoding and other helpers."""

from .image_processing import (
    decode_data_url,
    encode_image,
    load_image,
    split_data_url,
    to_data_url,
)

__all__ = [
    "decode_data_url",
    "encode_image",
    "load_image",
    "split_data_url",
    "to_data_url",
]
