"""Imagen Studio: prompt-to-image generation with crop and filter editing."""

__version__ = "0.1.0"
