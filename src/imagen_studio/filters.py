"""CSS-style filter chain rendered with Pillow.

Each channel follows the CSS Filter Effects definition of the matching
filter function, so an edit looks the same as the browser preview that
uses ``FilterSettings.css()``. Channels are applied in the fixed order
brightness, contrast, saturate, grayscale, sepia, invert.
"""

import logging

from PIL import Image

from .schemas import FilterChannel, FilterSettings

logger = logging.getLogger(__name__)

# Luminance coefficients used by the CSS color matrices
_LR, _LG, _LB = 0.2126, 0.7152, 0.0722


def _lut(fn) -> list[int]:
    table = [max(0, min(255, round(fn(i / 255) * 255))) for i in range(256)]
    return table * 3


def _brightness(image: Image.Image, amount: float) -> Image.Image:
    return image.point(_lut(lambda c: c * amount))


def _contrast(image: Image.Image, amount: float) -> Image.Image:
    return image.point(_lut(lambda c: (c - 0.5) * amount + 0.5))


def _invert(image: Image.Image, amount: float) -> Image.Image:
    amount = min(amount, 1.0)
    return image.point(_lut(lambda c: amount * (1 - c) + (1 - amount) * c))


def _matrix(image: Image.Image, rows: tuple[tuple[float, float, float], ...]) -> Image.Image:
    matrix = tuple(value for row in rows for value in (*row, 0.0))
    return image.convert("RGB", matrix)


def _saturate(image: Image.Image, s: float) -> Image.Image:
    return _matrix(image, (
        (0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s),
        (0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s),
        (0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s),
    ))


def _grayscale(image: Image.Image, amount: float) -> Image.Image:
    k = 1 - min(amount, 1.0)
    return _matrix(image, (
        (_LR + 0.7874 * k, _LG - _LG * k, _LB - _LB * k),
        (_LR - _LR * k, _LG + 0.2848 * k, _LB - _LB * k),
        (_LR - _LR * k, _LG - _LG * k, _LB + 0.9278 * k),
    ))


def _sepia(image: Image.Image, amount: float) -> Image.Image:
    k = 1 - min(amount, 1.0)
    return _matrix(image, (
        (0.393 + 0.607 * k, 0.769 - 0.769 * k, 0.189 - 0.189 * k),
        (0.349 - 0.349 * k, 0.686 + 0.314 * k, 0.168 - 0.168 * k),
        (0.272 - 0.272 * k, 0.534 - 0.534 * k, 0.131 + 0.869 * k),
    ))


# Channel -> (filter function, neutral value); iteration order is application order
FILTER_CHAIN = {
    FilterChannel.BRIGHTNESS: (_brightness, 100),
    FilterChannel.CONTRAST: (_contrast, 100),
    FilterChannel.SATURATE: (_saturate, 100),
    FilterChannel.GRAYSCALE: (_grayscale, 0),
    FilterChannel.SEPIA: (_sepia, 0),
    FilterChannel.INVERT: (_invert, 0),
}


def applied_channels(filters: FilterSettings) -> list[FilterChannel]:
    """Channels that change the image, in application order."""
    return [
        channel
        for channel, (_, neutral) in FILTER_CHAIN.items()
        if getattr(filters, channel.value) != neutral
    ]


def apply_filters(image: Image.Image, filters: FilterSettings) -> Image.Image:
    """Render an image through the filter chain.

    Args:
        image: Source image (any mode; alpha is preserved)
        filters: Channel values in percent

    Returns:
        New RGB or RGBA image
    """
    alpha = image.getchannel("A") if image.mode in ("RGBA", "LA") else None
    result = image.convert("RGB")

    for channel in applied_channels(filters):
        fn, _ = FILTER_CHAIN[channel]
        result = fn(result, getattr(filters, channel.value) / 100)

    if alpha is not None:
        result.putalpha(alpha)
    logger.debug(f"Applied filters: {filters.css()}")
    return result
