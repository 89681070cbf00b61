"""Crop-box capability used by the editor.

The editor only talks to the ``Cropper`` protocol (construct with options,
query the crop result, destroy), so any geometry-selection widget can be
plugged in through a factory. ``BoxCropper`` is the Pillow implementation.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Protocol

from PIL import Image

from .schemas import CropBox

logger = logging.getLogger(__name__)

_RESAMPLING = {
    "low": Image.Resampling.BILINEAR,
    "medium": Image.Resampling.BICUBIC,
    "high": Image.Resampling.LANCZOS,
}


@dataclass(frozen=True)
class CropperOptions:
    """Crop widget configuration."""

    view_mode: int = 1  # 1 = crop box restricted to the image
    drag_mode: Literal["crop", "move", "none"] = "move"
    auto_crop_area: float = 1.0  # Fraction of the image covered by the initial box
    restore: bool = False
    guides: bool = False
    center: bool = False
    highlight: bool = False
    background: bool = False
    crop_box_movable: bool = True
    crop_box_resizable: bool = True
    toggle_drag_mode_on_dblclick: bool = False


class Cropper(Protocol):
    def get_data(self) -> CropBox: ...

    def set_data(self, box: CropBox) -> CropBox: ...

    def move(self, dx: int, dy: int) -> CropBox: ...

    def get_cropped_canvas(
        self,
        width: int | None = None,
        height: int | None = None,
        image_smoothing_enabled: bool = True,
        image_smoothing_quality: str = "low",
    ) -> Image.Image | None: ...

    def destroy(self) -> None: ...


CropperFactory = Callable[[Image.Image, CropperOptions], Cropper]


class BoxCropper:
    """Rectangular crop box over a PIL image."""

    def __init__(self, image: Image.Image, options: CropperOptions | None = None):
        self.options = options or CropperOptions()
        self._image: Image.Image | None = image
        self._box = self._initial_box(image.size)
        logger.debug(f"Cropper created over {image.size[0]}x{image.size[1]} image, box={self._box}")

    @property
    def is_destroyed(self) -> bool:
        return self._image is None

    def _initial_box(self, size: tuple[int, int]) -> CropBox:
        w, h = size
        area = min(max(self.options.auto_crop_area, 0.0), 1.0)
        box_w = max(1, round(w * area))
        box_h = max(1, round(h * area))
        return CropBox(x=(w - box_w) // 2, y=(h - box_h) // 2, width=box_w, height=box_h)

    def _clamp(self, x: int, y: int, width: int, height: int) -> CropBox:
        w, h = self._image.size
        if self.options.view_mode >= 1:
            width = min(max(width, 1), w)
            height = min(max(height, 1), h)
            x = min(max(x, 0), w - width)
            y = min(max(y, 0), h - height)
        return CropBox(x=x, y=y, width=width, height=height)

    def get_data(self) -> CropBox:
        return self._box

    def set_data(self, box: CropBox) -> CropBox:
        """Replace the crop box, keeping it inside the image."""
        if self._image is None:
            return self._box
        width, height = box.width, box.height
        if not self.options.crop_box_resizable:
            width, height = self._box.width, self._box.height
        x, y = box.x, box.y
        if not self.options.crop_box_movable:
            x, y = self._box.x, self._box.y
        self._box = self._clamp(x, y, width, height)
        return self._box

    def move(self, dx: int, dy: int) -> CropBox:
        """Shift the crop box by an offset."""
        if self._image is None or not self.options.crop_box_movable:
            return self._box
        self._box = self._clamp(
            self._box.x + dx, self._box.y + dy, self._box.width, self._box.height
        )
        return self._box

    def get_cropped_canvas(
        self,
        width: int | None = None,
        height: int | None = None,
        image_smoothing_enabled: bool = True,
        image_smoothing_quality: str = "low",
    ) -> Image.Image | None:
        """Return the cropped region as a new image.

        The crop is returned at its native resolution unless an output size
        is requested, in which case it is resampled with the filter matching
        ``image_smoothing_quality`` (nearest neighbour when smoothing is off).
        """
        if self._image is None:
            return None
        canvas = self._image.crop(self._box.as_box())
        if width or height:
            target_w = width or round(canvas.width * height / canvas.height)
            target_h = height or round(canvas.height * width / canvas.width)
            resample = (
                _RESAMPLING.get(image_smoothing_quality, Image.Resampling.BILINEAR)
                if image_smoothing_enabled
                else Image.Resampling.NEAREST
            )
            canvas = canvas.resize((target_w, target_h), resample)
        return canvas

    def destroy(self) -> None:
        """Release the image; later calls return no canvas."""
        self._image = None
        logger.debug("Cropper destroyed")
