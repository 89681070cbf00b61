"""Crop and filter editing over the generated image."""

import asyncio
import logging

from PIL import Image

from .cropper import BoxCropper, Cropper, CropperFactory, CropperOptions
from .errors import ValidationError, ValidationErrorKind
from .filters import apply_filters
from .orchestrator import ImageRequestOrchestrator
from .schemas import CropBox, FilterChannel, FilterSettings
from .utils import encode_image, load_image

logger = logging.getLogger(__name__)

EDIT_CROPPER_OPTIONS = CropperOptions(
    view_mode=1,
    drag_mode="move",
    auto_crop_area=1.0,
    restore=False,
    guides=False,
    center=False,
    highlight=False,
    background=False,
    crop_box_movable=True,
    crop_box_resizable=True,
    toggle_drag_mode_on_dblclick=False,
)


class ImageEditor:
    """Edit session over the orchestrator's image.

    Edits always start from the original generated image, so repeated edits
    never compound. Closing the session (save or cancel) destroys the cropper
    and resets the filters.
    """

    def __init__(
        self,
        orchestrator: ImageRequestOrchestrator,
        cropper_factory: CropperFactory = BoxCropper,
        jpeg_quality: int = 95,
    ):
        self._orchestrator = orchestrator
        self._cropper_factory = cropper_factory
        self.jpeg_quality = jpeg_quality
        self.cropper: Cropper | None = None
        self.is_editing = False
        self.filters = FilterSettings()
        self._session_token = 0

    async def open_edit(self, source: str | None = None) -> bool:
        """Open an edit session over ``source`` (defaults to the original image).

        Returns False when there is no image to edit.
        """
        source = source or self._orchestrator.original_image or self._orchestrator.current_image
        if source is None:
            return False

        self._session_token += 1
        token = self._session_token

        # Decoding is the mount step; the cropper is created once the surface exists
        surface = await asyncio.to_thread(load_image, source)
        if token != self._session_token:
            logger.info("Edit session closed before it finished opening")
            return False

        self.reset_filters()
        self.is_editing = True
        self._init_cropper(surface)
        logger.info(f"Edit session opened on {surface.size[0]}x{surface.size[1]} image")
        return True

    def _init_cropper(self, surface: Image.Image) -> None:
        if self.cropper is not None:
            self.cropper.destroy()
        self.cropper = self._cropper_factory(surface, EDIT_CROPPER_OPTIONS)

    def _destroy_cropper(self) -> None:
        if self.cropper is not None:
            self.cropper.destroy()
            self.cropper = None

    def adjust_filter(self, channel: FilterChannel | str, value: float) -> FilterSettings:
        """Set one filter channel (percent)."""
        try:
            channel = FilterChannel(channel)
            setattr(self.filters, channel.value, value)
        except ValueError as e:
            raise ValidationError(
                ValidationErrorKind.INVALID_FILTER, f"Invalid value for filter {channel}: {value}"
            ) from e
        return self.filters

    def filter_style(self) -> str:
        return self.filters.css()

    def reset_filters(self) -> None:
        self.filters = FilterSettings()

    @property
    def crop_box(self) -> CropBox | None:
        return self.cropper.get_data() if self.cropper else None

    def set_crop_box(self, box: CropBox) -> CropBox | None:
        if self.cropper is None:
            return None
        return self.cropper.set_data(box)

    def move_crop_box(self, dx: int, dy: int) -> CropBox | None:
        if self.cropper is None:
            return None
        return self.cropper.move(dx, dy)

    def _cropped_canvas(self) -> Image.Image | None:
        if self.cropper is None:
            return None
        return self.cropper.get_cropped_canvas(
            image_smoothing_enabled=True,
            image_smoothing_quality="high",
        )

    async def preview(self) -> str | None:
        """Render the current crop and filters as a PNG data URL without saving."""
        canvas = self._cropped_canvas()
        if canvas is None:
            return None
        filters = self.filters.model_copy()
        return await asyncio.to_thread(
            lambda: encode_image(apply_filters(canvas, filters), format="PNG")
        )

    async def save(self) -> str | None:
        """Apply crop and filters and make the result the current image.

        No-op (session stays open) when there is no cropper or crop result.
        """
        canvas = self._cropped_canvas()
        if canvas is None:
            return None

        filters = self.filters.model_copy()
        result = await asyncio.to_thread(self._render, canvas, filters)
        self._orchestrator.replace_current_image(result)
        logger.info(f"Edit saved: {canvas.size[0]}x{canvas.size[1]}, filters={filters.css()}")
        self._close()
        return result

    def _render(self, canvas: Image.Image, filters: FilterSettings) -> str:
        final = apply_filters(canvas, filters)
        return encode_image(final, format="JPEG", quality=self.jpeg_quality)

    def cancel(self) -> None:
        self._close()
        logger.info("Edit session cancelled")

    def _close(self) -> None:
        self._session_token += 1
        self.is_editing = False
        self._destroy_cropper()
        self.reset_filters()
