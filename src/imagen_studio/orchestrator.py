"""Prompt-to-image request state for a single studio session."""

import asyncio
import logging
from typing import Callable

from .config import DEFAULT_PROMPT
from .errors import GenerationError, ValidationError, ValidationErrorKind
from .generation import BaseImageGenerator
from .schemas import (
    AspectRatio,
    GenerationRequest,
    ReferenceUpload,
    RequestStatus,
    StudioState,
)
from .utils import to_data_url

logger = logging.getLogger(__name__)

MAX_REFERENCE_BYTES = 4 * 1024 * 1024

Listener = Callable[["ImageRequestOrchestrator"], None]


class ImageRequestOrchestrator:
    """Owns the generation state and drives one generator call per request.

    Only one generation may be in flight. The loading flag is checked before
    the first await, so a second submit while loading never reaches the
    generator.
    """

    def __init__(
        self,
        generator: BaseImageGenerator,
        prompt: str = DEFAULT_PROMPT,
        aspect_ratio: AspectRatio = AspectRatio.SQUARE,
        max_reference_bytes: int = MAX_REFERENCE_BYTES,
    ):
        self._generator = generator
        self.max_reference_bytes = max_reference_bytes
        self._listeners: list[Listener] = []

        self.prompt = prompt
        self.aspect_ratio = aspect_ratio
        self.reference_image: str | None = None
        self.reference_input_revision = 0
        self.is_loading = False
        self.error: str | None = None
        self.current_image: str | None = None
        self.original_image: str | None = None

    @property
    def status(self) -> RequestStatus:
        if self.is_loading:
            return RequestStatus.LOADING
        if self.error:
            return RequestStatus.ERROR
        if self.current_image:
            return RequestStatus.READY
        return RequestStatus.IDLE

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("State listener failed")

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt
        self._notify()

    def set_aspect_ratio(self, aspect_ratio: AspectRatio | str) -> None:
        self.aspect_ratio = AspectRatio(aspect_ratio)
        self._notify()

    async def submit_generation(
        self,
        prompt: str | None = None,
        aspect_ratio: AspectRatio | str | None = None,
    ) -> str | None:
        """Generate an image from the prompt and the pending reference image.

        Returns the new image, or None when the request was skipped (blank
        prompt or a generation already running) or failed. Failures are
        stored in ``error`` rather than raised.
        """
        prompt = self.prompt if prompt is None else prompt
        aspect_ratio = self.aspect_ratio if aspect_ratio is None else AspectRatio(aspect_ratio)

        # A skipped request leaves the form untouched
        if self.is_loading or not prompt.strip():
            return None

        self.prompt = prompt
        self.aspect_ratio = aspect_ratio
        request = GenerationRequest(
            prompt=self.prompt,
            aspect_ratio=self.aspect_ratio,
            reference_image=self.reference_image,
        )

        self.is_loading = True
        self.current_image = None
        self.original_image = None
        self.error = None
        self._notify()

        try:
            image = await self._generator.generate(request)
            self.current_image = image
            self.original_image = image
            return image
        except GenerationError as e:
            logger.error(f"Generation failed ({e.kind.value}): {e.message}")
            self.error = f"Failed to generate image. {e.message}"
        except Exception:
            logger.exception("Generation failed with an unexpected error")
            self.error = "Failed to generate image. An unknown error occurred. Please check the logs."
        finally:
            self.is_loading = False
            self._notify()
        return None

    async def attach_reference_image(self, upload: ReferenceUpload) -> ValidationError | None:
        """Validate an upload and store it as the pending reference image.

        On rejection the error message is set, the previous reference image
        is kept, and the error is returned.
        """
        error = self._validate_upload(upload)
        if error is not None:
            logger.info(f"Rejected reference image {upload.filename!r}: {error.kind.value}")
            self.error = error.message
            self._notify()
            return error

        self.reference_image = await asyncio.to_thread(
            to_data_url, upload.data, upload.content_type
        )
        self.error = None
        logger.info(f"Attached reference image {upload.filename!r} ({upload.size} bytes)")
        self._notify()
        return None

    def _validate_upload(self, upload: ReferenceUpload) -> ValidationError | None:
        if upload.size > self.max_reference_bytes:
            limit_mb = self.max_reference_bytes // (1024 * 1024)
            return ValidationError(
                ValidationErrorKind.TOO_LARGE,
                f"Image size should be less than {limit_mb}MB.",
            )
        if not (upload.content_type or "").startswith("image/"):
            return ValidationError(
                ValidationErrorKind.UNSUPPORTED_TYPE,
                "Please upload a valid image file (PNG, JPG, WebP).",
            )
        return None

    def clear_reference_image(self) -> None:
        """Drop the pending reference image and reset the upload input."""
        self.reference_image = None
        self.reference_input_revision += 1
        self._notify()

    def replace_current_image(self, image: str) -> None:
        """Show an edited image; the original is kept for further edits."""
        self.current_image = image
        self._notify()

    def snapshot(self) -> StudioState:
        return StudioState(
            prompt=self.prompt,
            aspect_ratio=self.aspect_ratio,
            status=self.status,
            is_loading=self.is_loading,
            error=self.error,
            has_image=self.current_image is not None,
            has_original=self.original_image is not None,
            has_reference_image=self.reference_image is not None,
            reference_input_revision=self.reference_input_revision,
        )
