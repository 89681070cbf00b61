"""Google Imagen backend using the google-genai SDK."""

import logging
import time
from typing import TYPE_CHECKING

from google import genai
from google.genai import types

from ..errors import ConfigurationError, GenerationError, GenerationErrorKind
from ..utils import decode_data_url, to_data_url
from .base import SERVICE_FAILURE_MESSAGE, BaseImageGenerator

if TYPE_CHECKING:
    from ..config import Settings
    from ..schemas import GenerationRequest

logger = logging.getLogger(__name__)


class ImagenGenerator(BaseImageGenerator):
    """Text-to-image generation through the Imagen models of the Gemini API.

    Plain prompts go to ``generate_images``. ``generate_images`` takes no
    image input, so when a reference image is attached the prompt and the
    image are sent together to an image-capable Gemini model through
    ``generate_content``, which the API-key client supports.
    """

    name = "imagen"
    display_name = "Google Imagen"

    def __init__(
        self,
        api_key: str | None = None,
        image_model: str = "imagen-4.0-generate-001",
        reference_model: str = "gemini-2.5-flash-image",
        client: genai.Client | None = None,
    ):
        if client is None:
            if not api_key:
                raise ConfigurationError("API_KEY environment variable not set.")
            client = genai.Client(api_key=api_key)
        self._client = client
        self.image_model = image_model
        self.reference_model = reference_model

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ImagenGenerator":
        return cls(
            api_key=settings.api_key,
            image_model=settings.image_model,
            reference_model=settings.reference_model,
        )

    async def generate(self, request: "GenerationRequest") -> str:
        start_time = time.time()
        logger.info(
            f"Imagen request: prompt={request.prompt[:50]}..., "
            f"aspect_ratio={request.aspect_ratio.value}, "
            f"reference={'yes' if request.reference_image else 'no'}"
        )

        try:
            if request.reference_image:
                response = await self._generate_with_reference(request)
                image = _first_inline_image(response)
            else:
                response = await self._client.aio.models.generate_images(
                    model=self.image_model,
                    prompt=request.prompt,
                    config=types.GenerateImagesConfig(
                        number_of_images=1,
                        output_mime_type="image/jpeg",
                        aspect_ratio=request.aspect_ratio.value,
                    ),
                )
                generated = response.generated_images or []
                first = generated[0].image if generated else None
                image = (first.image_bytes, "image/jpeg") if first and first.image_bytes else None
        except GenerationError:
            raise
        except Exception as e:
            logger.exception("Error generating image with Imagen API")
            raise GenerationError(GenerationErrorKind.SERVICE_FAILURE, SERVICE_FAILURE_MESSAGE) from e

        if image is None:
            logger.error("Image API returned no images")
            raise GenerationError(GenerationErrorKind.NO_IMAGE_RETURNED, SERVICE_FAILURE_MESSAGE)

        elapsed = time.time() - start_time
        logger.info(f"Imagen generation completed in {elapsed:.2f}s")
        data, mime_type = image
        return to_data_url(data, mime_type)

    async def _generate_with_reference(self, request: "GenerationRequest"):
        try:
            image_bytes, mime_type = decode_data_url(request.reference_image)
        except ValueError as e:
            logger.error(f"Rejected reference image: {e}")
            raise GenerationError(
                GenerationErrorKind.INVALID_REFERENCE_FORMAT, SERVICE_FAILURE_MESSAGE
            ) from e

        parts = [
            types.Part(text=request.prompt),
            types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
        ]
        return await self._client.aio.models.generate_content(
            model=self.reference_model,
            contents=[types.Content(role="user", parts=parts)],
            config=types.GenerateContentConfig(
                response_modalities=[types.Modality.IMAGE],
                image_config=types.ImageConfig(aspect_ratio=request.aspect_ratio.value),
            ),
        )


def _first_inline_image(response) -> tuple[bytes, str] | None:
    """Return (bytes, mime_type) of the first image part of a generate_content response."""
    for candidate in response.candidates or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            blob = getattr(part, "inline_data", None)
            if blob is not None and blob.data:
                return blob.data, blob.mime_type or "image/png"
    return None
