"""Base class for image generation backends."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import Settings
    from ..schemas import GenerationRequest

# Shown to the end user for every generation failure; details go to the log
SERVICE_FAILURE_MESSAGE = "The request to the AI service failed. Please try again later."


class BaseImageGenerator(ABC):
    """Abstract base class for hosted image generation services."""

    name: str = ""
    display_name: str = ""

    @classmethod
    def from_settings(cls, settings: "Settings") -> "BaseImageGenerator":
        """Build the generator from application settings."""
        return cls()

    @abstractmethod
    async def generate(self, request: "GenerationRequest") -> str:
        """Generate one image for the request.

        Args:
            request: Prompt, aspect ratio and optional reference image

        Returns:
            The image as a base64 data URL

        Raises:
            GenerationError: the service failed or returned no image
        """
        ...
