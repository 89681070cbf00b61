"""
Shared pytest fixtures for the studio tests
"""
import asyncio
import io

import pytest
from PIL import Image

from imagen_studio.editor import ImageEditor
from imagen_studio.errors import GenerationError, GenerationErrorKind
from imagen_studio.generation import SERVICE_FAILURE_MESSAGE, BaseImageGenerator
from imagen_studio.orchestrator import ImageRequestOrchestrator
from imagen_studio.utils import to_data_url


def make_data_url(size=(40, 20), color=(200, 100, 50), format="PNG"):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=format)
    mime = "image/png" if format == "PNG" else "image/jpeg"
    return to_data_url(buffer.getvalue(), mime)


class FakeGenerator(BaseImageGenerator):
    """Records requests and returns a canned image (or raises)."""

    name = "fake"

    def __init__(self, result=None, error=None):
        self.result = result or make_data_url()
        self.error = error
        self.requests = []
        self.gate = None

    async def generate(self, request):
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def image_data_url():
    """A 40x20 PNG data URL"""
    return make_data_url()


@pytest.fixture
def generator(image_data_url):
    return FakeGenerator(result=image_data_url)


@pytest.fixture
def failing_generator():
    return FakeGenerator(
        error=GenerationError(GenerationErrorKind.SERVICE_FAILURE, SERVICE_FAILURE_MESSAGE)
    )


@pytest.fixture
def blocked_generator(image_data_url):
    """Generator that waits on ``gate`` before returning"""
    fake = FakeGenerator(result=image_data_url)
    fake.gate = asyncio.Event()
    return fake


@pytest.fixture
def orchestrator(generator):
    return ImageRequestOrchestrator(generator)


@pytest.fixture
def editor(orchestrator):
    return ImageEditor(orchestrator)
