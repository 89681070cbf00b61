"""Image generation backends for Imagen Studio."""

from typing import TYPE_CHECKING

from .base import SERVICE_FAILURE_MESSAGE, BaseImageGenerator

if TYPE_CHECKING:
    from ..config import Settings

__all__ = [
    "SERVICE_FAILURE_MESSAGE",
    "BaseImageGenerator",
    "GeneratorRegistry",
    "build_generator",
]


class GeneratorRegistry:
    """Registry for image generation backends."""

    _generators: dict[str, type[BaseImageGenerator]] = {}

    @classmethod
    def register(cls, name: str, generator_class: type[BaseImageGenerator]) -> None:
        """Register a generator class."""
        cls._generators[name] = generator_class

    @classmethod
    def get_generator_class(cls, name: str) -> type[BaseImageGenerator]:
        if name not in cls._generators:
            raise ValueError(f"Unknown image generator: {name}")
        return cls._generators[name]

    @classmethod
    def get_available_generators(cls) -> list[str]:
        """Get list of registered generator names."""
        return list(cls._generators.keys())


def build_generator(settings: "Settings") -> BaseImageGenerator:
    """Create the generator named in settings.

    Raises:
        ConfigurationError: the backend cannot be constructed (e.g. no API key)
    """
    generator_class = GeneratorRegistry.get_generator_class(settings.generator)
    return generator_class.from_settings(settings)


def _register_generators() -> None:
    """Register all generation backends."""
    from .imagen import ImagenGenerator

    GeneratorRegistry.register("imagen", ImagenGenerator)


_register_generators()
