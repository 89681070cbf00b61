"""Exception types shared by the studio components."""

from enum import Enum


class StudioError(Exception):
    """Base class for studio errors."""


class ValidationErrorKind(str, Enum):
    TOO_LARGE = "too_large"
    UNSUPPORTED_TYPE = "unsupported_type"
    INVALID_FILTER = "invalid_filter"


class ValidationError(StudioError):
    """User input rejected before any external call was made."""

    def __init__(self, kind: ValidationErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class GenerationErrorKind(str, Enum):
    NO_IMAGE_RETURNED = "no_image_returned"
    INVALID_REFERENCE_FORMAT = "invalid_reference_format"
    SERVICE_FAILURE = "service_failure"


class GenerationError(StudioError):
    """The image generation service failed or returned nothing.

    ``message`` is safe to show to the end user; the underlying cause is
    chained via ``__cause__`` and logged where the error is raised.
    """

    def __init__(self, kind: GenerationErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class ConfigurationError(StudioError):
    """Fatal misconfiguration detected at startup (e.g. missing API key)."""
