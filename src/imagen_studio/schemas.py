from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class AspectRatio(str, Enum):
    """Aspect ratios supported by the generation service."""

    SQUARE = "1:1"
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"
    STANDARD = "4:3"
    TALL = "3:4"


# Labels shown next to each preset in the UI
ASPECT_RATIO_LABELS: dict[AspectRatio, str] = {
    AspectRatio.SQUARE: "Square",
    AspectRatio.LANDSCAPE: "Landscape",
    AspectRatio.PORTRAIT: "Portrait",
    AspectRatio.STANDARD: "Standard",
    AspectRatio.TALL: "Tall",
}


class RequestStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


class GenerationRequest(BaseModel):
    """A single generation attempt. Built fresh for every call."""

    model_config = ConfigDict(frozen=True)

    prompt: Annotated[str, Field(min_length=1, description="Text prompt for generation")]
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    reference_image: str | None = Field(
        default=None, description="Reference image as a base64 data URL"
    )


@dataclass
class ReferenceUpload:
    """An uploaded file offered as a reference image."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class FilterChannel(str, Enum):
    """Filter channels, in the order they are applied."""

    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"
    SATURATE = "saturate"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    INVERT = "invert"


class FilterSettings(BaseModel):
    """Percentage values for each filter channel.

    brightness/contrast/saturate are neutral at 100, the others are off at 0.
    """

    model_config = ConfigDict(validate_assignment=True)

    brightness: float = Field(default=100, ge=0, allow_inf_nan=False)
    contrast: float = Field(default=100, ge=0, allow_inf_nan=False)
    saturate: float = Field(default=100, ge=0, allow_inf_nan=False)
    grayscale: float = Field(default=0, ge=0, le=100, allow_inf_nan=False)
    sepia: float = Field(default=0, ge=0, le=100, allow_inf_nan=False)
    invert: float = Field(default=0, ge=0, le=100, allow_inf_nan=False)

    def is_neutral(self) -> bool:
        return self == FilterSettings()

    def css(self) -> str:
        """Render as a CSS ``filter`` value in application order."""
        return " ".join(
            f"{channel.value}({_format_percent(getattr(self, channel.value))}%)"
            for channel in FilterChannel
        )


def _format_percent(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


class CropBox(BaseModel):
    """Crop rectangle in natural image pixels."""

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    def as_box(self) -> tuple[int, int, int, int]:
        """Return a PIL-style (left, upper, right, lower) box."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


class StudioState(BaseModel):
    """Public snapshot of the studio state."""

    prompt: str
    aspect_ratio: AspectRatio
    status: RequestStatus
    is_loading: bool
    error: str | None = None
    has_image: bool
    has_original: bool
    has_reference_image: bool
    reference_input_revision: int
    is_editing: bool = False
    filters: FilterSettings | None = None
    filter_style: str | None = None
    crop_box: CropBox | None = None


class PromptUpdate(BaseModel):
    prompt: str


class AspectRatioUpdate(BaseModel):
    aspect_ratio: AspectRatio


class GenerateBody(BaseModel):
    """Optional overrides for a generation; omitted fields use the studio state."""

    prompt: str | None = None
    aspect_ratio: AspectRatio | None = None


class FilterUpdate(BaseModel):
    value: float


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str
    detail: str | None = None
