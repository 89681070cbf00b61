from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_PROMPT = (
    "A photorealistic image of a majestic lion in the savanna at sunset, cinematic lighting"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_key: str | None = Field(default=None, validation_alias="API_KEY")
    port: int = 4210
    host: str = "0.0.0.0"
    log_level: str = "INFO"

    # Generation backend
    generator: str = "imagen"
    image_model: str = "imagen-4.0-generate-001"
    reference_model: str = "gemini-2.5-flash-image"  # Used when a reference image is attached

    # Studio defaults
    default_prompt: str = DEFAULT_PROMPT
    max_reference_bytes: int = 4 * 1024 * 1024
    jpeg_quality: int = 95

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True


settings = Settings()
