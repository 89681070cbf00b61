"""FastAPI application hosting a single image studio session."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .generation import build_generator
from .routers import editor_router, studio_router
from .session import StudioSession

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    A missing API key raises ConfigurationError here, so the server never
    starts without a usable generator.
    """
    generator = build_generator(settings)
    logger.info(f"Image generator ready: {generator.display_name or generator.name}")

    app.state.studio = StudioSession.create(generator, settings)

    yield

    logger.info("Shutting down...")
    app.state.studio.editor.cancel()
    app.state.studio = None


app = FastAPI(
    title="Imagen Studio API",
    description="Prompt-to-image generation with crop and filter editing",
    version="0.1.0",
    lifespan=lifespan,
)

# Enable CORS for local UI (including file:// origins which report as "null")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_origin_regex=r".*",
    allow_credentials=False,  # Must be False when using allow_origins=["*"]
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(studio_router)
app.include_router(editor_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    studio = getattr(app.state, "studio", None)
    return {
        "status": "healthy",
        "generator": settings.generator,
        "busy": bool(studio and studio.orchestrator.is_loading),
    }


def main():
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "imagen_studio.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
