"""API routers module."""

from .editor import router as editor_router
from .studio import router as studio_router

__all__ = ["editor_router", "studio_router"]
