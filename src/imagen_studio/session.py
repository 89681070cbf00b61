"""Studio session: one orchestrator and its editor."""

from dataclasses import dataclass

from .config import Settings
from .editor import ImageEditor
from .generation import BaseImageGenerator
from .orchestrator import ImageRequestOrchestrator
from .schemas import StudioState


@dataclass
class StudioSession:
    """Everything the host layer needs for one user."""

    orchestrator: ImageRequestOrchestrator
    editor: ImageEditor

    @classmethod
    def create(cls, generator: BaseImageGenerator, settings: Settings) -> "StudioSession":
        orchestrator = ImageRequestOrchestrator(
            generator,
            prompt=settings.default_prompt,
            max_reference_bytes=settings.max_reference_bytes,
        )
        editor = ImageEditor(orchestrator, jpeg_quality=settings.jpeg_quality)
        return cls(orchestrator=orchestrator, editor=editor)

    def snapshot(self) -> StudioState:
        state = self.orchestrator.snapshot()
        if self.editor.is_editing:
            state.is_editing = True
            state.filters = self.editor.filters.model_copy()
            state.filter_style = self.editor.filter_style()
            state.crop_box = self.editor.crop_box
        return state
