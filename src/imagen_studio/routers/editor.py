"""Edit API router: crop box, filters, preview, save and cancel."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..errors import ValidationError
from ..schemas import CropBox, FilterChannel, FilterUpdate, StudioState
from ..session import StudioSession
from .studio import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/edit", tags=["edit"])


def get_editing_session(session: StudioSession = Depends(get_session)) -> StudioSession:
    if not session.editor.is_editing:
        raise HTTPException(status_code=409, detail="No edit session open")
    return session


@router.post("/open", response_model=StudioState)
async def open_edit(session: StudioSession = Depends(get_session)):
    """Open an edit session over the original generated image."""
    orchestrator = session.orchestrator
    if orchestrator.original_image is None and orchestrator.current_image is None:
        raise HTTPException(status_code=404, detail="No image to edit")
    if not await session.editor.open_edit():
        raise HTTPException(status_code=409, detail="Edit session was closed while opening")
    return session.snapshot()


@router.get("", response_model=StudioState)
async def get_edit_state(session: StudioSession = Depends(get_editing_session)):
    return session.snapshot()


@router.put("/filters/{channel}", response_model=StudioState)
async def adjust_filter(
    channel: FilterChannel,
    body: FilterUpdate,
    session: StudioSession = Depends(get_editing_session),
):
    try:
        session.editor.adjust_filter(channel, body.value)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return session.snapshot()


@router.post("/filters/reset", response_model=StudioState)
async def reset_filters(session: StudioSession = Depends(get_editing_session)):
    session.editor.reset_filters()
    return session.snapshot()


@router.put("/crop", response_model=StudioState)
async def set_crop_box(box: CropBox, session: StudioSession = Depends(get_editing_session)):
    session.editor.set_crop_box(box)
    return session.snapshot()


@router.get("/preview")
async def preview_edit(session: StudioSession = Depends(get_editing_session)):
    """Return the cropped and filtered image as a PNG data URL."""
    image = await session.editor.preview()
    if image is None:
        raise HTTPException(status_code=409, detail="Nothing to preview")
    return {"image": image}


@router.post("/save", response_model=StudioState)
async def save_edit(session: StudioSession = Depends(get_editing_session)):
    """Apply crop and filters and replace the current image."""
    if await session.editor.save() is None:
        logger.warning("Save requested without a crop result; edit session left open")
    return session.snapshot()


@router.post("/cancel", response_model=StudioState)
async def cancel_edit(session: StudioSession = Depends(get_session)):
    session.editor.cancel()
    return session.snapshot()
