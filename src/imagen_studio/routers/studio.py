"""Generation API router: prompt, settings, reference image and results."""

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile

from ..schemas import (
    ASPECT_RATIO_LABELS,
    AspectRatio,
    AspectRatioUpdate,
    GenerateBody,
    PromptUpdate,
    ReferenceUpload,
    StudioState,
)
from ..session import StudioSession
from ..utils import decode_data_url

router = APIRouter(tags=["studio"])


def get_session(request: Request) -> StudioSession:
    session = getattr(request.app.state, "studio", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Image generator is not configured")
    return session


@router.get("/aspect-ratios")
async def list_aspect_ratios():
    """List available aspect ratio presets."""
    return [{"value": ratio.value, "label": ASPECT_RATIO_LABELS[ratio]} for ratio in AspectRatio]


@router.get("/state", response_model=StudioState)
async def get_state(session: StudioSession = Depends(get_session)):
    return session.snapshot()


@router.put("/prompt", response_model=StudioState)
async def update_prompt(body: PromptUpdate, session: StudioSession = Depends(get_session)):
    session.orchestrator.set_prompt(body.prompt)
    return session.snapshot()


@router.put("/aspect-ratio", response_model=StudioState)
async def update_aspect_ratio(body: AspectRatioUpdate, session: StudioSession = Depends(get_session)):
    session.orchestrator.set_aspect_ratio(body.aspect_ratio)
    return session.snapshot()


@router.post("/generate", response_model=StudioState)
async def generate_image(
    body: GenerateBody | None = None,
    session: StudioSession = Depends(get_session),
):
    """Generate an image from the current prompt and settings.

    Failures are reported in the returned state's ``error`` field. A blank
    prompt or a generation already in progress leaves the state unchanged.
    """
    body = body or GenerateBody()
    await session.orchestrator.submit_generation(body.prompt, body.aspect_ratio)
    return session.snapshot()


@router.post("/reference", response_model=StudioState)
async def upload_reference_image(
    image: UploadFile = File(..., description="Reference image (max 4MB)"),
    session: StudioSession = Depends(get_session),
):
    # One byte past the limit is enough to reject an oversized upload
    contents = await image.read(session.orchestrator.max_reference_bytes + 1)
    upload = ReferenceUpload(
        filename=image.filename or "upload",
        content_type=image.content_type or "",
        data=contents,
    )
    error = await session.orchestrator.attach_reference_image(upload)
    if error is not None:
        raise HTTPException(status_code=400, detail=error.message)
    return session.snapshot()


@router.delete("/reference", response_model=StudioState)
async def remove_reference_image(session: StudioSession = Depends(get_session)):
    session.orchestrator.clear_reference_image()
    return session.snapshot()


def _image_response(data_url: str | None, name: str) -> Response:
    if data_url is None:
        raise HTTPException(status_code=404, detail=f"No {name} image")
    data, mime_type = decode_data_url(data_url)
    return Response(content=data, media_type=mime_type)


@router.get(
    "/image/current",
    responses={
        200: {"content": {"image/jpeg": {}}, "description": "Current image"},
        404: {"description": "No image generated yet"},
    },
)
async def get_current_image(session: StudioSession = Depends(get_session)):
    return _image_response(session.orchestrator.current_image, "current")


@router.get(
    "/image/original",
    responses={
        200: {"content": {"image/jpeg": {}}, "description": "Unedited generated image"},
        404: {"description": "No image generated yet"},
    },
)
async def get_original_image(session: StudioSession = Depends(get_session)):
    return _image_response(session.orchestrator.original_image, "original")
