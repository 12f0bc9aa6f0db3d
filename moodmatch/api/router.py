from functools import partial
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile
from fastapi.templating import Jinja2Templates

from moodmatch.core.config import MEBIBYTE, get_settings
from moodmatch.core.errors import MediaReadError, MoodMatchError, OversizedMediaError, UnsupportedMediaError
from moodmatch.schemas.capture import MediaAttachment, MediaView, SurfaceSnapshot
from moodmatch.schemas.recommendation import Failure, RecommendationResponse
from moodmatch.services.llm_services import RecommendationClient
from moodmatch.services.media_service import media_category
from moodmatch.services.render_service import render_results, render_with_poster_search
from moodmatch.surface.capture import MoodCaptureSurface
from moodmatch.surface.previews import PreviewStore
from moodmatch.surface.speech import BrowserSpeechBridge
from moodmatch.surface.state import can_submit

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# Initialize the API Router
router = APIRouter()

_client: Optional[RecommendationClient] = None
_surface: Optional[MoodCaptureSurface] = None


# --- DEPENDENCIES ---
def get_client() -> RecommendationClient:
    global _client
    if _client is None:
        settings = get_settings()
        _client = RecommendationClient(
            api_key=settings.GEMINI_API_KEY,
            model_name=settings.GEMINI_MODEL,
            temperature=settings.GEMINI_TEMPERATURE,
        )
    return _client


def get_surface() -> MoodCaptureSurface:
    global _surface
    if _surface is None:
        settings = get_settings()
        _surface = MoodCaptureSurface(
            client=get_client(),
            speech=BrowserSpeechBridge(),
            previews=PreviewStore(),
            max_media_bytes=settings.MAX_MEDIA_BYTES,
            renderer=render_with_poster_search if settings.POSTER_LOOKUP else partial(render_results, lookup=None),
        )
    return _surface


def close_surface():
    global _surface
    if _surface is not None:
        _surface.close()
        _surface = None


def snapshot(surface: MoodCaptureSurface, request: Request, include_outcome: bool = False) -> SurfaceSnapshot:
    state = surface.state
    media_view = None
    if state.media is not None:
        media_view = MediaView(
            name=state.media.name,
            mime_type=state.media.mime_type,
            category=state.media.category,
            size=state.media.size,
            preview_url=str(request.url_for("preview", handle=state.media.preview_handle)),
        )
    return SurfaceSnapshot(
        text=state.text,
        interim=state.interim,
        media=media_view,
        phase=state.phase.value,
        listening=state.listening,
        submitting=state.submitting,
        can_submit=can_submit(state),
        error=state.error,
        results=state.results,
        outcome=surface.last_outcome if include_outcome else None,
    )


def _http_error(error: MoodMatchError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


async def _read_upload(file: UploadFile) -> bytes:
    try:
        return await file.read()
    except OSError as e:
        raise _http_error(MediaReadError(f"Could not read '{file.filename}': {e}"))


# --- PAGE ---
@router.get("/")
async def index(request: Request, surface: MoodCaptureSurface = Depends(get_surface)):
    """Renders the mood board page from the current surface state."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {"view": snapshot(surface, request), "max_media_mb": surface.max_media_bytes // MEBIBYTE},
    )


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "moodmatch"}


@router.get("/state", response_model=SurfaceSnapshot)
async def read_state(request: Request, surface: MoodCaptureSurface = Depends(get_surface)):
    return snapshot(surface, request)


# --- CAPTURE ---
@router.post("/capture/text", response_model=SurfaceSnapshot)
async def edit_text(request: Request, text: str = Form(""), surface: MoodCaptureSurface = Depends(get_surface)):
    surface.edit_text(text)
    return snapshot(surface, request)


@router.delete("/capture/text", response_model=SurfaceSnapshot)
async def clear_text(request: Request, surface: MoodCaptureSurface = Depends(get_surface)):
    surface.clear_text()
    return snapshot(surface, request)


@router.post("/capture/media", response_model=SurfaceSnapshot)
async def attach_media(
        request: Request,
        file: UploadFile = File(...),
        surface: MoodCaptureSurface = Depends(get_surface),
):
    data = await _read_upload(file)
    try:
        surface.attach_media(file.filename or "attachment", file.content_type or "", data)
    except UnsupportedMediaError as e:
        raise _http_error(e)
    return snapshot(surface, request)


@router.delete("/capture/media", response_model=SurfaceSnapshot)
async def clear_media(request: Request, surface: MoodCaptureSurface = Depends(get_surface)):
    surface.clear_media()
    return snapshot(surface, request)


@router.get("/preview/{handle}", name="preview")
async def preview(handle: str, surface: MoodCaptureSurface = Depends(get_surface)):
    item = surface.previews.get(handle)
    if item is None:
        raise HTTPException(status_code=404, detail="Preview released.")
    mime_type, data = item
    return Response(content=data, media_type=mime_type)


@router.post("/capture/listen/start", response_model=SurfaceSnapshot)
async def start_listening(
        request: Request,
        supported: bool = Form(True),
        surface: MoodCaptureSurface = Depends(get_surface),
):
    surface.speech.report_support(supported)
    surface.start_listening()
    return snapshot(surface, request)


@router.post("/capture/listen/stop", response_model=SurfaceSnapshot)
async def stop_listening(request: Request, surface: MoodCaptureSurface = Depends(get_surface)):
    surface.stop_listening()
    return snapshot(surface, request)


@router.post("/capture/speech", response_model=SurfaceSnapshot)
async def speech_fragment(
        request: Request,
        text: str = Form(...),
        is_final: bool = Form(False),
        surface: MoodCaptureSurface = Depends(get_surface),
):
    surface.speech.push(text, is_final)
    return snapshot(surface, request)


# --- SUBMISSION ---
@router.post("/recommendations", response_model=SurfaceSnapshot)
async def submit(request: Request, surface: MoodCaptureSurface = Depends(get_surface)):
    outcome = await surface.submit()
    if outcome is None:
        raise HTTPException(status_code=409, detail="Add some text or media first, or wait for the running analysis.")
    return snapshot(surface, request, include_outcome=True)


@router.post("/analyze", response_model=RecommendationResponse)
async def analyze(
        text: str = Form(""),
        file: Optional[UploadFile] = File(None),
        client: RecommendationClient = Depends(get_client),
):
    """Stateless variant: one form post in, the parsed recommendations out."""
    media = None
    if file is not None and file.filename:
        data = await _read_upload(file)
        category = media_category(file.content_type)
        if category is None:
            raise _http_error(UnsupportedMediaError())
        if len(data) > get_settings().MAX_MEDIA_BYTES:
            raise _http_error(OversizedMediaError())
        media = MediaAttachment(name=file.filename, mime_type=file.content_type, data=data, category=category)

    if not text.strip() and media is None:
        raise HTTPException(status_code=400, detail="Describe your mood or attach an image or video.")

    outcome = await client.fetch_recommendations(text, media)
    if isinstance(outcome, Failure):
        status_code = 400 if outcome.reason == MediaReadError.reason else 502
        raise HTTPException(status_code=status_code, detail=outcome.message)
    return outcome.response
