from typing import Optional

from pydantic import BaseModel, ConfigDict

from moodmatch.schemas.recommendation import RequestOutcome, ResultsView


# An attached image or video, as held by the capture surface
class MediaAttachment(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    mime_type: str
    data: bytes
    category: str
    preview_handle: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)

    async def read(self) -> bytes:
        return self.data


class TranscriptFragment(BaseModel):
    text: str
    is_final: bool = False


# --- API VIEWS ---

class MediaView(BaseModel):
    name: str
    mime_type: str
    category: str
    size: int
    preview_url: Optional[str] = None


class SurfaceSnapshot(BaseModel):
    text: str
    interim: str
    media: Optional[MediaView] = None
    phase: str
    listening: bool
    submitting: bool
    can_submit: bool
    error: Optional[str] = None
    results: Optional[ResultsView] = None
    outcome: Optional[RequestOutcome] = None
