"""
Capture state and the pure reducer that drives it.

The state record never changes in place: every user action or submission step
is an event, and reduce(state, event) returns the next state. Side effects
(preview handles, speech sessions, network calls) live in MoodCaptureSurface.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from moodmatch.schemas.capture import MediaAttachment
from moodmatch.schemas.recommendation import ResultsView


class Phase(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    SUBMITTING = "submitting"
    IDLE_WITH_RESULT = "idle_with_result"
    IDLE_WITH_ERROR = "idle_with_error"


class CaptureState(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ""
    interim: str = ""
    media: Optional[MediaAttachment] = None
    listening: bool = False
    submitting: bool = False
    results: Optional[ResultsView] = None
    error: Optional[str] = None

    @property
    def phase(self) -> Phase:
        if self.submitting:
            return Phase.SUBMITTING
        if self.listening:
            return Phase.LISTENING
        if self.error:
            return Phase.IDLE_WITH_ERROR
        if self.results is not None:
            return Phase.IDLE_WITH_RESULT
        return Phase.IDLE


# --- EVENTS ---

@dataclass(frozen=True)
class TextEdited:
    text: str


@dataclass(frozen=True)
class TextCleared:
    pass


@dataclass(frozen=True)
class MediaAttached:
    media: MediaAttachment


@dataclass(frozen=True)
class MediaCleared:
    pass


@dataclass(frozen=True)
class ListeningStarted:
    pass


@dataclass(frozen=True)
class ListeningStopped:
    pass


@dataclass(frozen=True)
class FragmentReceived:
    text: str
    is_final: bool


@dataclass(frozen=True)
class SubmissionStarted:
    pass


@dataclass(frozen=True)
class SubmissionSucceeded:
    results: ResultsView


@dataclass(frozen=True)
class SubmissionFailed:
    message: str


@dataclass(frozen=True)
class CaptureFailed:
    message: str


# --- REDUCER ---

def append_transcript(text: str, fragment: str) -> str:
    fragment = fragment.strip()
    if not fragment:
        return text
    return f"{text} {fragment}" if text else fragment


def can_submit(state: CaptureState) -> bool:
    has_input = bool(state.text.strip()) or state.media is not None
    return has_input and not state.submitting


def reduce(state: CaptureState, event) -> CaptureState:
    if isinstance(event, TextEdited):
        return state.model_copy(update={"text": event.text})

    if isinstance(event, TextCleared):
        return state.model_copy(update={"text": ""})

    if isinstance(event, MediaAttached):
        return state.model_copy(update={"media": event.media})

    if isinstance(event, MediaCleared):
        return state.model_copy(update={"media": None})

    if isinstance(event, ListeningStarted):
        return state.model_copy(update={"listening": True, "interim": ""})

    if isinstance(event, ListeningStopped):
        return state.model_copy(update={"listening": False, "interim": ""})

    if isinstance(event, FragmentReceived):
        if not state.listening:
            return state
        if event.is_final:
            return state.model_copy(update={"text": append_transcript(state.text, event.text), "interim": ""})
        return state.model_copy(update={"interim": event.text})

    if isinstance(event, SubmissionStarted):
        return state.model_copy(update={"submitting": True, "results": None, "error": None})

    if isinstance(event, SubmissionSucceeded):
        return state.model_copy(update={"submitting": False, "results": event.results, "error": None})

    if isinstance(event, SubmissionFailed):
        return state.model_copy(update={"submitting": False, "results": None, "error": event.message})

    if isinstance(event, CaptureFailed):
        return state.model_copy(update={"listening": False, "interim": "", "error": event.message})

    raise TypeError(f"Unknown capture event: {event!r}")
