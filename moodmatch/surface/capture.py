from typing import Awaitable, Callable, Optional

from moodmatch.core.config import MEBIBYTE
from moodmatch.core.errors import (
    MoodMatchError,
    OversizedMediaError,
    TranscriptionUnavailableError,
    UnsupportedMediaError,
)
from moodmatch.schemas.capture import MediaAttachment, TranscriptFragment
from moodmatch.schemas.recommendation import (
    Failure,
    RecommendationResponse,
    RequestOutcome,
    ResultsView,
    Success,
)
from moodmatch.services.media_service import media_category
from moodmatch.services.render_service import render_results
from moodmatch.surface.previews import PreviewStore
from moodmatch.surface import state as capture_state
from moodmatch.surface.state import CaptureState, can_submit

MAX_MEDIA_BYTES = 20 * MEBIBYTE
UNEXPECTED_ERROR = "Something went wrong while analyzing your mood."

Renderer = Callable[[RecommendationResponse], Awaitable[ResultsView]]


class MoodCaptureSurface:
    """
    Owns the interactive input: text, speech transcription and the attached media.
    All state changes go through the reducer; this class adds the side effects
    around it (preview handles, the speech session and the submission call).
    """

    def __init__(
            self,
            client,
            speech,
            previews: Optional[PreviewStore] = None,
            max_media_bytes: int = MAX_MEDIA_BYTES,
            renderer: Renderer = render_results,
    ):
        self.client = client
        self.speech = speech
        self.previews = previews if previews is not None else PreviewStore()
        self.max_media_bytes = max_media_bytes
        self.renderer = renderer
        self.last_outcome: Optional[RequestOutcome] = None
        self._state = CaptureState()
        self.speech.on_fragment(self.receive_fragment)

    @property
    def state(self) -> CaptureState:
        return self._state

    def dispatch(self, event) -> CaptureState:
        self._state = capture_state.reduce(self._state, event)
        return self._state

    # --- TEXT ---
    def edit_text(self, text: str) -> CaptureState:
        return self.dispatch(capture_state.TextEdited(text=text))

    def clear_text(self) -> CaptureState:
        return self.dispatch(capture_state.TextCleared())

    # --- MEDIA ---
    def attach_media(self, name: str, mime_type: str, data: bytes) -> CaptureState:
        category = media_category(mime_type)
        if category is None:
            raise UnsupportedMediaError(f"'{name}' is not an image or video ({mime_type or 'unknown type'}).")

        # The old preview goes before the new file is adopted
        if self._state.media is not None:
            self.previews.release(self._state.media.preview_handle)

        handle = self.previews.create(mime_type, data)
        media = MediaAttachment(name=name, mime_type=mime_type, data=data, category=category, preview_handle=handle)
        return self.dispatch(capture_state.MediaAttached(media=media))

    def clear_media(self) -> CaptureState:
        if self._state.media is not None:
            self.previews.release(self._state.media.preview_handle)
        return self.dispatch(capture_state.MediaCleared())

    # --- VOICE ---
    def start_listening(self) -> CaptureState:
        """No-op while a session is already live."""
        if self._state.listening:
            return self._state

        if not self.speech.available:
            error = TranscriptionUnavailableError()
            print(f"Speech recognition error: {error.message}")
            return self.dispatch(capture_state.CaptureFailed(message=error.message))

        self.speech.start()
        return self.dispatch(capture_state.ListeningStarted())

    def stop_listening(self) -> CaptureState:
        """No-op when no session is live; the page may stop twice (click, then the recognizer end event)."""
        if not self._state.listening:
            return self._state
        self.speech.stop()
        return self.dispatch(capture_state.ListeningStopped())

    def receive_fragment(self, fragment: TranscriptFragment) -> CaptureState:
        return self.dispatch(capture_state.FragmentReceived(text=fragment.text, is_final=fragment.is_final))

    # --- SUBMISSION ---
    def _check_media_size(self):
        media = self._state.media
        if media is not None and media.size > self.max_media_bytes:
            limit_mb = self.max_media_bytes // MEBIBYTE
            raise OversizedMediaError(
                f"File too large (max {limit_mb}MB). Please try a shorter clip or smaller image."
            )

    async def submit(self) -> Optional[RequestOutcome]:
        """
        Runs one submission. Returns None without calling anything when submit is not allowed.
        Text and media survive every outcome so the user can try again.
        """
        if not can_submit(self._state):
            return None

        self.dispatch(capture_state.SubmissionStarted())
        outcome: Optional[RequestOutcome] = None
        results: Optional[ResultsView] = None
        try:
            try:
                self._check_media_size()
            except OversizedMediaError as e:
                outcome = Failure.from_error(e)
            else:
                outcome = await self.client.fetch_recommendations(self._state.text, self._state.media)

            if isinstance(outcome, Success):
                results = await self.renderer(outcome.response)
        except MoodMatchError as e:
            outcome = Failure.from_error(e)
        finally:
            if results is not None:
                self.dispatch(capture_state.SubmissionSucceeded(results=results))
            else:
                if not isinstance(outcome, Failure):
                    outcome = Failure(reason=MoodMatchError.reason, message=UNEXPECTED_ERROR)
                self.dispatch(capture_state.SubmissionFailed(message=outcome.message))
            self.last_outcome = outcome

        return outcome

    def close(self):
        self.stop_listening()
        if self._state.media is not None:
            self.previews.release(self._state.media.preview_handle)
