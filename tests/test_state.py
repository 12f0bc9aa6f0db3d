import pytest

from moodmatch.schemas.capture import MediaAttachment
from moodmatch.schemas.recommendation import ResultsView
from moodmatch.surface.state import (
    CaptureFailed,
    CaptureState,
    FragmentReceived,
    ListeningStarted,
    ListeningStopped,
    MediaAttached,
    MediaCleared,
    Phase,
    SubmissionFailed,
    SubmissionStarted,
    SubmissionSucceeded,
    TextCleared,
    TextEdited,
    can_submit,
    reduce,
)


def _run(state, *events):
    for event in events:
        state = reduce(state, event)
    return state


def _image():
    return MediaAttachment(name="a.png", mime_type="image/png", data=b"png", category="image", preview_handle="h1")


def test_initial_state_is_idle_and_cannot_submit():
    state = CaptureState()

    assert state.phase == Phase.IDLE
    assert not can_submit(state)


def test_whitespace_only_text_cannot_submit():
    assert not can_submit(reduce(CaptureState(), TextEdited(text="   ")))


def test_text_or_media_enables_submit():
    assert can_submit(reduce(CaptureState(), TextEdited(text="gloomy")))
    assert can_submit(reduce(CaptureState(), MediaAttached(media=_image())))


def test_submit_is_blocked_while_submitting():
    state = _run(CaptureState(), TextEdited(text="gloomy"), SubmissionStarted())

    assert state.phase == Phase.SUBMITTING
    assert not can_submit(state)


def test_only_final_fragments_are_committed_in_order():
    state = _run(
        CaptureState(text="I feel"),
        ListeningStarted(),
        FragmentReceived(text="like a", is_final=False),
        FragmentReceived(text="like a rainy", is_final=True),
        FragmentReceived(text="sun", is_final=False),
        FragmentReceived(text="Sunday", is_final=True),
        FragmentReceived(text="and tea", is_final=False),
        ListeningStopped(),
    )

    assert state.text == "I feel like a rainy Sunday"
    assert state.interim == ""
    assert state.phase == Phase.IDLE


def test_first_final_fragment_into_empty_text_has_no_leading_space():
    state = _run(CaptureState(), ListeningStarted(), FragmentReceived(text="hello", is_final=True))

    assert state.text == "hello"


def test_interim_fragment_is_shown_but_not_committed():
    state = _run(CaptureState(text="x"), ListeningStarted(), FragmentReceived(text="maybe", is_final=False))

    assert state.interim == "maybe"
    assert state.text == "x"
    assert state.phase == Phase.LISTENING


def test_fragments_outside_a_session_are_ignored():
    state = reduce(CaptureState(text="x"), FragmentReceived(text="late", is_final=True))

    assert state.text == "x"


def test_submission_success_and_failure_clear_the_flag():
    results = ResultsView(mood_analysis="calm", cards=[])
    started = _run(CaptureState(text="calm"), SubmissionStarted())

    ok = reduce(started, SubmissionSucceeded(results=results))
    failed = reduce(started, SubmissionFailed(message="boom"))

    assert not ok.submitting and ok.phase == Phase.IDLE_WITH_RESULT
    assert not failed.submitting and failed.phase == Phase.IDLE_WITH_ERROR
    assert failed.text == "calm"


def test_new_submission_discards_previous_result_and_error():
    state = CaptureState(text="calm", results=ResultsView(mood_analysis="m", cards=[]), error="old")

    state = reduce(state, SubmissionStarted())

    assert state.results is None
    assert state.error is None


def test_clearing_text_and_media():
    state = _run(CaptureState(), TextEdited(text="a"), MediaAttached(media=_image()), TextCleared(), MediaCleared())

    assert state.text == ""
    assert state.media is None


def test_capture_failure_stops_listening_and_sets_error():
    state = _run(CaptureState(), ListeningStarted(), CaptureFailed(message="no mic"))

    assert not state.listening
    assert state.error == "no mic"


def test_reducer_does_not_mutate_previous_state():
    before = CaptureState(text="a")

    reduce(before, TextEdited(text="b"))

    assert before.text == "a"


def test_unknown_event_is_rejected():
    with pytest.raises(TypeError):
        reduce(CaptureState(), object())
