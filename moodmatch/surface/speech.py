from typing import Callable, List, Optional, Protocol

from moodmatch.schemas.capture import TranscriptFragment

FragmentCallback = Callable[[TranscriptFragment], None]


class SpeechCapability(Protocol):
    available: bool

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def on_fragment(self, callback: FragmentCallback) -> None: ...


class BrowserSpeechBridge:
    """
    Server side of the browser's Web Speech session.
    The page runs the recognizer and posts every interim/final result here;
    fragments that arrive while no session is active are dropped.
    """

    def __init__(self):
        self.available = True
        self.active = False
        self._callbacks: List[FragmentCallback] = []

    def report_support(self, supported: bool) -> None:
        self.available = supported

    def start(self) -> None:
        self.active = True

    def stop(self) -> None:
        self.active = False

    def on_fragment(self, callback: FragmentCallback) -> None:
        self._callbacks.append(callback)

    def push(self, text: str, is_final: bool = False) -> Optional[TranscriptFragment]:
        if not self.active:
            return None
        fragment = TranscriptFragment(text=text, is_final=is_final)
        for callback in self._callbacks:
            callback(fragment)
        return fragment
