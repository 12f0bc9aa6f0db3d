import json

import pytest

from moodmatch.schemas.recommendation import PosterFound
from moodmatch.services.llm_services import RecommendationClient
from moodmatch.surface.capture import MoodCaptureSurface
from moodmatch.surface.previews import PreviewStore
from moodmatch.surface.speech import BrowserSpeechBridge
from moodmatch.services.render_service import render_results


def make_reply(count=8, mood="Soft, grey and slow."):
    movies = [
        {
            "title": f"Movie {i}",
            "year": str(1990 + i),
            "genre": "Drama",
            "description": f"Description {i}",
            "matchReason": f"Rain on the window, like scene {i}",
        }
        for i in range(count)
    ]
    return json.dumps({"moodAnalysis": mood, "movies": movies})


class FakeResponse:
    def __init__(self, text=None, blocked=False):
        self._text = text
        self._blocked = blocked
        self.prompt_feedback = "block_reason: SAFETY" if blocked else None

    @property
    def text(self):
        if self._blocked:
            raise ValueError("The response has no parts")
        return self._text


class FakeModel:
    def __init__(self, reply=None, error=None):
        self.reply = reply if reply is not None else FakeResponse(make_reply())
        self.error = error
        self.calls = []

    async def generate_content_async(self, parts):
        self.calls.append(parts)
        if self.error is not None:
            raise self.error
        return self.reply


def found_lookup(title, year):
    return PosterFound(url=f"https://posters.test/{title}-{year}.jpg")


@pytest.fixture
def fake_model():
    return FakeModel()


@pytest.fixture
def client(fake_model):
    return RecommendationClient(api_key="test-key", model=fake_model)


@pytest.fixture
def speech():
    return BrowserSpeechBridge()


@pytest.fixture
def previews():
    return PreviewStore()


@pytest.fixture
def surface(client, speech, previews):
    async def renderer(response):
        return await render_results(response, lookup=found_lookup)

    return MoodCaptureSurface(client=client, speech=speech, previews=previews, renderer=renderer)
