import json
from typing import List, Optional

import google.generativeai as genai
from pydantic import ValidationError

from moodmatch.core.config import DEFAULT_MODEL
from moodmatch.core.errors import MalformedResponseError, MoodMatchError, ServiceCallError
from moodmatch.core.prompts import RESPONSE_SCHEMA, build_recommendation_prompt
from moodmatch.schemas.recommendation import Failure, RecommendationResponse, RequestOutcome, Success
from moodmatch.services.media_service import encode_media
from moodmatch.utils.timer import ExecutionTimer

DEFAULT_TEMPERATURE = 0.7


# --- HELPER FUNCTIONS ---
def build_generation_config(temperature: float = DEFAULT_TEMPERATURE) -> dict:
    return {
        "response_mime_type": "application/json",
        "response_schema": RESPONSE_SCHEMA,
        "temperature": temperature,
    }


def parse_recommendation_response(raw_text: Optional[str]) -> RecommendationResponse:
    """
    Best-effort parse of Gemini's reply into typed records.
    Code fences are stripped; anything that is not JSON of the expected shape is a MalformedResponseError.
    """
    if not raw_text or not raw_text.strip():
        raise MalformedResponseError("No response text")

    clean_json = raw_text.replace("```json", "").replace("```", "").strip()
    try:
        data = json.loads(clean_json)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Could not parse the recommendation reply: {e}") from e

    try:
        return RecommendationResponse.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Recommendation reply did not match the expected shape ({e.error_count()} errors)"
        ) from e


def _response_text(response) -> Optional[str]:
    # .text raises ValueError when the candidate has no parts (e.g. a safety block)
    try:
        return response.text
    except ValueError:
        print(f"⚠️ Gemini returned an empty response. Reason: {getattr(response, 'prompt_feedback', None)}")
        return None


# --- GEMINI CLIENT ---
class RecommendationClient:
    def __init__(
            self,
            api_key: Optional[str],
            model_name: str = DEFAULT_MODEL,
            temperature: float = DEFAULT_TEMPERATURE,
            model=None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self._model = model

    def _get_model(self):
        if self._model is None:
            if not self.api_key:
                raise ServiceCallError("GEMINI_API_KEY is not configured.")
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(
                model_name=self.model_name,
                generation_config=build_generation_config(self.temperature),
            )
        return self._model

    async def build_parts(self, text: str, media=None) -> List:
        """Media part first (when attached), instruction text last."""
        parts = []
        if media is not None:
            encoded = await encode_media(media)
            parts.append(encoded.as_inline_data())
        parts.append({"text": build_recommendation_prompt(text, has_media=media is not None)})
        return parts

    async def request_recommendations(self, text: str, media=None) -> RecommendationResponse:
        parts = await self.build_parts(text, media)
        model = self._get_model()

        with ExecutionTimer(f"Gemini AI ({self.model_name}, {len(parts)} parts)"):
            try:
                response = await model.generate_content_async(parts)
            except Exception as e:
                raise ServiceCallError(str(e) or e.__class__.__name__) from e

        return parse_recommendation_response(_response_text(response))

    async def fetch_recommendations(self, text: str, media=None) -> RequestOutcome:
        """
        One submission, one call. Every failure ends as a single Failure outcome; nothing is retried.
        """
        try:
            response = await self.request_recommendations(text, media)
        except MoodMatchError as e:
            print(f"Recommendation Error ({e.reason}): {e.message}")
            return Failure.from_error(e)

        print(f"✓ Gemini returned {len(response.movies)} movies")
        return Success(response=response)
