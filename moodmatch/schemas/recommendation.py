import base64
from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- MEDIA PAYLOAD ---

# Transport-safe form of an attachment, built fresh for every submission
class EncodedMediaPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: str
    mime_type: str

    def as_inline_data(self) -> dict:
        """Request part in the shape google-generativeai accepts for inline media."""
        return {"inline_data": {"mime_type": self.mime_type, "data": base64.b64decode(self.data)}}


# --- GEMINI REPLY SCHEMAS ---

# A single recommended movie. Field aliases are the camelCase names Gemini returns.
# Blank fields are rejected so a half-filled card never reaches the page.
class Movie(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(min_length=1)
    year: str = Field(min_length=1)
    genre: str = Field(min_length=1)
    description: str = Field(min_length=1)
    match_reason: str = Field(alias="matchReason", min_length=1)

    @field_validator("year", mode="before")
    @classmethod
    def year_as_text(cls, value):
        # Gemini sometimes answers 1994 instead of "1994"
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value))
        return value


class RecommendationResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mood_analysis: str = Field(alias="moodAnalysis")
    movies: List[Movie]


# --- REQUEST OUTCOME ---

class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    response: RecommendationResponse


class Failure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    reason: str
    message: str

    @classmethod
    def from_error(cls, error) -> "Failure":
        return cls(reason=error.reason, message=error.message)


RequestOutcome = Union[Success, Failure]


# --- RENDERED RESULTS ---

class PosterFound(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["found"] = "found"
    url: str


class PosterFallback(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["fallback"] = "fallback"
    glyph: str = "🎞"
    label: str = "Poster Unavailable"


PosterLookup = Union[PosterFound, PosterFallback]


class MovieCardView(BaseModel):
    index: int
    movie: Movie
    poster: PosterLookup = Field(discriminator="kind")


class ResultsView(BaseModel):
    mood_analysis: str
    cards: List[MovieCardView]
