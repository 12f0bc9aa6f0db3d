from moodmatch.core.prompts import NO_TEXT_NOTE, RECOMMENDATION_COUNT, RESPONSE_SCHEMA, build_recommendation_prompt


def test_prompt_quotes_user_text_and_asks_for_eight_movies():
    prompt = build_recommendation_prompt("cozy rainy afternoon", has_media=False)

    assert "cozy rainy afternoon" in prompt
    assert "recommend 8 distinct movies" in prompt
    assert RECOMMENDATION_COUNT == 8
    assert "matchReason" in prompt


def test_prompt_without_text_relies_on_media_only():
    prompt = build_recommendation_prompt("", has_media=True)

    assert NO_TEXT_NOTE in prompt
    assert "image or a short video" in prompt


def test_prompt_without_media_has_no_media_instruction():
    prompt = build_recommendation_prompt("melancholic", has_media=False)

    assert "image or a short video" not in prompt
    assert NO_TEXT_NOTE not in prompt


def test_response_schema_requires_all_movie_fields():
    movie_schema = RESPONSE_SCHEMA["properties"]["movies"]["items"]

    assert RESPONSE_SCHEMA["required"] == ["moodAnalysis", "movies"]
    assert RESPONSE_SCHEMA["properties"]["moodAnalysis"]["type"] == "STRING"
    assert set(movie_schema["required"]) == {"title", "year", "genre", "description", "matchReason"}
    assert all(field["type"] == "STRING" for field in movie_schema["properties"].values())
