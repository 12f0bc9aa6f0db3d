RECOMMENDATION_COUNT = 8

NO_TEXT_NOTE = "No text provided, strictly analyze the visual/audio content."

# Structured-output constraint handed to Gemini together with the prompt.
RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "moodAnalysis": {
            "type": "STRING",
            "description": "A creative description of the mood detected from the user's input.",
        },
        "movies": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "year": {"type": "STRING"},
                    "genre": {"type": "STRING"},
                    "description": {"type": "STRING"},
                    "matchReason": {"type": "STRING", "description": "Why this movie fits the mood."},
                },
                "required": ["title", "year", "genre", "description", "matchReason"],
            },
        },
    },
    "required": ["moodAnalysis", "movies"],
}


def build_recommendation_prompt(user_text: str, has_media: bool) -> str:
    """
        Builds the instruction text that goes last in the request parts.
        The user's words are quoted verbatim; with no words the model is told to
        read only the attached media.
    """
    user_text = (user_text or "").strip()
    quoted_input = user_text if user_text else NO_TEXT_NOTE

    # 1. PERSONA AND TASK
    base_prompt = f"""
    You are a sophisticated movie recommendation engine.
    Analyze the user's input (text and/or media) to determine their current mood or vibe.
    Based on this analysis, recommend {RECOMMENDATION_COUNT} distinct movies that perfectly match this mood.
    Treat the input as a "mood board".

    User Input Text: "{quoted_input}"
    """

    # 2. MEDIA INSTRUCTIONS
    if has_media:
        media_instruction = """
    The user attached an image or a short video. Interpret the emotional tone, color palette,
    setting and action in it, and weigh it as heavily as the text.
    """
    else:
        media_instruction = ""

    # 3. OUTPUT RULES
    requirements = f"""
    Requirements:
    1. Return exactly {RECOMMENDATION_COUNT} movies, no duplicates.
    2. Select movies that are generally available on streaming platforms.
    3. Provide a 'matchReason' that explicitly connects the movie to the specific details in the user's input.
    4. 'moodAnalysis' is a short, creative description of the mood you detected.
    """

    return base_prompt + media_instruction + requirements
