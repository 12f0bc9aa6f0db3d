import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_MODEL = "gemini-2.5-flash"
MEBIBYTE = 1024 * 1024


class Settings:
    def __init__(self):
        # API_KEY is accepted as a legacy name
        self.GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
        self.GEMINI_MODEL = os.getenv("GEMINI_MODEL", DEFAULT_MODEL)
        self.GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
        self.MAX_MEDIA_BYTES = int(float(os.getenv("MAX_MEDIA_MB", "20")) * MEBIBYTE)
        self.POSTER_LOOKUP = os.getenv("POSTER_LOOKUP", "1").lower() not in ("0", "false", "no")


_settings = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
