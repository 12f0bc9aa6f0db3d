"""
Error taxonomy. Every failure a submission can hit is one of these, so the
submission boundary can turn it into a single user-facing message.
"""


class MoodMatchError(Exception):
    reason = "unexpected"
    status_code = 500
    default_message = "Something went wrong while analyzing your mood."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class OversizedMediaError(MoodMatchError):
    reason = "oversized_media"
    status_code = 413
    default_message = "File too large (max 20MB). Please try a shorter clip or smaller image."


class UnsupportedMediaError(MoodMatchError):
    reason = "unsupported_media"
    status_code = 415
    default_message = "Only images and short videos are supported."


class MediaReadError(MoodMatchError):
    reason = "media_read"
    status_code = 400
    default_message = "The attached file could not be read."


class ServiceCallError(MoodMatchError):
    reason = "service_call"
    status_code = 502
    default_message = "The recommendation service could not be reached."


class MalformedResponseError(MoodMatchError):
    reason = "malformed_response"
    status_code = 502
    default_message = "The recommendation service returned an unreadable answer."


class TranscriptionUnavailableError(MoodMatchError):
    reason = "transcription_unavailable"
    status_code = 400
    default_message = "Voice input is not supported in this browser. Please try Chrome, Edge, or Safari."
