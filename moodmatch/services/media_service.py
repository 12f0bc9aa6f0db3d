import base64
from typing import Optional

from moodmatch.core.errors import MediaReadError
from moodmatch.schemas.recommendation import EncodedMediaPart

MEDIA_CATEGORIES = {"image/": "image", "video/": "video"}


def media_category(mime_type: str) -> Optional[str]:
    """Maps a declared mime type to 'image' or 'video', None for anything else."""
    mime_type = (mime_type or "").lower()
    for prefix, category in MEDIA_CATEGORIES.items():
        if mime_type.startswith(prefix):
            return category
    return None


async def encode_media(attachment) -> EncodedMediaPart:
    """
    Reads an attachment and wraps it as a base64 payload tagged with its mime type.
    The caller enforces the size ceiling; nothing is validated here.
    """
    try:
        raw = await attachment.read()
    except (OSError, ValueError) as e:
        raise MediaReadError(f"Could not read '{getattr(attachment, 'name', 'attachment')}': {e}") from e

    if raw is None:
        raise MediaReadError()

    return EncodedMediaPart(
        data=base64.b64encode(raw).decode("ascii"),
        mime_type=attachment.mime_type,
    )


def decode_media(part: EncodedMediaPart) -> bytes:
    return base64.b64decode(part.data)
