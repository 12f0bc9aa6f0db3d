import asyncio
import os

import pytest

from moodmatch.core.errors import MediaReadError
from moodmatch.schemas.capture import MediaAttachment
from moodmatch.services.media_service import decode_media, encode_media, media_category


class _BrokenAttachment:
    name = "clip.mp4"
    mime_type = "video/mp4"

    async def read(self):
        raise OSError("disk went away")


def test_encode_then_decode_returns_original_bytes():
    data = os.urandom(4096) + b"\x00\xff"
    attachment = MediaAttachment(name="view.png", mime_type="image/png", data=data, category="image")

    part = asyncio.run(encode_media(attachment))

    assert part.mime_type == "image/png"
    assert decode_media(part) == data


def test_inline_data_part_carries_raw_bytes():
    attachment = MediaAttachment(name="a.jpg", mime_type="image/jpeg", data=b"jpeg-bytes", category="image")

    part = asyncio.run(encode_media(attachment))

    assert part.as_inline_data() == {"inline_data": {"mime_type": "image/jpeg", "data": b"jpeg-bytes"}}


def test_read_failure_is_a_media_read_error():
    with pytest.raises(MediaReadError) as excinfo:
        asyncio.run(encode_media(_BrokenAttachment()))

    assert "disk went away" in excinfo.value.message
    assert excinfo.value.reason == "media_read"


@pytest.mark.parametrize(
    "mime_type, expected",
    [("image/png", "image"), ("video/mp4", "video"), ("VIDEO/webm", "video"), ("audio/mpeg", None), ("", None)],
)
def test_media_category_from_mime_prefix(mime_type, expected):
    assert media_category(mime_type) == expected
