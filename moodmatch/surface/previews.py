import uuid
from typing import Dict, Optional, Tuple


class PreviewStore:
    """Transient preview handles for attached media. Released handles stop resolving."""

    def __init__(self):
        self._items: Dict[str, Tuple[str, bytes]] = {}

    def create(self, mime_type: str, data: bytes) -> str:
        handle = uuid.uuid4().hex
        self._items[handle] = (mime_type, data)
        return handle

    def get(self, handle: str) -> Optional[Tuple[str, bytes]]:
        return self._items.get(handle)

    def release(self, handle: Optional[str]) -> None:
        if handle:
            self._items.pop(handle, None)

    def __contains__(self, handle: str) -> bool:
        return handle in self._items

    def __len__(self) -> int:
        return len(self._items)
