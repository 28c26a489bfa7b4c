import threading
from typing import Optional

from clipmod.clipboard.base import ClipboardSource


class MemoryClipboard(ClipboardSource):
    """In-process clipboard for tests and headless runs."""

    name = "memory"

    def __init__(self, text: Optional[str] = None):
        self._lock = threading.Lock()
        self._text = text

    def _get_text(self) -> Optional[str]:
        with self._lock:
            return self._text

    def _set_text(self, text: str) -> bool:
        with self._lock:
            self._text = text
        return True

    def clear(self) -> None:
        with self._lock:
            self._text = None
