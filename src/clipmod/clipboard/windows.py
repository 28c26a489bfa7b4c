import time
from typing import Optional

import win32clipboard as wc
import win32con

from clipmod.clipboard.base import ClipboardSource
from clipmod.exceptions import ClipboardError


class WindowsClipboard(ClipboardSource):
    """Win32 clipboard, CF_UNICODETEXT only."""

    name = "windows"

    _OPEN_ATTEMPTS = 3
    _OPEN_BACKOFF = 0.05

    def _open(self) -> None:
        # Other processes hold the clipboard open for short bursts.
        last_error = None
        for _ in range(self._OPEN_ATTEMPTS):
            try:
                wc.OpenClipboard()
                return
            except Exception as e:
                last_error = e
                time.sleep(self._OPEN_BACKOFF)
        raise ClipboardError("Could not open the clipboard", last_error)

    def _get_text(self) -> Optional[str]:
        self._open()
        try:
            if not wc.IsClipboardFormatAvailable(win32con.CF_UNICODETEXT):
                return None
            text = wc.GetClipboardData(win32con.CF_UNICODETEXT)
        finally:
            wc.CloseClipboard()

        if text is None:
            return None
        return str(text)

    def _set_text(self, text: str) -> bool:
        self._open()
        try:
            wc.EmptyClipboard()
            wc.SetClipboardData(win32con.CF_UNICODETEXT, text)
        finally:
            wc.CloseClipboard()
        return True
