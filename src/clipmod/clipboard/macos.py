from typing import Optional

try:
    from AppKit import NSPasteboard, NSPasteboardTypeString
    HAS_APPKIT = True
except ImportError:
    HAS_APPKIT = False

from clipmod.clipboard.base import ClipboardSource
from clipmod.exceptions import ClipboardError


class MacOSClipboard(ClipboardSource):
    """General pasteboard through pyobjc, plain string type only."""

    name = "macos"

    def _get_text(self) -> Optional[str]:
        if not HAS_APPKIT:
            raise ClipboardError("AppKit is not available")

        pasteboard = NSPasteboard.generalPasteboard()
        types = pasteboard.types() or []
        if NSPasteboardTypeString not in types:
            return None

        text = pasteboard.stringForType_(NSPasteboardTypeString)
        if text is None:
            return None
        return str(text)

    def _set_text(self, text: str) -> bool:
        if not HAS_APPKIT:
            raise ClipboardError("AppKit is not available")

        pasteboard = NSPasteboard.generalPasteboard()
        pasteboard.clearContents()
        return bool(pasteboard.setString_forType_(text, NSPasteboardTypeString))
