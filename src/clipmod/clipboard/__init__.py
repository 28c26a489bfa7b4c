from clipmod.clipboard.base import ClipboardSource
from clipmod.clipboard.factory import BACKENDS, get_clipboard_class, get_clipboard_source
from clipmod.clipboard.memory import MemoryClipboard

__all__ = [
    'BACKENDS',
    'ClipboardSource',
    'MemoryClipboard',
    'get_clipboard_class',
    'get_clipboard_source',
]
