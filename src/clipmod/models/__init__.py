from .entry import ClipboardEntry
from .modifier import BUILTIN_MODIFIERS, ModifierScript, get_modifier

__all__ = [
    "ClipboardEntry",
    "ModifierScript",
    "BUILTIN_MODIFIERS",
    "get_modifier",
]
