import platform
from typing import Optional, Type

from clipmod.clipboard.base import ClipboardSource

BACKENDS = ("linux", "macos", "windows", "memory")


def get_clipboard_class(backend: Optional[str] = None) -> Type[ClipboardSource]:
    if backend is None:
        system = platform.system()
        backend = {
            "Windows": "windows",
            "Linux": "linux",
            "Darwin": "macos",
        }.get(system)
        if backend is None:
            raise NotImplementedError(f"Platform '{system}' is not supported")

    backend = backend.lower()
    if backend == "windows":
        from clipmod.clipboard.windows import WindowsClipboard
        return WindowsClipboard
    elif backend == "linux":
        from clipmod.clipboard.linux import LinuxClipboard
        return LinuxClipboard
    elif backend == "macos":
        from clipmod.clipboard.macos import MacOSClipboard
        return MacOSClipboard
    elif backend == "memory":
        from clipmod.clipboard.memory import MemoryClipboard
        return MemoryClipboard
    else:
        raise NotImplementedError(f"Clipboard backend '{backend}' is not supported")


def get_clipboard_source(backend: Optional[str] = None) -> ClipboardSource:
    clipboard_class = get_clipboard_class(backend)
    return clipboard_class()
