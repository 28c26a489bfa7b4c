import os
import shutil
import subprocess
from typing import Callable, List, Optional

from clipmod.clipboard.base import ClipboardSource
from clipmod.exceptions import ClipboardError


class LinuxClipboard(ClipboardSource):
    """Clipboard through wl-clipboard on Wayland, xclip on X11."""

    name = "linux"

    _TEXT_TARGETS = (
        "text/plain;charset=utf-8",
        "text/plain;charset=utf8",
        "utf8_string",
        "text/plain",
        "string",
    )
    _READ_TIMEOUT = 1.5
    _WRITE_TIMEOUT = 2.0

    def _get_text(self) -> Optional[str]:
        strategies = (
            self._from_wayland,
            self._from_xclip,
        )

        for strategy in strategies:
            result = strategy()
            if result is not None:
                return result
        return None

    def _from_wayland(self) -> Optional[str]:
        if not self._has_wayland():
            return None

        types = self._parse_type_list(
            self._run_command(["wl-paste", "--list-types"], timeout=self._READ_TIMEOUT)
        )

        def reader(target: str) -> Optional[bytes]:
            return self._run_command(
                ["wl-paste", "--no-newline", "--type", target],
                timeout=self._READ_TIMEOUT,
            )

        return self._read_text_target(types, reader)

    def _from_xclip(self) -> Optional[str]:
        if not shutil.which("xclip"):
            return None

        types = self._parse_type_list(
            self._run_command(
                ["xclip", "-selection", "clipboard", "-t", "TARGETS", "-o"],
                timeout=self._READ_TIMEOUT,
            )
        )

        def reader(target: str) -> Optional[bytes]:
            return self._run_command(
                ["xclip", "-selection", "clipboard", "-t", target, "-o"],
                timeout=self._READ_TIMEOUT,
            )

        return self._read_text_target(types, reader)

    def _read_text_target(
        self,
        types: List[str],
        reader: Callable[[str], Optional[bytes]],
    ) -> Optional[str]:
        available = {target.lower(): target for target in types}
        for target in self._TEXT_TARGETS:
            if target in available:
                data = reader(available[target])
                if data is not None:
                    return data.decode("utf-8", errors="replace")
        return None

    def _parse_type_list(self, data: Optional[bytes]) -> List[str]:
        if not data:
            return []
        text = data.decode("utf-8", errors="ignore")
        return [line.strip() for line in text.splitlines() if line.strip()]

    def _run_command(self, command: List[str], timeout: float) -> Optional[bytes]:
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                timeout=timeout,
            )
            return result.stdout
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
            return None

    def _has_wayland(self) -> bool:
        return bool(os.environ.get("WAYLAND_DISPLAY")) and shutil.which("wl-paste") is not None

    def _set_text(self, text: str) -> bool:
        if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
            command = ["wl-copy", "--type", "text/plain;charset=utf-8"]
        elif shutil.which("xclip"):
            command = ["xclip", "-selection", "clipboard", "-t", "UTF8_STRING"]
        else:
            raise ClipboardError("Neither wl-copy nor xclip is available")

        try:
            subprocess.run(
                command,
                input=text.encode("utf-8"),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
                timeout=self._WRITE_TIMEOUT,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            raise ClipboardError(f"{command[0]} failed", e) from e
        return True
