from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

import pytest

from clipmod.clipboard.base import ClipboardSource
from clipmod.clipboard.memory import MemoryClipboard
from clipmod.database.history_file import HistoryFile
from clipmod.services.notification_service import NotificationBus

ENV_VARS = (
    "CLIPMOD_DATA_DIR",
    "CLIPMOD_POLL_INTERVAL",
    "CLIPMOD_TRANSFORM_TIMEOUT",
    "CLIPMOD_CLIPBOARD",
)


class FakeClock:
    """Deterministic clock that moves forward one second per call."""

    def __init__(self, start: Optional[datetime] = None, step: float = 1.0):
        self.now = start or datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
        self.step = timedelta(seconds=step)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


class ScriptedClipboard(ClipboardSource):
    """Returns the given values one per read, then keeps returning the last."""

    name = "scripted"

    def __init__(self, values: Iterable[Optional[str]]):
        self.values: List[Optional[str]] = list(values)
        self.reads = 0
        self.written: List[str] = []

    def _get_text(self) -> Optional[str]:
        index = min(self.reads, len(self.values) - 1)
        self.reads += 1
        value = self.values[index]
        if isinstance(value, Exception):
            raise value
        return value

    def _set_text(self, text: str) -> bool:
        self.written.append(text)
        return True


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    # setenv then delenv so anything load_dotenv adds is removed afterwards
    for name in ENV_VARS:
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)


@pytest.fixture
def history_path(tmp_path):
    return tmp_path / "ClipboardModifier" / "clipboardHistory.json"


@pytest.fixture
def history_file(history_path):
    return HistoryFile(history_path)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def bus():
    bus = NotificationBus()
    yield bus
    bus.close()


@pytest.fixture
def memory_clipboard():
    return MemoryClipboard()
