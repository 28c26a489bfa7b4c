from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_data_dir

APP_NAME = "ClipboardModifier"
HISTORY_FILE_NAME = "clipboardHistory.json"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_TRANSFORM_TIMEOUT = 2.0


def default_data_dir() -> Path:
    return Path(user_data_dir(APP_NAME, appauthor=False))


def _to_float(name: str, raw: Optional[str], default: float) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class AppConfig:
    data_dir: Path = field(default_factory=default_data_dir)
    poll_interval: float = DEFAULT_POLL_INTERVAL
    transform_timeout: float = DEFAULT_TRANSFORM_TIMEOUT
    clipboard_backend: Optional[str] = None

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if self.transform_timeout <= 0:
            raise ValueError("transform_timeout must be positive")

    @property
    def history_path(self) -> Path:
        return Path(self.data_dir) / HISTORY_FILE_NAME

    @classmethod
    def from_env(cls, *, env_path: Optional[Path] = None) -> "AppConfig":
        if env_path is not None:
            load_dotenv(dotenv_path=env_path)
        else:
            load_dotenv()

        data_dir_raw = os.getenv("CLIPMOD_DATA_DIR")
        data_dir = Path(data_dir_raw).expanduser() if data_dir_raw else default_data_dir()

        return cls(
            data_dir=data_dir,
            poll_interval=_to_float(
                "CLIPMOD_POLL_INTERVAL", os.getenv("CLIPMOD_POLL_INTERVAL"), DEFAULT_POLL_INTERVAL),
            transform_timeout=_to_float(
                "CLIPMOD_TRANSFORM_TIMEOUT", os.getenv("CLIPMOD_TRANSFORM_TIMEOUT"), DEFAULT_TRANSFORM_TIMEOUT),
            clipboard_backend=os.getenv("CLIPMOD_CLIPBOARD") or None,
        )
