from pathlib import Path

import pytest

from clipmod.config import (
    APP_NAME,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TRANSFORM_TIMEOUT,
    HISTORY_FILE_NAME,
    AppConfig,
    default_data_dir,
)


def test_defaults():
    config = AppConfig()

    assert config.poll_interval == DEFAULT_POLL_INTERVAL == 1.0
    assert config.transform_timeout == DEFAULT_TRANSFORM_TIMEOUT
    assert config.clipboard_backend is None
    assert config.history_path == default_data_dir() / HISTORY_FILE_NAME
    assert APP_NAME in str(default_data_dir())


def test_from_env_reads_variables(monkeypatch, tmp_path):
    monkeypatch.setenv("CLIPMOD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CLIPMOD_POLL_INTERVAL", "0.5")
    monkeypatch.setenv("CLIPMOD_TRANSFORM_TIMEOUT", "3")
    monkeypatch.setenv("CLIPMOD_CLIPBOARD", "memory")

    config = AppConfig.from_env(env_path=tmp_path / "missing.env")

    assert config.data_dir == tmp_path
    assert config.poll_interval == 0.5
    assert config.transform_timeout == 3.0
    assert config.clipboard_backend == "memory"
    assert config.history_path == tmp_path / "clipboardHistory.json"


def test_from_env_loads_dotenv_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        f"CLIPMOD_DATA_DIR={tmp_path / 'data'}\nCLIPMOD_POLL_INTERVAL=2.5\n",
        encoding="utf-8",
    )

    config = AppConfig.from_env(env_path=env_file)

    assert config.data_dir == tmp_path / "data"
    assert config.poll_interval == 2.5


@pytest.mark.parametrize("value", ["fast", "0", "-1"])
def test_from_env_rejects_bad_interval(monkeypatch, tmp_path, value):
    monkeypatch.setenv("CLIPMOD_POLL_INTERVAL", value)

    with pytest.raises(ValueError):
        AppConfig.from_env(env_path=tmp_path / "missing.env")


def test_invalid_direct_values():
    with pytest.raises(ValueError):
        AppConfig(data_dir=Path("."), poll_interval=0)
    with pytest.raises(ValueError):
        AppConfig(data_dir=Path("."), transform_timeout=-1)
