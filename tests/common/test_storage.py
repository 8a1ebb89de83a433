from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from santapy.common import storage


def test_get_data_dir_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("SANTAPY_DATA_DIR", str(custom))
    result = storage.get_data_dir()

    assert result == custom.resolve()


def test_get_data_dir_uses_xdg_data_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(storage.os, "name", "posix")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    result = storage.get_data_dir()

    assert result == (tmp_path / "xdg" / storage.APP_DIR_NAME).resolve()


def test_get_http_cache_path_creates_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("SANTAPY_DATA_DIR", str(tmp_path / "data-dir"))

    path = storage.get_http_cache_path()

    assert path == (tmp_path / "data-dir" / storage.HTTP_CACHE_FILENAME).resolve()
    assert path.parent.exists()
