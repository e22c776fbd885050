from __future__ import annotations

import pytest

from helpers import FakeFilesystem, TickingClock


@pytest.fixture(autouse=True)
def _isolate_home(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Keep the developer's real data and config directories out of tests."""

    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.delenv("SAVE_MANAGER_DATA_DIR", raising=False)
    monkeypatch.delenv("SAVE_MANAGER_DEBUG", raising=False)


@pytest.fixture
def fake_fs() -> FakeFilesystem:
    return FakeFilesystem()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()
