"""Shared test fixtures."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest


class FakeWatch:
    def __init__(self, path: str, handler):
        self.path = path
        self.handler = handler


class FakeObserver:
    """Records schedule/unschedule calls instead of talking to the OS."""

    def __init__(self):
        self.watches: list[FakeWatch] = []
        self.started = False
        self.stopped = False

    @property
    def paths(self) -> list[str]:
        return [watch.path for watch in self.watches]

    def schedule(self, handler, path, recursive=False, event_filter=None):
        assert recursive is False
        watch = FakeWatch(path, handler)
        self.watches.append(watch)
        return watch

    def unschedule(self, watch):
        self.watches.remove(watch)

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def join(self, timeout=None):
        pass


@pytest.fixture
def fake_observer() -> FakeObserver:
    return FakeObserver()


@pytest.fixture
def work_vault(tmp_path: Path) -> Path:
    """A vault with two notes, one in a subfolder, and an image."""
    vault = tmp_path / "work"
    vault.mkdir()
    (vault / "a.md").write_text("# A")
    notes = vault / "notes"
    notes.mkdir()
    (notes / "b.md").write_text("# B")
    (vault / "img.png").write_bytes(b"\x89PNG")
    return vault


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[dict], Path]:
    """Write an obsidian.json listing the given id -> path vaults."""
    config_path = tmp_path / "obsidian" / "obsidian.json"

    def write(vaults: dict[str, Path | str]) -> Path:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        document = {
            "vaults": {
                identifier: {"path": str(path), "ts": 1700000000000, "open": True}
                for identifier, path in vaults.items()
            }
        }
        config_path.write_text(json.dumps(document))
        return config_path

    return write


@pytest.fixture
def launched(monkeypatch) -> list[tuple[str, bool]]:
    """Capture click.launch calls as (target, locate)."""
    calls: list[tuple[str, bool]] = []

    def fake_launch(url, wait=False, locate=False):
        calls.append((url, locate))
        return 0

    monkeypatch.setattr("click.launch", fake_launch)
    return calls


@pytest.fixture
def config_observer() -> FakeObserver:
    """A second fake observer for the config watcher."""
    return FakeObserver()
