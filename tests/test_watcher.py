"""Tests for directory and config watching."""

from pathlib import Path

from watchdog.events import (
    DirCreatedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from vault_index.index.watcher import ConfigWatcher, DirectoryWatchManager


class TestDirectoryWatchManager:
    """Tests for DirectoryWatchManager."""

    def test_replace_watches_each_directory_once(self, fake_observer):
        manager = DirectoryWatchManager(lambda d: None, observer=fake_observer)

        manager.replace([Path("/v"), Path("/v/sub"), Path("/v")])

        assert sorted(fake_observer.paths) == ["/v", "/v/sub"]
        assert manager.watched_directories == {Path("/v"), Path("/v/sub")}

    def test_replace_drops_old_watches(self, fake_observer):
        manager = DirectoryWatchManager(lambda d: None, observer=fake_observer)
        manager.replace([Path("/v"), Path("/v/old")])

        manager.replace([Path("/v"), Path("/v/new")])

        assert sorted(fake_observer.paths) == ["/v", "/v/new"]
        assert manager.watched_directories == {Path("/v"), Path("/v/new")}

    def test_replace_with_nothing_clears(self, fake_observer):
        manager = DirectoryWatchManager(lambda d: None, observer=fake_observer)
        manager.replace([Path("/v")])

        manager.replace([])

        assert fake_observer.paths == []
        assert manager.watched_directories == set()

    def test_failed_schedule_is_skipped(self, fake_observer):
        def schedule(handler, path, recursive=False, event_filter=None):
            raise FileNotFoundError(path)

        fake_observer.schedule = schedule
        manager = DirectoryWatchManager(lambda d: None, observer=fake_observer)

        manager.replace([Path("/gone")])

        assert manager.watched_directories == set()

    def test_stop_releases_watches(self, fake_observer):
        with DirectoryWatchManager(lambda d: None, observer=fake_observer) as manager:
            assert fake_observer.started
            manager.replace([Path("/v")])

        assert fake_observer.paths == []
        assert fake_observer.stopped

    def test_entry_changes_notify_parent_directory(self, fake_observer):
        changed: list[Path] = []
        manager = DirectoryWatchManager(changed.append, observer=fake_observer)
        manager.replace([Path("/v")])
        (watch,) = fake_observer.watches

        watch.handler.dispatch(FileCreatedEvent("/v/a.md"))
        watch.handler.dispatch(FileDeletedEvent("/v/b.md"))
        watch.handler.dispatch(FileMovedEvent("/v/c.md", "/v/d.md"))
        watch.handler.dispatch(DirCreatedEvent("/v/sub"))

        assert changed == [Path("/v")] * 4

    def test_content_modification_is_ignored(self, fake_observer):
        changed: list[Path] = []
        manager = DirectoryWatchManager(changed.append, observer=fake_observer)
        manager.replace([Path("/v")])
        (watch,) = fake_observer.watches

        watch.handler.dispatch(FileModifiedEvent("/v/a.md"))

        assert changed == []


class TestConfigWatcher:
    """Tests for ConfigWatcher."""

    def test_watches_config_directory(self, fake_observer, tmp_path: Path):
        config_path = tmp_path / "obsidian.json"
        watcher = ConfigWatcher(config_path, lambda: None, observer=fake_observer)

        watcher.start()

        assert fake_observer.paths == [str(tmp_path)]
        assert fake_observer.started

    def test_only_config_file_events_notify(self, fake_observer, tmp_path: Path):
        config_path = tmp_path / "obsidian.json"
        calls: list[bool] = []
        watcher = ConfigWatcher(config_path, lambda: calls.append(True), observer=fake_observer)
        watcher.start()
        (watch,) = fake_observer.watches

        watch.handler.dispatch(FileModifiedEvent(str(tmp_path / "Preferences")))
        assert calls == []

        watch.handler.dispatch(FileModifiedEvent(str(config_path)))
        watch.handler.dispatch(FileMovedEvent(str(tmp_path / "obsidian.json.tmp"), str(config_path)))

        assert calls == [True, True]
