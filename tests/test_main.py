"""Tests for the command line interface."""

from pathlib import Path

from click.testing import CliRunner

from vault_index.index import config
from vault_index.main import main


class TestListCommand:
    def test_lists_index_entries(self, write_config, work_vault: Path):
        config_path = write_config({"work": work_vault})

        result = CliRunner().invoke(main, ["list", "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == f"work\twork\t{work_vault}"
        assert len(lines) == 5

    def test_config_from_environment(self, write_config, work_vault: Path):
        config_path = write_config({"work": work_vault})

        result = CliRunner().invoke(main, ["list"], env={"VAULT_INDEX_CONFIG": str(config_path)})

        assert result.exit_code == 0, result.output
        assert len(result.output.splitlines()) == 5

    def test_missing_config_everywhere_fails(self, monkeypatch, tmp_path: Path):
        monkeypatch.setattr(config, "config_candidates", lambda: [tmp_path / "obsidian.json"])

        result = CliRunner().invoke(main, ["list"], env={"VAULT_INDEX_CONFIG": None})

        assert result.exit_code != 0
        assert "Obsidian config file not found" in result.output


class TestQueryCommand:
    def test_triggered_query_offers_creation(self, write_config, work_vault: Path):
        config_path = write_config({"work": work_vault})

        result = CliRunner().invoke(main, ["query", "--config", str(config_path), "todo"])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "0.00\tCreate new note in 'work'\twork · todo.md\t[create]"
        ]

    def test_global_query(self, write_config, work_vault: Path):
        config_path = write_config({"work": work_vault})

        result = CliRunner().invoke(main, ["query", "--config", str(config_path), "--global", "b"])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["1.00\tb\twork · notes/b.md\t[open]"]
