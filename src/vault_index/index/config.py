"""Reading vaults from Obsidian's own ``obsidian.json``."""

import sys
from pathlib import Path
from typing import Any

import click
import pydantic

from vault_index.errors import ConfigNotFoundError
from vault_index.index.items import VaultItem
from vault_index.logger import logging

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "obsidian.json"
APP_NAME = "obsidian"

FLATPAK_CONFIG_DIR = Path(".var", "app", "md.obsidian.Obsidian", "config", APP_NAME)
SNAP_CONFIG_DIR = Path("snap", APP_NAME, "current", ".config", APP_NAME)


def _object_or_empty(value: Any) -> Any:
    # Anything that is not a JSON object reads as an empty one
    return value if isinstance(value, dict) else {}


class VaultEntry(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    path: str = ""

    @pydantic.model_validator(mode="before")
    @classmethod
    def _coerce_entry(cls, data: Any) -> Any:
        return _object_or_empty(data)

    @pydantic.field_validator("path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class ObsidianConfig(pydantic.BaseModel):
    """The subset of ``obsidian.json`` this package cares about."""

    model_config = pydantic.ConfigDict(extra="ignore")

    vaults: dict[str, VaultEntry] = pydantic.Field(default_factory=dict)

    @pydantic.model_validator(mode="before")
    @classmethod
    def _coerce_document(cls, data: Any) -> Any:
        data = _object_or_empty(data)
        return {**data, "vaults": _object_or_empty(data.get("vaults"))}


def read_vaults(config_path: Path) -> list[VaultItem]:
    """
    Parse the vault list out of ``config_path``.

    Best effort: a missing, unreadable or malformed file is logged and yields
    no vaults. Entries without a usable ``path`` are kept with an empty path.
    """
    try:
        raw = config_path.read_bytes()
    except OSError as e:
        logger.warning("Failed to read Obsidian config %s: %s", config_path, e)
        return []

    try:
        config = ObsidianConfig.model_validate_json(raw)
    except pydantic.ValidationError as e:
        logger.warning("Failed to parse Obsidian config %s: %s", config_path, e)
        return []

    vaults = [VaultItem(identifier, entry.path) for identifier, entry in config.vaults.items()]
    for vault in vaults:
        logger.debug("Found vault: %s %s", vault.name, vault.path)
    return vaults


def config_candidates() -> list[Path]:
    """
    Directories that may hold ``obsidian.json``, in probing order.

    The platform's regular config location comes first; on Linux the Flatpak
    and Snap sandboxes follow.
    """
    candidates = [Path(click.get_app_dir(APP_NAME))]
    if sys.platform.startswith("linux"):
        home = Path.home()
        candidates += [home / FLATPAK_CONFIG_DIR, home / SNAP_CONFIG_DIR]
    return [directory / CONFIG_FILE_NAME for directory in candidates]


def find_config_path(candidates: list[Path] | None = None) -> Path:
    """
    Return the first existing configuration file.

    Raises:
        ConfigNotFoundError: If none of the candidates exist.
    """
    if candidates is None:
        candidates = config_candidates()

    for path in candidates:
        if path.is_file():
            logger.info("Using Obsidian config %s", path)
            return path

    probed = ", ".join(str(path) for path in candidates)
    raise ConfigNotFoundError(f"Obsidian config file not found. Looked in: {probed}")
