import os
from dataclasses import dataclass, field
from pathlib import Path

from vault_index.index.items import NoteItem, VaultItem
from vault_index.logger import logging

logger = logging.getLogger(__name__)

NOTE_SUFFIX = ".md"


@dataclass
class VaultScan:
    directories: list[Path] = field(default_factory=list)
    notes: list[NoteItem] = field(default_factory=list)


def is_note(file_name: str) -> bool:
    return file_name.lower().endswith(NOTE_SUFFIX)


def scan_vault(vault: VaultItem) -> VaultScan:
    """
    Collect every directory of a vault and every markdown note inside it.

    The root itself is the first directory. Symlinked directories are
    followed, but a directory whose real location was already visited during
    this scan is not descended into again. A missing root yields an empty scan.
    """
    scan = VaultScan()
    if not vault.path:
        return scan

    root = Path(vault.path)
    if not root.is_dir():
        logger.debug("Vault %s has no directory at %s", vault.identifier, root)
        return scan

    visited: set[tuple[int, int]] = set()

    def on_error(error: OSError):
        logger.debug("Skipping unreadable directory %s: %s", error.filename, error)

    for dirpath, dirnames, filenames in os.walk(root, followlinks=True, onerror=on_error):
        try:
            stat = os.stat(dirpath)
        except OSError:
            dirnames[:] = []
            continue
        if (stat.st_dev, stat.st_ino) in visited:
            logger.debug("Not descending into %s again (symlink cycle)", dirpath)
            dirnames[:] = []
            continue
        visited.add((stat.st_dev, stat.st_ino))

        directory = Path(dirpath)
        scan.directories.append(directory)
        for file_name in filenames:
            if is_note(file_name):
                relative_path = (directory / file_name).relative_to(root).as_posix()
                scan.notes.append(NoteItem(vault, relative_path))

    return scan
