"""Side effects delegated to the desktop: obsidian:// URLs and the file manager."""

from urllib.parse import quote

import click

from vault_index.logger import logging

logger = logging.getLogger(__name__)

URL_SCHEME = "obsidian"


def percent_encoded(value: str) -> str:
    """Escape everything that is not safe inside a URL query component."""
    return quote(value, safe="")


def obsidian_url(command: str, vault: str, file: str | None = None) -> str:
    """
    Build an ``obsidian://<command>?vault=...[&file=...]`` URL.
    """
    url = f"{URL_SCHEME}://{command}?vault={percent_encoded(vault)}"
    if file is not None:
        url += f"&file={percent_encoded(file)}"
    return url


def open_url(url: str):
    logger.info("Opening %s", url)
    click.launch(url)


def reveal(path: str):
    logger.info("Revealing %s in file manager", path)
    click.launch(path, locate=True)
