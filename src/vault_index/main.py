import signal
import threading
from pathlib import Path

import click

from vault_index.errors import VaultIndexError
from vault_index.index.augmenter import QueryContext
from vault_index.index.config import find_config_path
from vault_index.index.worker import DEFAULT_DEBOUNCE, Worker


def resolve_config_path(config_path: Path | None) -> Path:
    if config_path is not None:
        return config_path
    try:
        return find_config_path()
    except VaultIndexError as e:
        raise click.ClickException(str(e)) from e


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    envvar="VAULT_INDEX_CONFIG",
    help="Path to obsidian.json. Defaults to Obsidian's config location.",
    type=click.Path(exists=True, dir_okay=False, file_okay=True, path_type=Path),
    default=None,
)

debounce_option = click.option(
    "--debounce",
    envvar="VAULT_INDEX_DEBOUNCE",
    help="Seconds to wait for filesystem events to settle before reindexing.",
    type=click.FloatRange(min=0.0),
    default=DEFAULT_DEBOUNCE,
    show_default=True,
)


@click.group("vault-index")
def main():
    """
    CLI for the Obsidian vault index.
    """
    pass


@main.command("mcp")
@config_option
@debounce_option
@click.option("--watch/--no-watch", default=True, help="Watch vaults for changes.")
def mcp_cmd(config_path: Path | None, debounce: float, watch: bool):
    """
    Run the vault index MCP server.
    """
    from vault_index.mcp_server import run_server

    run_server(resolve_config_path(config_path), watch_directories=watch, debounce=debounce)


@main.command("list")
@config_option
def list_cmd(config_path: Path | None):
    """
    Print every index entry as id, key and subtext.
    """
    worker = Worker(resolve_config_path(config_path), watch_directories=False)
    worker.rebuild()
    for entry in worker.index.entries:
        click.echo(f"{entry.item.id}\t{entry.key}\t{entry.item.subtext}")


@main.command("query")
@config_option
@click.argument("query")
@click.option("--global", "passive", is_flag=True, help="Match like a global query, without suggestions.")
@click.option("--limit", "-n", type=click.IntRange(min=1), default=8, show_default=True)
def query_cmd(config_path: Path | None, query: str, passive: bool, limit: int):
    """
    Rank vaults and notes for QUERY.
    """
    worker = Worker(resolve_config_path(config_path), watch_directories=False)
    worker.rebuild()
    results = worker.searcher.search(QueryContext(query, triggered=not passive), worker.vaults, limit)
    for result in results:
        actions = ",".join(action.id for action in result.item.actions())
        click.echo(f"{result.score:.2f}\t{result.item.text}\t{result.item.subtext}\t[{actions}]")


@main.command("watch")
@config_option
@debounce_option
def watch_cmd(config_path: Path | None, debounce: float):
    """
    Keep the index up to date and log every rebuild until interrupted.
    """
    from vault_index.background_worker import BaseController

    controller = BaseController(Worker(resolve_config_path(config_path), debounce=debounce))
    stopped = threading.Event()
    signal.signal(signal.SIGTERM, lambda *_: stopped.set())

    controller.start()
    try:
        stopped.wait()
    except KeyboardInterrupt:
        pass
    finally:
        controller.stop()


if __name__ == "__main__":
    main()
