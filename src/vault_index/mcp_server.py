import asyncio
from collections.abc import Sequence
from pathlib import Path

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from vault_index.background_worker import BaseController
from vault_index.index.messages import (
    ActionRequestMessage,
    CreateNoteRequestMessage,
    SearchRequestMessage,
    SearchResult,
)
from vault_index.index.worker import DEFAULT_DEBOUNCE, Worker
from vault_index.logger import logging

logger = logging.getLogger(__name__)

SERVER_NAME = "obsidian-vault-index"


def format_result(result: SearchResult) -> str:
    item = result.item
    actions = ", ".join(f"{action.id} ({action.label})" for action in item.actions())
    return "\n".join(
        [
            f"id: {item.id}",
            f"text: {item.text}",
            f"subtext: {item.subtext}",
            f"score: {result.score:.3f}",
            f"actions: {actions}",
        ]
    )


def format_results(results: Sequence[SearchResult]) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=format_result(result)) for result in results]


def _require(arguments: dict | None, *names: str) -> list[str]:
    if not arguments:
        raise ValueError("Missing arguments")
    values = []
    for name in names:
        value = arguments.get(name)
        if not isinstance(value, str) or not value:
            raise ValueError(f"Missing {name}")
        values.append(value)
    return values


def _parse_limit(arguments: dict, default: int = 8) -> int:
    limit = arguments.get("limit", default)
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValueError("limit must be an integer")
    if limit < 1:
        raise ValueError("limit must be positive")
    return limit


def run_server(
    config_path: Path,
    watch_directories: bool = True,
    debounce: float = DEFAULT_DEBOUNCE,
):
    server = Server(SERVER_NAME)
    worker = Worker(config_path, watch_directories=watch_directories, debounce=debounce)
    worker_controller = BaseController(worker)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        """
        List available tools.
        Each tool specifies its arguments using JSON Schema validation.
        """
        return [
            types.Tool(
                name="search-notes",
                description="Find Obsidian vaults and notes by name or path",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {"type": "string"},
                        "limit": {"type": "integer", "minimum": 1},
                    },
                    "required": ["query"],
                },
            ),
            types.Tool(
                name="run-action",
                description="Run an action (open, search, openfm) of a vault or note found by search-notes",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "item_id": {"type": "string"},
                        "action_id": {"type": "string"},
                    },
                    "required": ["item_id", "action_id"],
                },
            ),
            types.Tool(
                name="create-note",
                description="Create a new note in a vault and open it in Obsidian",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "vault": {"type": "string", "description": "Vault id"},
                        "name": {"type": "string"},
                    },
                    "required": ["vault", "name"],
                },
            ),
        ]

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: dict | None) -> list[types.TextContent]:
        """
        Handle tool execution requests.
        """
        if name == "search-notes":
            (query,) = _require(arguments, "query")
            limit = _parse_limit(arguments)  # type: ignore[arg-type]
            resp = await worker_controller.request(SearchRequestMessage(query, limit=limit))
            return format_results(resp.results)

        if name == "run-action":
            item_id, action_id = _require(arguments, "item_id", "action_id")
            try:
                await worker_controller.request(ActionRequestMessage(item_id, action_id))
            except KeyError as e:
                raise ValueError(str(e)) from e
            return [types.TextContent(type="text", text=f"Ran {action_id} on {item_id}")]

        if name == "create-note":
            vault_id, note_name = _require(arguments, "vault", "name")
            try:
                await worker_controller.request(CreateNoteRequestMessage(vault_id, note_name))
            except KeyError as e:
                raise ValueError(str(e)) from e
            return [types.TextContent(type="text", text=f"Creating {note_name.strip()}.md in {vault_id}")]

        raise ValueError(f"Unknown tool: {name}")

    async def run_server():
        worker_controller.start()
        # Run the server using stdin/stdout streams
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version="0.1.0",
                    capabilities=server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )

        worker_controller.stop()

    logger.info("Starting server")

    asyncio.run(run_server())
