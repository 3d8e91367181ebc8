"""craftguide CLI.

Runs the service, chats with it from the terminal, and manages the locally
saved sessions and their summaries.
"""

import asyncio
import contextlib
import sys
from collections.abc import AsyncIterator
from datetime import datetime
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from craftguide_library.client.api import AssistantAPIClient
from craftguide_library.client.controller import ChatController
from craftguide_library.config.loader import load_config
from craftguide_library.config.settings import AssistantSettings
from craftguide_library.llm.prompts import EDITIONS
from craftguide_library.models.messages import ChatMessage
from craftguide_library.models.messages import ChatSession
from craftguide_library.models.recipe import CraftingRecipe
from craftguide_library.sessions.store import SessionStore

from .__main__ import get_log_file
from .__main__ import run

QUIT_COMMANDS = ("/quit", "/exit")


def format_recipe(recipe: CraftingRecipe) -> str:
    """Render a crafting recipe as a 3x3 text grid followed by its output."""
    cells = [["" if CraftingRecipe.is_empty_slot(item) else item for item in row] for row in recipe.grid()]
    width = max([len(item) for row in cells for item in row] + [3])
    border = "+" + "+".join(["-" * (width + 2)] * 3) + "+"

    lines = [border]
    for row in cells:
        lines.append("| " + " | ".join(item.ljust(width) for item in row) + " |")
        lines.append(border)
    lines.append(f"=> {recipe.output_amount} x {recipe.output_item}")
    return "\n".join(lines)


def format_sources(grounding: dict[str, Any] | None) -> list[str]:
    """Extract "title - uri" lines from grounding metadata."""
    if not grounding:
        return []
    sources = []
    for chunk in grounding.get("groundingChunks") or []:
        web = chunk.get("web") or {}
        uri = web.get("uri")
        if uri:
            sources.append(f"{web.get('title') or uri} - {uri}")
    return sources


def format_session_line(session: ChatSession, active_id: str | None = None) -> str:
    marker = "*" if session.id == active_id else " "
    updated = datetime.fromtimestamp(session.last_updated / 1000).strftime("%Y-%m-%d %H:%M")
    return f"{marker} {session.id}  {updated}  {len(session.messages):>3} msgs  {session.name}"


class TerminalRenderer:
    """Prints streamed model text as it arrives."""

    def __init__(self) -> None:
        self._printed: dict[str, int] = {}

    def __call__(self, session: ChatSession, message: ChatMessage | None) -> None:
        if message is None or message.role != "model" or message.id is None:
            return
        printed = self._printed.get(message.id, 0)
        text = message.text
        if len(text) > printed:
            click.echo(text[printed:], nl=False)
            self._printed[message.id] = len(text)

    def finish(self, message: ChatMessage | None, error: str | None) -> None:
        """Print whatever follows the streamed text of a finished turn."""
        click.echo()
        if message is None:
            return
        for source in format_sources(message.grounding_metadata):
            click.echo(f"  [source] {source}")
        if message.crafting_recipe is not None:
            click.echo(format_recipe(message.crafting_recipe))
        if error:
            click.echo(f"Error: {error}", err=True)


@contextlib.asynccontextmanager
async def open_controller(
    config: AssistantSettings,
    edition: str | None = None,
    renderer: TerminalRenderer | None = None,
) -> AsyncIterator[ChatController]:
    """Yield a ChatController connected to the configured service."""
    async with AssistantAPIClient(config.server_url) as api:
        store = SessionStore.default()
        yield ChatController(api, store, edition=edition or config.default_edition, on_change=renderer)


def print_sessions(store: SessionStore) -> None:
    sessions = store.get_sessions()
    if not sessions:
        click.echo("No saved sessions")
        return
    active_id = store.get_active_session_id()
    for session in sessions:
        click.echo(format_session_line(session, active_id))


async def chat_loop(config: AssistantSettings, session_id: str | None, edition: str | None) -> None:
    renderer = TerminalRenderer()
    async with open_controller(config, edition, renderer) as controller:
        if session_id:
            session = await controller.load_session(session_id)
        else:
            session = await controller.open()

        click.echo(f"Session: {session.name} ({session.id}), edition: {controller.edition}")
        click.echo("Commands: /new, /sessions, /summary, /quit")
        for message in session.messages:
            prefix = "you" if message.role == "user" else "guide"
            click.echo(f"{prefix}> {message.text}")

        while True:
            try:
                line = await asyncio.to_thread(click.prompt, "you", default="", show_default=False)
            except click.Abort:
                click.echo()
                break

            command = line.strip()
            if not command:
                continue
            if command in QUIT_COMMANDS:
                break
            if command == "/new":
                session = await controller.new_session()
                click.echo(f"Started session {session.id}")
                continue
            if command == "/sessions":
                print_sessions(controller.store)
                continue
            if command == "/summary":
                summary = await controller.refresh_summary()
                if summary is None:
                    click.echo("No summary yet")
                else:
                    click.echo(summary.model_dump_json(by_alias=True, exclude_none=True, indent=2))
                continue

            click.echo("guide> ", nl=False)
            reply = await controller.send(command)
            renderer.finish(reply, controller.last_error)


@click.group()
def cli():
    """craftguide - Minecraft help assistant."""
    pass


@cli.command()
@click.option("--host", default=None, help="Interface to bind (default from config)")
@click.option("--port", type=int, default=None, help="Port to listen on (default from config)")
@click.option("--no-log-file", is_flag=True, help="Log to stdout only")
def serve(host: str | None, port: int | None, no_log_file: bool):
    """Run the assistant API service in the foreground."""
    config = load_config()
    overrides = {key: value for key, value in (("host", host), ("port", port)) if value is not None}
    if overrides:
        config = config.model_copy(update=overrides)

    click.echo(f"Serving on http://{config.host}:{config.port}")
    run(config, None if no_log_file else get_log_file())


@cli.command()
@click.option("--session", "session_id", default=None, help="Resume a saved session by id")
@click.option("--edition", type=click.Choice(EDITIONS), default=None, help="Game edition (default from config)")
def chat(session_id: str | None, edition: str | None):
    """Chat with the assistant in the terminal."""
    config = load_config()
    try:
        asyncio.run(chat_loop(config, session_id, edition))
    except KeyError as e:
        click.echo(f"Error: {e.args[0]}", err=True)
        sys.exit(1)


@cli.group()
def sessions():
    """Manage saved chat sessions."""
    pass


@sessions.command("list")
def list_sessions():
    """List saved sessions, most recent first."""
    print_sessions(SessionStore.default())


@sessions.command("delete")
@click.argument("session_id")
def delete_session(session_id: str):
    """Delete a saved session."""
    if SessionStore.default().delete_session(session_id):
        click.echo(f"Deleted session {session_id}")
    else:
        click.echo(f"Session {session_id} not found", err=True)
        sys.exit(1)


@cli.group()
def summary():
    """Export and import session summaries."""
    pass


async def _export_summary(config: AssistantSettings, session_id: str, path: Path) -> Path:
    async with open_controller(config) as controller:
        await controller.load_session(session_id)
        return controller.export_summary(path)


async def _import_summary(config: AssistantSettings, session_id: str, path: Path) -> None:
    async with open_controller(config) as controller:
        await controller.load_session(session_id)
        controller.import_summary(path)


@summary.command("export")
@click.argument("session_id")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
def export_summary(session_id: str, path: Path):
    """Write a session's summary to a JSON file."""
    try:
        written = asyncio.run(_export_summary(load_config(), session_id, path))
    except (KeyError, ValueError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Exported summary to {written}")


@summary.command("import")
@click.argument("session_id")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def import_summary(session_id: str, path: Path):
    """Replace a session's summary with one loaded from a JSON file."""
    try:
        asyncio.run(_import_summary(load_config(), session_id, path))
    except ValidationError as e:
        click.echo(f"Error: invalid summary file ({e.error_count()} validation errors)", err=True)
        sys.exit(1)
    except (KeyError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Imported summary into session {session_id}")


@cli.command()
@click.option("-n", "--lines", default=50, help="Number of lines to show")
def logs(lines: int):
    """View the service log."""
    log_file = get_log_file()
    if not log_file.exists():
        click.echo(f"No logs found at {log_file}")
        return

    with open(log_file, encoding="utf-8") as f:
        for line in f.readlines()[-lines:]:
            click.echo(line.rstrip())


def main():
    """Entry point for craftguide CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nInterrupted")
        sys.exit(0)


if __name__ == "__main__":
    main()
