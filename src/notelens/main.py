import asyncio
import logging
import re
from pathlib import Path
from typing import Optional

import typer
from rich import print, print_json
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from notelens.config import Settings, get_settings
from notelens.core.browser import NoteBrowser
from notelens.core.errors import NoteStoreError
from notelens.core.interfaces import INoteStore
from notelens.core.models import BrowserSnapshot
from notelens.stores.http import HttpNoteStore
from notelens.stores.memory import InMemoryNoteStore

logger = logging.getLogger(__name__)

APP_HELP = """
notelens: incremental note search with highlighted previews.

Searches a vault server (or a local directory of notes with --demo), selects
a result and prints its content with every match of the query marked.
"""

MARK_PATTERN = re.compile(r"<mark[^>]*>(.*?)</mark>", re.DOTALL)

app = typer.Typer(name="notelens", help=APP_HELP, no_args_is_help=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _to_rich(markup: str) -> Text:
    """Render marker spans as styled text; everything else stays literal."""
    text = Text()
    cursor = 0
    for match in MARK_PATTERN.finditer(markup):
        text.append(markup[cursor:match.start()])
        text.append(match.group(1), style="bold black on yellow")
        cursor = match.end()
    text.append(markup[cursor:])
    return text


def _render(snapshot: BrowserSnapshot) -> None:
    table = Table(title=f"Results for '{escape(snapshot.query)}'" if snapshot.query else "All notes")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Note")
    for index, identifier in enumerate(snapshot.result_set):
        marker = "[bold cyan]>[/bold cyan] " if index == snapshot.selected_index else "  "
        table.add_row(str(index), f"{marker}{escape(identifier)}")
    print(table)

    if snapshot.last_error:
        print(f"[red]{escape(snapshot.last_error)}[/red]")
    if snapshot.selected_identifier is None:
        print("[yellow]No matching notes.[/yellow]")
        return

    print(Panel(_to_rich(snapshot.highlighted_content), title=escape(snapshot.selected_identifier)))


async def _run_search(
    store: INoteStore,
    settings: Settings,
    query: str,
    select: int,
    highlights: bool,
) -> BrowserSnapshot:
    async with NoteBrowser(store, settings=settings) as browser:
        await browser.initialize()
        browser.set_query_text(query)
        await browser.settle()
        browser.set_selection_index(select)
        if not highlights:
            browser.dismiss_highlights()
        await browser.settle()
        return browser.snapshot()


def _open_store(url: Optional[str], demo: Optional[Path], settings: Settings) -> INoteStore:
    if demo is not None:
        return InMemoryNoteStore.from_directory(demo)
    return HttpNoteStore(base_url=url, settings=settings)


@app.command()
def search(
    query: str = typer.Argument("", help="Search query (empty lists every note)"),
    select: int = typer.Option(0, "--select", "-s", help="Index of the result to preview"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Vault server URL (overrides NOTELENS_VAULT_URL)"),
    demo: Optional[Path] = typer.Option(None, "--demo", help="Search a local directory of .md notes instead of a server"),
    highlights: bool = typer.Option(True, "--highlights/--no-highlights", help="Mark query matches in the preview"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, ...)"),
):
    """Search notes and preview the selected one."""
    settings = get_settings()
    _configure_logging(log_level or settings.log_level)

    try:
        store = _open_store(url, demo, settings)
    except NoteStoreError as e:
        print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    async def run() -> BrowserSnapshot:
        try:
            return await _run_search(store, settings, query, select, highlights)
        finally:
            if isinstance(store, HttpNoteStore):
                await store.aclose()

    snapshot = asyncio.run(run())
    _render(snapshot)
    if snapshot.last_error and not snapshot.result_set:
        raise typer.Exit(code=1)


@app.command()
def config(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show effective settings."""
    settings = get_settings()
    data = settings.model_dump(mode="json")
    if json_output:
        print_json(data=data)
        return

    table = Table(title="notelens settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, str(value))
    print(table)


if __name__ == "__main__":
    app()
