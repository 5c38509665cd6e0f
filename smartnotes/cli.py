from __future__ import annotations
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.table import Table
from rich.markdown import Markdown

from . import config
from .controller import (
    BeginEdit, ClearAll, Controller, Delete, Export, FilterTag, Import, Pin,
    Save, Search, ThemeToggle, build_controller,
)
from .exceptions import SmartNotesError
from .log import configure_logging
from .query import ProjectedNote

app = typer.Typer(help="Smart Notes: local notes with tags, pins and search")
console = Console()

@app.callback()
def _boot():
    configure_logging()


def _controller(yes: bool = False) -> Controller:
    return build_controller(confirm=lambda prompt: yes or typer.confirm(prompt))


def _run(c: Controller, intent):
    try:
        return c.dispatch(intent)
    except SmartNotesError as e:
        console.print(f"[red]Error[/]: {e}")
        raise typer.Exit(1)


def _table(title: str, items: list[ProjectedNote]) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Tags", style="magenta")
    table.add_column("Updated")
    for item in items:
        n = item.note
        table.add_row(
            str(item.index), n.title, ", ".join(n.tags[:6]),
            n.updated_at.isoformat(timespec="minutes"),
        )
    return table


def _print_list(title: str, items: list[ProjectedNote]):
    if not items:
        console.print(f"[bold]{title}[/]")
        console.print("[dim]No notes[/]")
        return
    console.print(_table(title, items))


@app.command()
def add(
    title: str = typer.Option("", "--title", "-t"),
    body: str = typer.Option("", "--body", "-b"),
    tags: str = typer.Option("", "--tags", "-g", help="comma separated"),
):
    c = _controller()
    c.draft.title, c.draft.body, c.draft.tags = title, body, tags
    n = _run(c, Save())
    console.print(f"[green]Created[/] #{len(c.store.notes) - 1}: {n.title}")

@app.command("list")
def _list(
    search: str = typer.Option("", "--search", "-s"),
    tag: str = typer.Option("", "--tag"),
):
    c = _controller()
    c.dispatch(Search(search))
    c.dispatch(FilterTag(tag))
    view = c.view()
    _print_list("Pinned", view.projection.pinned)
    _print_list("Notes", view.projection.unpinned)

@app.command()
def show(index: int):
    c = _controller()
    n = c.store.get(index)
    if not n:
        console.print(f"[red]Not found[/]: {index}")
        raise typer.Exit(1)
    console.rule(f"#{index} {n.title}{' (pinned)' if n.pinned else ''}")
    if n.tags:
        console.print(f"[dim]tags:[/] {', '.join(n.tags)}")
    console.print(Markdown(n.body or "_<empty>_"))
    console.print(f"[dim]created:[/] {n.created_at.isoformat(timespec='seconds')}  "
                  f"[dim]updated:[/] {n.updated_at.isoformat(timespec='seconds')}")

@app.command()
def edit(
    index: int,
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    body: Optional[str] = typer.Option(None, "--body", "-b"),
    tags: Optional[str] = typer.Option(None, "--tags", "-g"),
):
    c = _controller()
    if c.dispatch(BeginEdit(index)) is None:
        console.print(f"[red]Not found[/]: {index}")
        raise typer.Exit(1)
    if title is not None:
        c.draft.title = title
    if body is not None:
        c.draft.body = body
    if tags is not None:
        c.draft.tags = tags
    n = _run(c, Save())
    console.print(f"[green]Updated[/] #{index}: {n.title}")

@app.command()
def delete(index: int, yes: bool = typer.Option(False, "--yes", "-y")):
    c = _controller(yes)
    if _run(c, Delete(index)):
        console.print(f"[yellow]Deleted[/] #{index}")
    else:
        console.print("[dim]Nothing deleted[/]")

@app.command()
def pin(index: int):
    c = _controller()
    n = _run(c, Pin(index))
    if n is None:
        console.print(f"[red]Not found[/]: {index}")
        raise typer.Exit(1)
    label = "[green]Pinned[/]" if n.pinned else "[yellow]Unpinned[/]"
    console.print(f"{label} #{index}: {n.title}")

@app.command()
def clear(yes: bool = typer.Option(False, "--yes", "-y")):
    c = _controller(yes)
    if _run(c, ClearAll()):
        console.print("[red]Cleared[/] all notes")
    else:
        console.print("[dim]Nothing cleared[/]")

@app.command()
def tags():
    c = _controller()
    for t in c.view().tags:
        console.print(t)

@app.command()
def export(to: Path = typer.Option(Path(config.EXPORT_FILENAME), "--to")):
    c = _controller()
    blob = _run(c, Export())
    try:
        to.write_text(blob, encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Failed to export[/]: {e}")
        raise typer.Exit(1)
    console.print(f"[green]Exported[/] {len(c.store.notes)} notes → {to}")

@app.command("import")
def import_(from_: Path = typer.Option(..., "--from")):
    c = _controller()
    try:
        text = from_.read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Failed to import[/]: {e}")
        raise typer.Exit(1)
    count = _run(c, Import(text))
    console.print(f"[green]Imported[/] {count} notes")

@app.command()
def theme(toggle: bool = typer.Option(False, "--toggle")):
    c = _controller()
    if toggle:
        _run(c, ThemeToggle())
    console.print(f"theme: {c.theme}")

@app.command()
def dictate():
    c = _controller()
    if c.dictation is None or not c.dictation.available:
        console.print("[yellow]Voice not supported[/]: no speech source configured")
        raise typer.Exit(1)
    c.dictation.toggle()
    console.print("Listening…" if c.dictation.listening else "Stopped")

def main():
    app()

if __name__ == "__main__":
    main()
