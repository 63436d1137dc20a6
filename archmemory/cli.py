"""CLI entry point for archmemory."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich import print as rprint

from archmemory.activity import read_activity_log
from archmemory.config import MEMORY_DIR_NAME, Config
from archmemory.context import build_context
from archmemory.markdown.codec import normalize_markdown, parse_markdown
from archmemory.markdown.models import DocumentKind, to_dict
from archmemory.storage.memory import NOTE_DIRS, MemoryStore

app = typer.Typer(help="Manage architecture memory documents and build chat context from them.")


def _open_store(config: Config) -> MemoryStore:
    store = MemoryStore.from_config(config)
    if store is None:
        rprint(f"[red]Config error: {config.validate()[0]}[/red]")
        raise typer.Exit(1)
    return store


def _document_path(store: MemoryStore, kind: str, project: str | None, org: bool) -> Path:
    if DocumentKind.lookup(kind) is None:
        kinds = ", ".join(k.value for k in DocumentKind)
        rprint(f"[red]Unknown document kind '{kind}'. Expected one of: {kinds}[/red]")
        raise typer.Exit(1)
    if not org and not project:
        rprint("[red]No project given. Use --project, --org, or set ARCHMEMORY_PROJECT.[/red]")
        raise typer.Exit(1)
    try:
        return store.document_path(kind, None if org else project)
    except ValueError as e:
        rprint(f"[red]{e}[/red]")
        raise typer.Exit(1)


@app.command()
def projects() -> None:
    """List the projects in the architecture memory."""
    config = Config.load()
    store = _open_store(config)
    names = store.list_projects()
    if not names:
        rprint(f"[yellow]No projects found under {store.projects_path}[/yellow]")
        rprint("Create one with [bold]archmemory new-project <name>[/bold]")
        return
    rprint("[bold]Projects:[/bold]")
    for name in names:
        marker = " [green](active)[/green]" if name == config.project else ""
        rprint(f"  {name}{marker}")


@app.command("new-project")
def new_project(
    name: str = typer.Argument(help="Project name (directory under projects/)"),
) -> None:
    """Create a project with an empty document of every kind."""
    config = Config.load()
    memory_path = config.resolve_memory_path() or config.memory_path or config.workspace / MEMORY_DIR_NAME
    store = MemoryStore(memory_path)
    store.ensure_directories()

    if name in store.list_projects():
        rprint(f"[red]Project '{name}' already exists.[/red]")
        raise typer.Exit(1)

    result = store.create_project(name)
    if not result.success:
        rprint(f"[red]{result.message}[/red]")
        raise typer.Exit(1)
    rprint(f"[green]{result.message}[/green] in {store.project_path(name)}")


@app.command()
def show(
    kind: str = typer.Argument(help="Document kind, e.g. risks or decisions"),
    project: str = typer.Option(None, "--project", "-p", help="Project name (defaults to ARCHMEMORY_PROJECT)"),
    org: bool = typer.Option(False, "--org", help="Read the organization-level document"),
) -> None:
    """Print a document's parsed fields as JSON."""
    config = Config.load()
    store = _open_store(config)
    path = _document_path(store, kind, project or config.project, org)
    if not path.is_file():
        rprint(f"[red]Document not found: {path}[/red]")
        raise typer.Exit(1)

    document = parse_markdown(path.read_text(encoding="utf-8"), kind)
    typer.echo(json.dumps(to_dict(document), indent=2, ensure_ascii=False))


@app.command("format")
def format_document(
    kind: str = typer.Argument(help="Document kind, e.g. risks or decisions"),
    project: str = typer.Option(None, "--project", "-p", help="Project name (defaults to ARCHMEMORY_PROJECT)"),
    org: bool = typer.Option(False, "--org", help="Format the organization-level document"),
    check: bool = typer.Option(False, "--check", help="Only report whether the file is canonical"),
) -> None:
    """Rewrite a document in canonical markdown.

    Formatting outside the recognized fields is dropped, exactly as when the
    document is saved from the editor.
    """
    config = Config.load()
    store = _open_store(config)
    path = _document_path(store, kind, project or config.project, org)
    if not path.is_file():
        rprint(f"[red]Document not found: {path}[/red]")
        raise typer.Exit(1)

    original = path.read_text(encoding="utf-8")
    canonical = normalize_markdown(original, kind)
    if canonical == original:
        rprint(f"[green]{path} is already canonical[/green]")
        return
    if check:
        rprint(f"[yellow]{path} would be reformatted[/yellow]")
        raise typer.Exit(1)

    path.write_text(canonical, encoding="utf-8")
    rprint(f"[green]Reformatted {path}[/green]")


@app.command()
def context(
    query: str = typer.Argument("", help="Question used to pick relevant saved notes"),
    project: str = typer.Option(None, "--project", "-p", help="Project name (defaults to ARCHMEMORY_PROJECT)"),
) -> None:
    """Print the architecture context that would be sent to the chat model."""
    config = Config.load()
    store = MemoryStore.from_config(config)
    if store is None:
        rprint("[yellow]No architecture_memory directory found, using the default context.[/yellow]")
    try:
        text = build_context(store, project or config.project, query)
    except ValueError as e:
        rprint(f"[red]{e}[/red]")
        raise typer.Exit(1)
    typer.echo(text)


@app.command()
def note(
    category: str = typer.Argument(help="Note category: decision or insight"),
    file: Path = typer.Argument(help="Markdown file with the note content"),
) -> None:
    """Save a decision or insight note into the architecture memory."""
    if category not in NOTE_DIRS:
        rprint(f"[red]Unknown category '{category}'. Expected one of: {', '.join(NOTE_DIRS)}[/red]")
        raise typer.Exit(1)
    if not file.is_file():
        rprint(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)

    store = _open_store(Config.load())
    path = store.save_note(category, file.read_text(encoding="utf-8"))
    rprint(f"[green]Saved {category} to {path}[/green]")


@app.command()
def activity(
    limit: int = typer.Option(20, help="Number of entries to show"),
    tool: str = typer.Option(None, "--tool", help="Only show calls to this MCP tool"),
    writes: bool = typer.Option(False, "--writes", help="Only show calls that changed the memory"),
) -> None:
    """Show recent MCP tool calls, most recent first."""
    entries = read_activity_log(limit=limit, tool_name=tool, writes_only=writes)
    if not entries:
        rprint("[yellow]No activity recorded yet.[/yellow]")
        return
    for entry in entries:
        status = f"[red]error: {entry['error']}[/red]" if entry.get("error") else "[green]ok[/green]"
        target = f"  {entry['target']}" if entry.get("target") else ""
        marker = " [cyan](write)[/cyan]" if entry.get("wrote") else ""
        rprint(
            f"{entry.get('timestamp', '')}  [bold]{entry.get('tool_name', '')}[/bold]{target}{marker}  "
            f"{entry.get('duration_ms', 0)}ms  {status}"
        )


@app.command()
def serve() -> None:
    """Start the MCP server (called by Claude Code / Cursor automatically)."""
    import asyncio
    from archmemory.mcp_server import main as mcp_main
    asyncio.run(mcp_main())


if __name__ == "__main__":
    app()
