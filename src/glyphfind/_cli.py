"""CLI for glyphfind - interactive picker, one-shot search and config."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from glyphfind._config import GlyphfindConfig
from glyphfind._errors import ConfigError, DatasetError, InputError, TerminalError
from glyphfind._logging import configure_logging
from glyphfind._presenter import display_glyph
from glyphfind._rank import rank_scored
from glyphfind._session import run_session
from glyphfind._store import EntryStore, load_store
from glyphfind._terminal import Terminal

app = typer.Typer(
    name="glyphfind",
    help="Fuzzy-find Unicode characters and print the one you pick",
    invoke_without_command=True,
)
console = Console()
err_console = Console(stderr=True)

DataOption = Annotated[
    Path | None,
    typer.Option("--data", "-d", help="UnicodeData.txt to load instead of builtin tables"),
]
ConfigOption = Annotated[
    Path | None, typer.Option("--config", "-c", help="Config file path")
]
NoMouseOption = Annotated[bool, typer.Option("--no-mouse", help="Do not capture the mouse")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")]


def _load_config(
    config_path: Path | None, data: Path | None, verbose: bool = False
) -> GlyphfindConfig:
    """Load config and apply CLI overrides."""
    try:
        config = GlyphfindConfig.load(config_path)
    except ConfigError as e:
        err_console.print(f"[red]Config error:[/red] {e}")
        raise typer.Exit(1) from None

    if data is not None:
        config.data.path = str(data)

    configure_logging(config.log, verbose=verbose)
    return config


def _load_store(config: GlyphfindConfig) -> EntryStore:
    try:
        return load_store(config)
    except DatasetError as e:
        err_console.print(f"[red]Data error:[/red] {e}")
        raise typer.Exit(1) from None


@app.callback()
def main_callback(
    ctx: typer.Context,
    data: DataOption = None,
    config_path: ConfigOption = None,
    no_mouse: NoMouseOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Run the interactive picker when no command is given."""
    if ctx.invoked_subcommand is None:
        pick(data=data, config_path=config_path, no_mouse=no_mouse, verbose=verbose)


@app.command()
def pick(
    data: DataOption = None,
    config_path: ConfigOption = None,
    no_mouse: NoMouseOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Search interactively; the chosen character is printed on exit."""
    config = _load_config(config_path, data, verbose)
    store = _load_store(config)

    terminal = Terminal(console=err_console, mouse=config.session.mouse and not no_mouse)

    try:
        choice = run_session(store, terminal, config.session)
    except TerminalError as e:
        err_console.print(f"[red]Error initializing display:[/red] {e}")
        raise typer.Exit(1) from None
    except InputError as e:
        err_console.print(f"[red]Input error:[/red] {e}")
        raise typer.Exit(1) from None

    if choice is not None:
        # Plain print: the glyph must reach stdout untouched by rich markup.
        print(choice)


@app.command()
def search(
    query_text: Annotated[str, typer.Argument(help="Search query")],
    limit: Annotated[int, typer.Option("--limit", "-k", help="Number of results")] = 20,
    format_: Annotated[
        str, typer.Option("--format", "-f", help="Output format: pretty, json, glyphs")
    ] = "pretty",
    data: DataOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Rank characters for a query and print the best matches."""
    config = _load_config(config_path, data)
    store = _load_store(config)

    results = rank_scored(store, query_text)[:limit]

    if format_ == "json":
        output = [
            {
                "char": r.entry.glyph,
                "codepoint": r.entry.formatted_codepoint,
                "name": r.entry.name,
                "category": r.entry.category.value,
                "legacy_name": r.entry.legacy_name,
                "score": r.score,
            }
            for r in results
        ]
        console.print_json(json.dumps(output))

    elif format_ == "glyphs":
        for r in results:
            print(r.entry.glyph)

    else:  # pretty
        _print_pretty_results(query_text, results)


def _print_pretty_results(q: str, results) -> None:
    """Print results in pretty format."""
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(title=Text(f"Results for: {q}"))
    table.add_column("Score", style="cyan", width=6, justify="right")
    table.add_column("Char", width=4)
    table.add_column("Code", style="green")
    table.add_column("Name")
    table.add_column("Cat", style="yellow", width=4)
    table.add_column("Unicode 1.0 Name", style="dim")

    for r in results:
        table.add_row(
            str(r.score),
            Text(display_glyph(r.entry)),
            r.entry.formatted_codepoint,
            Text(r.entry.name),
            r.entry.category.value,
            Text(r.entry.legacy_name),
        )

    console.print(table)


@app.command()
def config(
    show: Annotated[bool, typer.Option("--show", help="Show current config")] = False,
    init: Annotated[bool, typer.Option("--init", help="Create default config file")] = False,
    config_path: ConfigOption = None,
) -> None:
    """Manage configuration."""
    if init:
        path = GlyphfindConfig.bootstrap(config_path)
        console.print(f"[green]Created config file:[/green] {path}")
        return

    if show:
        try:
            cfg = GlyphfindConfig.load(config_path)
        except ConfigError as e:
            err_console.print(f"[red]Config error:[/red] {e}")
            raise typer.Exit(1) from None
        console.print("[bold]Configuration[/bold]")
        console.print(f"  Config file: {config_path or GlyphfindConfig.get_config_path()}")
        console.print(f"  Data: {cfg.data.path or '(builtin unicodedata)'}")
        console.print(f"  Tick interval: {cfg.session.tick_interval}s")
        console.print(f"  Page size: {cfg.session.page_size}")
        console.print(f"  Mouse: {'on' if cfg.session.mouse else 'off'}")
        console.print(f"  Log file: {cfg.log.file or '(stderr)'}")
        return

    # Default: show help
    console.print("Use --show to view config or --init to create default config file.")


def main() -> None:
    """Entry point for glyphfind."""
    app()


if __name__ == "__main__":
    main()
