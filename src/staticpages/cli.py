"""Command-line interface for inspecting and editing static pages."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import ensure_config
from .exceptions import StaticPagesError
from .pages.context import PageContext
from .pages.converters import MarkdownRenderer
from .pages.generic import GenericTemplate
from .pages.template import TITLE_ATTRIBUTE, PageTemplate

app = typer.Typer(help="Inspect and edit localized static pages stored in a content source.")
console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route library log records through rich."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a configuration TOML file",
    ),
    source: Optional[str] = typer.Option(
        None,
        "--source",
        help="Content source overriding the configured default",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    configure_logging(verbose)
    ctx.obj = {"config_path": config_path, "source": source}


def _build_context(ctx: typer.Context) -> PageContext:
    try:
        config = ensure_config(
            default_source=ctx.obj.get("source"),
            config_path=ctx.obj.get("config_path"),
        )
    except RuntimeError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return PageContext(config=config)


@contextmanager
def _reporting_errors() -> Iterator[None]:
    """Turn library and document errors into a red message and exit code 1."""

    try:
        yield
    except (StaticPagesError, ValidationError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc


@contextmanager
def _open_page(
    ctx: typer.Context,
    page_type: str,
    name: str,
    locale: Optional[str],
    *,
    throw_on_missing: bool = True,
) -> Iterator[PageTemplate]:
    context = _build_context(ctx)
    with _reporting_errors():
        with GenericTemplate(name, page_type, locale, throw_on_missing, context=context) as page:
            yield page


def _save(page: PageTemplate) -> None:
    if not page.save():
        console.print(f"[red]Source refused to store page {page.key} ({page.locale}).[/red]")
        raise typer.Exit(code=1)


@app.command()
def show(
    ctx: typer.Context,
    page_type: str = typer.Argument(..., help="Page type"),
    name: str = typer.Argument(..., help="Page name"),
    locale: Optional[str] = typer.Option(None, "--locale", "-l", help="Locale to display"),
    render: bool = typer.Option(False, "--render", help="Render attribute values from Markdown to HTML"),
) -> None:
    """Print a page's title, timestamps and attributes."""

    transform = MarkdownRenderer() if render else None
    with _open_page(ctx, page_type, name, locale) as page:
        title = escape(page.get_title(default="(untitled)"))
        console.print(f"[bold]{title}[/bold] [dim]{escape(page.key)} ({page.locale})[/dim]")
        for moment in ("created_at", "updated_at"):
            value = page.get_date(moment)
            console.print(f"{moment}: {value.isoformat() if value else '-'}")

        table = Table(title="Attributes")
        table.add_column("Attribute")
        table.add_column("Value")
        for attribute in sorted(page.get_localized(page.locale)):
            table.add_row(escape(attribute), escape(str(page.get(attribute, transform))))
        console.print(table)


@app.command("set")
def set_attribute(
    ctx: typer.Context,
    page_type: str = typer.Argument(..., help="Page type"),
    name: str = typer.Argument(..., help="Page name"),
    attribute: str = typer.Argument(..., help=f"Attribute to change ({TITLE_ATTRIBUTE} for the title)"),
    value: str = typer.Argument(..., help="New value"),
    locale: Optional[str] = typer.Option(None, "--locale", "-l", help="Locale to edit"),
) -> None:
    """Change one attribute of an existing page and save it."""

    with _open_page(ctx, page_type, name, locale) as page:
        page.set(attribute, value)
        _save(page)
        console.print(f"Updated [bold]{escape(attribute)}[/bold] of {escape(page.key)} ({page.locale}).")


@app.command()
def init(
    ctx: typer.Context,
    page_type: str = typer.Argument(..., help="Page type"),
    name: str = typer.Argument(..., help="Page name"),
    title: str = typer.Option(..., "--title", "-t", help="Title of the page"),
    locale: Optional[str] = typer.Option(None, "--locale", "-l", help="Locale to create"),
    force: bool = typer.Option(
        False,
        "--force",
        help="Replace an existing page, dropping its attributes",
    ),
) -> None:
    """Create a page with a title and no attributes."""

    with _open_page(ctx, page_type, name, locale, throw_on_missing=False) as page:
        if page.is_loaded():
            if not force:
                raise typer.BadParameter(
                    f"Page {page.key} ({page.locale}) already exists. Use --force to overwrite it."
                )
            page.fill(page.locale, {})

        page.set(TITLE_ATTRIBUTE, title)
        _save(page)
        console.print(f"Initialized page [bold]{escape(page.key)}[/bold] ({page.locale}).")


def run() -> None:
    """Entry point for console scripts."""

    app()


if __name__ == "__main__":  # pragma: no cover
    run()
