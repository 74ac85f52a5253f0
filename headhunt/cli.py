"""
Command-line interface for HeadHunt.

    headhunt https://example.com

Prints a short SEO summary followed by the full metadata document as JSON.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .config import load_settings
from .errors import HeadHuntError, InvalidURLError
from .logging_setup import setup_logging
from .pipeline import analyze_url
from .report import print_summary, to_json

USAGE = "Usage: headhunt https://websiteurl.com"

app = typer.Typer(
    name="headhunt",
    help="Extract SEO metadata from a web page.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger("headhunt")


@app.command()
def analyze(
    url: Optional[str] = typer.Argument(None, help="Page to analyze, e.g. https://example.com"),
    json_only: bool = typer.Option(False, "--json-only", help="Print only the JSON document"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the JSON document to this file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override HEADHUNT_LOG_LEVEL"),
):
    """Fetch URL and print its SEO summary and metadata JSON."""
    if not url:
        err_console.print("[red]Please provide a URL[/red]")
        err_console.print(USAGE, highlight=False)
        raise typer.Exit(code=1)

    try:
        settings = load_settings()
    except ValueError as e:
        err_console.print(f"[red]Invalid configuration:[/red] {e}", highlight=False)
        raise typer.Exit(code=1)
    setup_logging((log_level or settings.log_level).upper(), console=err_console)

    try:
        report = analyze_url(url, settings=settings)
    except InvalidURLError as e:
        err_console.print(f"[red]Invalid URL provided:[/red] {url}", highlight=False)
        logger.debug("URL rejected: %s", e)
        raise typer.Exit(code=1)
    except HeadHuntError as e:
        err_console.print(f"[red]Error:[/red] {e}", highlight=False)
        raise typer.Exit(code=1)

    document = to_json(report)
    if output is not None:
        output.write_text(document + "\n", encoding="utf-8")
        logger.info("JSON written to %s", output)

    if not json_only:
        print_summary(report, console=console)
        console.print("\nFull SEO Metadata JSON:", highlight=False)
    typer.echo(document)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
