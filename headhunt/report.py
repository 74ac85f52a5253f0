# headhunt/report.py
from __future__ import annotations

import json
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape

from .pipeline import Report


def to_json(report: Report, indent: int = 2) -> str:
    return json.dumps(report.to_dict(), indent=indent, ensure_ascii=False)


def _sget(d: Any, *keys: str, default: Any = None) -> Any:
    cur = d
    for k in keys:
        if not isinstance(cur, dict):
            return default
        cur = cur.get(k)
    return cur if cur is not None else default


def _kb(n: Optional[int]) -> int:
    return round((n or 0) / 1024)


def print_summary(report: Report, console: Optional[Console] = None) -> None:
    """Human-readable overview of the same numbers the JSON carries."""
    console = console or Console()
    seo = report.to_dict()["seo"]
    rule = "=" * 50

    def line(text: str) -> None:
        console.print(text, soft_wrap=True, highlight=False)

    line("\n[bold]SEO SUMMARY[/bold]")
    line(rule)

    title = _sget(seo, "basic", "title")
    if title:
        line(f"Title: {escape(title)} ({len(title)} chars)")
    desc = _sget(seo, "basic", "metaDescription")
    if desc:
        line(f"Description: {escape(desc[:100])}... ({len(desc)} chars)")

    line(f"Canonical: {escape(_sget(seo, 'basic', 'canonical', default='Not found'))}")
    line(f"Robots: {escape(_sget(seo, 'basic', 'robots', default='Not specified'))}")
    line(f"Viewport: {'Yes' if _sget(seo, 'technical', 'hasViewport') else 'No'}")

    line("\n[bold]Counts:[/bold]")
    line(f"  H1: {_sget(seo, 'headings', 'counts', 'h1', default=0)}")
    line(
        f"  Images: {_sget(seo, 'images', 'counts', 'total', default=0)} "
        f"({_sget(seo, 'images', 'counts', 'withAlt', default=0)} with alt text)"
    )
    line(f"  Internal Links: {len(_sget(seo, 'links', 'internal', default=[]))}")
    line(f"  External Links: {len(_sget(seo, 'links', 'external', default=[]))}")
    line(f"  Nofollow Links: {len(_sget(seo, 'links', 'nofollow', default=[]))}")

    line("\n[bold]Social Media:[/bold]")
    line(f"  Open Graph: {len(seo.get('open_graph') or {})} tags")
    line(f"  Twitter: {len(seo.get('twitter') or {})} tags")

    line("\n[bold]Structured Data:[/bold]")
    line(f"  JSON-LD: {len(_sget(seo, 'schema', 'jsonLd', default=[]))} schemas")

    line("\n[bold]Performance:[/bold]")
    line(f"  HTML Size: {_kb(_sget(seo, 'performance', 'htmlSize'))} KB")
    line(f"  Estimated Total: {_kb(_sget(seo, 'performance', 'estimatedPageWeight', 'totalEstimated'))} KB")

    if report.failures:
        line("\n[bold yellow]Incomplete sections:[/bold yellow]")
        for f in report.failures:
            line(f"  {escape(f.category)}: {escape(f.error)}")

    line(rule)
