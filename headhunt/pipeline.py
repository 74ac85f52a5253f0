# headhunt/pipeline.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import requests

from .config import Settings, load_settings
from .document import Document, parse_document
from .extractors import EXTRACTION_STEPS, Extractor, PageContext, empty_section
from .fetch import fetch_page, validate_url

logger = logging.getLogger("headhunt")

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class StepFailure:
    step: str
    category: str
    error: str


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class Report:
    """
    Outcome of one run. Sections are frozen all the way down: mappings are
    read-only proxies and sequences are tuples. ``to_dict`` returns a mutable,
    JSON-ready copy.
    """

    url: str
    timestamp: str
    seo: Mapping[str, Mapping[str, Any]]
    failures: Tuple[StepFailure, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "timestamp": self.timestamp, "seo": _thaw(self.seo)}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def run_steps(
    doc: Document,
    ctx: PageContext,
    steps: Sequence[Tuple[str, str, Extractor]] = EXTRACTION_STEPS,
) -> Tuple[Dict[str, Dict[str, Any]], List[StepFailure]]:
    """
    Run every extractor, isolating failures.

    Each category starts from its empty payload; a step that raises keeps that
    default and is recorded as a failure. Never short-circuits.
    """
    sections: Dict[str, Dict[str, Any]] = {}
    failures: List[StepFailure] = []
    for name, category, extractor in steps:
        sections[category] = empty_section(category)
        try:
            sections[category] = extractor(doc, ctx)
            logger.debug("%s done", name)
        except Exception as e:
            logger.warning("%s: %s", name, e)
            failures.append(StepFailure(step=name, category=category, error=str(e)))
    return sections, failures


def analyze_markup(
    url: str,
    markup: str,
    settings: Optional[Settings] = None,
    clock: Clock = _utc_now,
) -> Report:
    """Build a Report for markup already fetched from ``url``."""
    settings = settings or load_settings()
    timestamp = _iso_timestamp(clock())
    logger.info("Analyzing SEO metadata...")
    doc = parse_document(markup, use_lxml=settings.use_lxml)
    sections, failures = run_steps(doc, PageContext(url=url, settings=settings))
    if failures:
        logger.warning("Analysis finished with %d failed step(s)", len(failures))
    else:
        logger.info("Analysis complete")
    return Report(
        url=url,
        timestamp=timestamp,
        seo=_freeze(sections),
        failures=tuple(failures),
    )


def analyze_url(
    url: str,
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
    clock: Clock = _utc_now,
) -> Report:
    """Validate, fetch and analyze one URL. Raises HeadHuntError subclasses."""
    settings = settings or load_settings()
    validate_url(url)
    page = fetch_page(url, settings, session=session)
    return analyze_markup(url, page.markup, settings=settings, clock=clock)
