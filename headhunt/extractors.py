# headhunt/extractors.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from . import config
from .config import Settings
from .document import Document, Node

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

_DOCTYPE_RE = re.compile(r"<!DOCTYPE[^>]*>", re.I)
_MINIMAL_DOCTYPE = "<!DOCTYPE html>"

# Returned by the JSON-LD parse step for blocks that are dropped.
_DROPPED = object()


@dataclass(frozen=True)
class PageContext:
    url: str
    settings: Settings


Extractor = Callable[[Document, PageContext], Dict[str, Any]]


# ---------------- Empty payloads ----------------
def _empty_basic() -> Dict[str, Any]:
    return {
        "title": None,
        "metaDescription": None,
        "canonical": None,
        "robots": None,
        "viewport": None,
        "charset": None,
        "language": None,
        "hreflang": [],
    }


def _empty_schema() -> Dict[str, Any]:
    return {"jsonLd": [], "microdata": {}}


def _empty_technical() -> Dict[str, Any]:
    return {
        "doctype": None,
        "htmlVersion": "Unknown",
        "hasViewport": False,
        "hasCharset": False,
        "hasCanonical": False,
        "hasRobots": False,
        "hasSitemap": False,
        "hasRSS": False,
        "hasAMP": False,
        "hasMobileAlternate": False,
        "sitemapUrl": None,
        "rssUrl": None,
    }


def _empty_links() -> Dict[str, Any]:
    return {"internal": [], "external": [], "nofollow": []}


def _empty_headings() -> Dict[str, Any]:
    headings: Dict[str, Any] = {tag: [] for tag in HEADING_TAGS}
    headings["counts"] = {tag: 0 for tag in HEADING_TAGS}
    return headings


def _empty_images() -> Dict[str, Any]:
    return {
        "withAlt": [],
        "withoutAlt": [],
        "lazyLoaded": [],
        "counts": {"total": 0, "withAlt": 0, "withoutAlt": 0, "lazyLoaded": 0},
    }


def _empty_performance() -> Dict[str, Any]:
    return {
        "totalImages": 0,
        "totalScripts": 0,
        "totalStylesheets": 0,
        "totalInlineScripts": 0,
        "totalInlineStyles": 0,
        "totalLinks": 0,
        "totalHeadings": 0,
        "htmlSize": 0,
        "estimatedPageWeight": {"html": 0, "estimatedExternalResources": 0, "totalEstimated": 0},
    }


_EMPTY_FACTORIES: Dict[str, Callable[[], Dict[str, Any]]] = {
    config.BASIC: _empty_basic,
    config.OPEN_GRAPH: dict,
    config.TWITTER: dict,
    config.SCHEMA: _empty_schema,
    config.TECHNICAL: _empty_technical,
    config.LINKS: _empty_links,
    config.HEADINGS: _empty_headings,
    config.IMAGES: _empty_images,
    config.PERFORMANCE: _empty_performance,
}


def empty_section(category: str) -> Dict[str, Any]:
    """Default payload for a category with nothing extracted."""
    return _EMPTY_FACTORIES[category]()


# ---------------- Basic ----------------
def extract_basic(doc: Document, ctx: PageContext) -> Dict[str, Any]:
    basic = _empty_basic()

    title = doc.select_one("title")
    basic["title"] = (title.text() or None) if title else None
    basic["metaDescription"] = doc.attr('meta[name="description"]', "content")
    basic["canonical"] = doc.attr('link[rel="canonical" i]', "href")
    basic["robots"] = doc.attr('meta[name="robots"]', "content")
    basic["viewport"] = doc.attr('meta[name="viewport"]', "content")
    basic["charset"] = (
        doc.attr("meta[charset]", "charset")
        or doc.attr('meta[http-equiv="Content-Type" i]', "content")
    )
    root = doc.root
    basic["language"] = (root.attr("lang") or None) if root else None

    for ln in doc.select('link[rel="alternate" i][hreflang]'):
        basic["hreflang"].append({"lang": ln.attr("hreflang"), "href": ln.attr("href")})

    return basic


# ---------------- Open Graph / Twitter ----------------
def extract_open_graph(doc: Document, ctx: PageContext) -> Dict[str, Any]:
    og: Dict[str, Any] = {}
    for m in doc.select('meta[property^="og:"]'):
        prop = (m.attr("property") or "")[len("og:"):]
        content = m.attr("content")
        if not prop or not content:
            continue
        if ":" in prop:
            # og:image:width -> {"image": {"width": ...}}
            parent, child = prop.split(":")[:2]
            nested = og.get(parent)
            if not isinstance(nested, dict):
                nested = og[parent] = {}
            nested[child] = content
        else:
            og[prop] = content
    return og


def extract_twitter(doc: Document, ctx: PageContext) -> Dict[str, Any]:
    tw: Dict[str, Any] = {}
    for m in doc.select('meta[name^="twitter:"]'):
        name = (m.attr("name") or "")[len("twitter:"):]
        content = m.attr("content")
        if name and content:
            tw[name] = content
    return tw


# ---------------- Structured data ----------------
def _parse_json_block(raw: Optional[str]) -> Any:
    if not raw or not raw.strip():
        return _DROPPED
    try:
        return json.loads(raw)
    except ValueError:
        return _DROPPED


def _microdata_item(scope: Node) -> Dict[str, str]:
    item: Dict[str, str] = {}
    for prop in scope.select("[itemprop]"):
        name = prop.attr("itemprop")
        if not name:
            continue
        item[name] = prop.attr("content") or prop.text().strip()
    return item


def extract_schema(doc: Document, ctx: PageContext) -> Dict[str, Any]:
    schema = _empty_schema()

    for script in doc.select('script[type="application/ld+json"]'):
        parsed = _parse_json_block(script.text())
        if parsed is not _DROPPED:
            schema["jsonLd"].append(parsed)

    for scope in doc.select("[itemscope]"):
        itemtype = scope.attr("itemtype")
        if not itemtype:
            continue
        type_name = itemtype.split("/")[-1]
        schema["microdata"].setdefault(type_name, []).append(_microdata_item(scope))

    return schema


# ---------------- Technical ----------------
def html_version(doctype: Optional[str]) -> str:
    d = doctype or ""
    if "HTML 4" in d:
        return "HTML4"
    if "XHTML" in d:
        return "XHTML"
    if "HTML5" in d or d == _MINIMAL_DOCTYPE:
        return "HTML5"
    return "Unknown"


def extract_technical(doc: Document, ctx: PageContext) -> Dict[str, Any]:
    m = _DOCTYPE_RE.search(doc.markup or "")
    doctype = m.group(0) if m else None
    return {
        "doctype": doctype,
        "htmlVersion": html_version(doctype),
        "hasViewport": doc.count('meta[name="viewport"]') > 0,
        "hasCharset": doc.count("meta[charset]") > 0
        or doc.count('meta[http-equiv="Content-Type" i]') > 0,
        "hasCanonical": doc.count('link[rel="canonical" i]') > 0,
        "hasRobots": doc.count('meta[name="robots"]') > 0,
        "hasSitemap": doc.count('link[rel="sitemap" i]') > 0,
        "hasRSS": doc.count('link[type="application/rss+xml"]') > 0,
        "hasAMP": doc.count('link[rel="amphtml" i]') > 0,
        "hasMobileAlternate": doc.count('link[rel="alternate" i][media]') > 0,
        "sitemapUrl": doc.attr('link[rel="sitemap" i]', "href"),
        "rssUrl": doc.attr('link[type="application/rss+xml"]', "href"),
    }


# ---------------- Links ----------------
def _hostname(u: str) -> Optional[str]:
    try:
        return urlparse(u).hostname
    except ValueError:
        return None


def classify_link(href: str, page_host: Optional[str]) -> Optional[str]:
    """'internal', 'external', or None for page-local / script links."""
    if href.startswith("#") or href.startswith("javascript:"):
        return None
    if href.startswith("http"):
        host = _hostname(href)
        if host and host == page_host:
            return "internal"
        return "external"
    return "internal"


def _dedup(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    seen = set()
    out = []
    for r in records:
        if r["url"] not in seen:
            out.append(r)
            seen.add(r["url"])
    return out


def extract_links(doc: Document, ctx: PageContext) -> Dict[str, Any]:
    links = _empty_links()
    page_host = _hostname(ctx.url)

    for a in doc.select("a[href]"):
        href = a.attr("href")
        if not href:
            continue
        bucket = classify_link(href, page_host)
        if bucket is None:
            continue
        rel = a.attr("rel") or ""
        reltxt = rel.lower()
        link = {
            "url": href,
            "text": a.text().strip() or None,
            "rel": rel or None,
            "isNofollow": "nofollow" in reltxt,
            "isSponsored": "sponsored" in reltxt,
            "isUGC": "ugc" in reltxt,
            "title": a.attr("title") or None,
        }
        links[bucket].append(link)
        if link["isNofollow"]:
            links["nofollow"].append(link)

    return {name: _dedup(records) for name, records in links.items()}


# ---------------- Headings ----------------
def extract_headings(doc: Document, ctx: PageContext) -> Dict[str, Any]:
    headings = _empty_headings()
    for tag in HEADING_TAGS:
        for h in doc.select(tag):
            text = h.text().strip()
            if not text:
                continue
            headings[tag].append({"text": text, "id": h.attr("id") or None, "length": len(text)})
        headings["counts"][tag] = len(headings[tag])
    return headings


# ---------------- Images ----------------
def extract_images(doc: Document, ctx: PageContext) -> Dict[str, Any]:
    images = _empty_images()
    counts = images["counts"]

    for img in doc.select("img"):
        src = img.attr("src")
        if not src:
            continue
        alt = img.attr("alt") or ""
        image = {
            "src": src,
            "alt": alt or None,
            "hasAlt": bool(alt),
            "isLazy": img.attr("loading") == "lazy",
            "srcset": img.attr("srcset") or None,
            "title": img.attr("title") or None,
        }
        counts["total"] += 1
        if image["hasAlt"]:
            images["withAlt"].append(image)
            counts["withAlt"] += 1
        else:
            images["withoutAlt"].append(image)
            counts["withoutAlt"] += 1
        if image["isLazy"]:
            images["lazyLoaded"].append(image)
            counts["lazyLoaded"] += 1

    return images


# ---------------- Performance ----------------
def estimate_page_weight(html_size: int, stylesheets: int, scripts: int, images: int,
                         settings: Settings) -> Dict[str, int]:
    css = stylesheets * settings.stylesheet_weight
    js = scripts * settings.script_weight
    img = images * settings.image_weight
    if settings.page_weight_formula == config.FORMULA_ADDITIVE:
        external = css + js + img
    else:
        external = (css + js) * img
    return {
        "html": html_size,
        "estimatedExternalResources": external,
        "totalEstimated": html_size + external,
    }


def extract_performance(doc: Document, ctx: PageContext) -> Dict[str, Any]:
    html_size = len((doc.markup or "").encode("utf-8"))
    stylesheets = doc.count('link[rel="stylesheet" i]')
    scripts = doc.count("script[src]")
    return {
        "totalImages": doc.count("img"),
        "totalScripts": scripts,
        "totalStylesheets": stylesheets,
        "totalInlineScripts": doc.count("script:not([src])"),
        "totalInlineStyles": doc.count("style"),
        "totalLinks": doc.count("a[href]"),
        "totalHeadings": doc.count(", ".join(HEADING_TAGS)),
        "htmlSize": html_size,
        "estimatedPageWeight": estimate_page_weight(
            html_size, stylesheets, scripts, doc.count("img[src]"), ctx.settings
        ),
    }


# Fixed extraction order: (step label, report category, extractor)
EXTRACTION_STEPS: Tuple[Tuple[str, str, Extractor], ...] = (
    ("Basic Metadata", config.BASIC, extract_basic),
    ("Open Graph Tags", config.OPEN_GRAPH, extract_open_graph),
    ("Twitter Cards", config.TWITTER, extract_twitter),
    ("Schema Markup", config.SCHEMA, extract_schema),
    ("Technical SEO", config.TECHNICAL, extract_technical),
    ("Links Analysis", config.LINKS, extract_links),
    ("Headings Structure", config.HEADINGS, extract_headings),
    ("Images Analysis", config.IMAGES, extract_images),
    ("Performance Metrics", config.PERFORMANCE, extract_performance),
)
