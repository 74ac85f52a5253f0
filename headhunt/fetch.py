# headhunt/fetch.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import requests
import urllib3
from bs4.dammit import EncodingDetector
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import Settings
from .errors import FetchError, InvalidURLError

logger = logging.getLogger("headhunt")


@dataclass(frozen=True)
class FetchedPage:
    url: str
    final_url: str
    status_code: int
    markup: str
    elapsed_ms: float
    redirects: int = 0


def validate_url(url: Optional[str]) -> str:
    """Return the URL unchanged if it is an absolute http(s) URL, else raise."""
    u = (url or "").strip()
    if not u:
        raise InvalidURLError("URL cannot be empty")
    try:
        p = urlparse(u)
        host = p.hostname
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL provided: {e}") from e
    if p.scheme not in ("http", "https"):
        raise InvalidURLError(f"Invalid URL provided: unsupported scheme {p.scheme or '(none)'!r}")
    if not host:
        raise InvalidURLError("Invalid URL provided: missing domain")
    return url


def build_session(settings: Settings) -> requests.Session:
    s = requests.Session()
    s.trust_env = False
    # Connection errors are never retried; redirects are capped on the session.
    adapter = HTTPAdapter(max_retries=Retry(total=0, redirect=False, raise_on_status=False))
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    s.headers.update(settings.request_headers())
    s.max_redirects = settings.max_redirects
    s.verify = settings.verify_tls
    return s


def _decode_body(r: requests.Response) -> str:
    """
    Response body as text.

    requests falls back to ISO-8859-1 for text/html without a charset; in that
    case use the charset the markup declares, else UTF-8.
    """
    content_type = (r.headers.get("Content-Type") or "").lower()
    if "charset=" in content_type:
        return r.text or ""
    body = r.content or b""
    encoding = EncodingDetector.find_declared_encoding(body, is_html=True) or "utf-8"
    try:
        return body.decode(encoding, errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def fetch_page(url: str, settings: Settings, session: Optional[requests.Session] = None) -> FetchedPage:
    """GET one page. Every failure mode is reported as FetchError."""
    if not settings.verify_tls:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    own_session = session is None
    s = session or build_session(settings)
    logger.info("Fetching: %s", url)
    start = time.perf_counter()
    try:
        r = s.get(url, allow_redirects=True, timeout=settings.timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.error("Fetch failed for %s: %s", url, e)
        raise FetchError(url, str(e)) from e
    finally:
        if own_session:
            s.close()
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    page = FetchedPage(
        url=url,
        final_url=str(r.url),
        status_code=r.status_code,
        markup=_decode_body(r),
        elapsed_ms=elapsed_ms,
        redirects=len(r.history),
    )
    logger.info("Page fetched successfully (%s, %d bytes, %.0f ms)",
                page.status_code, len(page.markup.encode("utf-8")), elapsed_ms)
    return page
