# headhunt/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Tuple

# ---------------- Constants & headers ----------------
_CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/91.0.4472.124 Safari/537.36"
)
USER_AGENT = _CHROME_UA

_BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate, br",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

HTTP_TIMEOUT = 30.0
MAX_REDIRECTS = 5

# Rough per-resource sizes used by the page weight estimate (bytes)
STYLESHEET_WEIGHT = 15_000
SCRIPT_WEIGHT = 50_000
IMAGE_WEIGHT = 100_000

FORMULA_COMPOUND = "compound"
FORMULA_ADDITIVE = "additive"
PAGE_WEIGHT_FORMULAS = (FORMULA_COMPOUND, FORMULA_ADDITIVE)

# ---------------- Report categories ----------------
BASIC = "basic"
OPEN_GRAPH = "open_graph"
TWITTER = "twitter"
SCHEMA = "schema"
TECHNICAL = "technical"
LINKS = "links"
HEADINGS = "headings"
IMAGES = "images"
PERFORMANCE = "performance"

SEO_CATEGORIES: Tuple[str, ...] = (
    BASIC,
    OPEN_GRAPH,
    TWITTER,
    SCHEMA,
    TECHNICAL,
    LINKS,
    HEADINGS,
    IMAGES,
    PERFORMANCE,
)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Immutable run configuration handed to the loader and the pipeline."""

    user_agent: str = USER_AGENT
    timeout: float = HTTP_TIMEOUT
    max_redirects: int = MAX_REDIRECTS
    verify_tls: bool = False
    use_lxml: bool = True
    log_level: str = "INFO"
    stylesheet_weight: int = STYLESHEET_WEIGHT
    script_weight: int = SCRIPT_WEIGHT
    image_weight: int = IMAGE_WEIGHT
    page_weight_formula: str = FORMULA_COMPOUND
    extra_headers: Dict[str, str] = field(default_factory=lambda: dict(_BASE_HEADERS))

    def __post_init__(self) -> None:
        if self.page_weight_formula not in PAGE_WEIGHT_FORMULAS:
            raise ValueError(
                f"Unknown page weight formula {self.page_weight_formula!r} "
                f"(expected one of {', '.join(PAGE_WEIGHT_FORMULAS)})"
            )
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be >= 0")

    def request_headers(self) -> Dict[str, str]:
        headers = {"User-Agent": self.user_agent}
        headers.update(self.extra_headers)
        return headers


def load_settings() -> Settings:
    """Build Settings from HEADHUNT_* environment variables."""
    return Settings(
        user_agent=os.getenv("HEADHUNT_USER_AGENT", USER_AGENT),
        timeout=float(os.getenv("HEADHUNT_TIMEOUT", str(HTTP_TIMEOUT))),
        max_redirects=int(os.getenv("HEADHUNT_MAX_REDIRECTS", str(MAX_REDIRECTS))),
        verify_tls=_env_bool("HEADHUNT_VERIFY_TLS", "0"),
        use_lxml=_env_bool("HEADHUNT_USE_LXML", "1"),
        log_level=os.getenv("HEADHUNT_LOG_LEVEL", "INFO").upper(),
        stylesheet_weight=int(os.getenv("HEADHUNT_STYLESHEET_WEIGHT", str(STYLESHEET_WEIGHT))),
        script_weight=int(os.getenv("HEADHUNT_SCRIPT_WEIGHT", str(SCRIPT_WEIGHT))),
        image_weight=int(os.getenv("HEADHUNT_IMAGE_WEIGHT", str(IMAGE_WEIGHT))),
        page_weight_formula=os.getenv("HEADHUNT_PAGE_WEIGHT_FORMULA", FORMULA_COMPOUND).strip().lower(),
    )
