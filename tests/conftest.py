"""
Shared fixtures for the HeadHunt test-suite.

Pages are small inline HTML documents; nothing here touches the network.
"""
from datetime import datetime, timezone

import pytest

from headhunt.config import Settings
from headhunt.document import parse_document
from headhunt.extractors import PageContext

PAGE_URL = "https://example.com/blog/post"

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)

# 2 internal links (one duplicate), 1 external nofollow, 3 h1 (one empty), no structured data
E2E_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Fixture Page</title>
  <meta name="description" content="A fixture page used by the tests.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
</head>
<body>
  <h1>First heading</h1>
  <h1>   </h1>
  <h1 id="second">Second heading</h1>
  <a href="/about">About us</a>
  <a href="/about">About (again)</a>
  <a href="https://other.org/page" rel="nofollow">Elsewhere</a>
</body>
</html>
"""

FULL_HTML = """<!DOCTYPE html>
<html lang="en-GB">
<head>
  <meta charset="utf-8">
  <title>Example Title</title>
  <meta name="description" content="Example description">
  <meta name="robots" content="index, follow">
  <meta name="viewport" content="width=device-width">
  <link rel="canonical" href="https://example.com/blog/post">
  <link rel="alternate" hreflang="en" href="https://example.com/en/">
  <link rel="alternate" hreflang="de" href="https://example.com/de/">
  <link rel="alternate" hreflang="en" href="https://example.com/en/">
  <link rel="alternate" media="only screen and (max-width: 640px)" href="https://m.example.com/">
  <link rel="sitemap" type="application/xml" href="/sitemap.xml">
  <link rel="alternate" type="application/rss+xml" href="/feed.xml">
  <link rel="amphtml" href="https://example.com/amp/post">
  <link rel="stylesheet" href="/main.css">
  <meta property="og:title" content="OG Title">
  <meta property="og:type" content="article">
  <meta property="og:image" content="https://example.com/img.png">
  <meta property="og:image:width" content="1200">
  <meta property="og:image:height" content="630">
  <meta property="og:description" content="">
  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:site" content="@example">
  <meta name="twitter:creator">
  <script src="/app.js"></script>
  <script>window.x = 1;</script>
  <style>body { color: red; }</style>
  <script type="application/ld+json">{"@context": "https://schema.org", "@type": "Article", "headline": "Hi"}</script>
  <script type="application/ld+json">{not json}</script>
</head>
<body>
  <h1 id="top">Main heading</h1>
  <h2>Section</h2>
  <h2></h2>
  <div itemscope itemtype="https://schema.org/Product">
    <span itemprop="name">Widget</span>
    <span itemprop="price" content="9.99">$9.99</span>
  </div>
  <a href="#top">Back to top</a>
  <a href="javascript:void(0)">Click</a>
  <a href="/contact" title="Contact">Contact</a>
  <a href="https://example.com/shop">Shop</a>
  <a href="https://partner.net/" rel="sponsored nofollow">Partner</a>
  <a href="https://forum.net/t/1" rel="ugc">Thread</a>
  <a href="mailto:hi@example.com">Mail</a>
  <img src="/a.png" alt="A picture">
  <img src="/b.png" alt="" loading="lazy">
  <img src="/c.png" loading="lazy" srcset="/c-2x.png 2x" title="C">
  <img alt="no source">
</body>
</html>
"""


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_doc():
    def _make(markup):
        return parse_document(markup)
    return _make


@pytest.fixture
def ctx(settings):
    return PageContext(url=PAGE_URL, settings=settings)
