"""HeadHunt: single-page SEO metadata extraction."""

__version__ = "1.0.0"
