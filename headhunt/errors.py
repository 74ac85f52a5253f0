# headhunt/errors.py
from __future__ import annotations


class HeadHuntError(Exception):
    """Base class for errors that abort a whole run."""


class InvalidURLError(HeadHuntError):
    pass


class FetchError(HeadHuntError):
    """The page could not be fetched (network, timeout, TLS, status, redirects)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch page: {reason}")
