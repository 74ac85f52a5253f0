# headhunt/document.py
"""
Read-only view over parsed markup.

Extractors only talk to ``Document`` and ``Node``: CSS selection, attribute
lookup and text. The BeautifulSoup tree underneath is an implementation
detail, so a different parser backend (or a hand-built tree in tests) can be
dropped in without touching extraction code.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from bs4 import BeautifulSoup, FeatureNotFound
from bs4.element import Tag

logger = logging.getLogger("headhunt")


class Node:
    __slots__ = ("_tag",)

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def name(self) -> str:
        return self._tag.name

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return str(value)

    def has_attr(self, name: str) -> bool:
        return self._tag.has_attr(name)

    def text(self) -> str:
        return self._tag.get_text()

    def select(self, selector: str) -> List["Node"]:
        return [Node(t) for t in self._tag.select(selector)]

    def __repr__(self) -> str:
        return f"<Node {self.name}>"


class Document:
    """A parsed page plus the raw markup it came from."""

    def __init__(self, markup: str, soup: BeautifulSoup):
        self.markup = markup
        self._soup = soup

    @property
    def root(self) -> Optional[Node]:
        html = self._soup.find("html")
        return Node(html) if html is not None else None

    def select(self, selector: str) -> List[Node]:
        return [Node(t) for t in self._soup.select(selector)]

    def select_one(self, selector: str) -> Optional[Node]:
        tag = self._soup.select_one(selector)
        return Node(tag) if tag is not None else None

    def count(self, selector: str) -> int:
        return len(self._soup.select(selector))

    def attr(self, selector: str, name: str) -> Optional[str]:
        """Attribute of the first match, None when missing or empty."""
        node = self.select_one(selector)
        if node is None:
            return None
        return node.attr(name) or None


def parse_document(markup: str, use_lxml: bool = True) -> Document:
    # Attributes such as rel/class are kept as plain strings, not token lists.
    if use_lxml:
        try:
            return Document(markup, BeautifulSoup(markup, "lxml", multi_valued_attributes=None))
        except FeatureNotFound:
            logger.warning("lxml parser unavailable, falling back to html.parser")
    return Document(markup, BeautifulSoup(markup, "html.parser", multi_valued_attributes=None))
