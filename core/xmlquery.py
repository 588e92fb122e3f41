# core/xmlquery.py
"""
Path queries over a parsed XML document.

Paths are CSS selectors as understood by BeautifulSoup, e.g. "Author" or
"ListPrice > Amount". They match descendants of the wrapped node in
document order, in any namespace.
"""
from typing import Iterator

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from .errors import MalformedResponseError


def _text_or_empty(tag: Tag | None) -> str:
    return tag.get_text(strip=True) if tag is not None else ""


class DocumentQuery:
    def __init__(self, node: Tag):
        self.node = node

    def first(self, path: str) -> "DocumentQuery | None":
        found = self.node.select_one(path)
        return DocumentQuery(found) if found is not None else None

    def first_text(self, path: str) -> str | None:
        """Text of the first match, or None when nothing matches."""
        found = self.node.select_one(path)
        if found is None:
            return None
        return _text_or_empty(found)

    def iter_nodes(self, path: str) -> Iterator["DocumentQuery"]:
        for tag in self.node.select(path):
            yield DocumentQuery(tag)

    def iter_text(self, path: str) -> Iterator[str]:
        for node in self.iter_nodes(path):
            yield node.text()

    def text(self) -> str:
        return _text_or_empty(self.node)


def parse_document(content: bytes | str) -> DocumentQuery:
    """Parse an XML body; raise MalformedResponseError when it has no elements."""
    if not content or not content.strip():
        raise MalformedResponseError("Response body is empty.")
    try:
        soup = BeautifulSoup(content, "xml")
    except ParserRejectedMarkup as exc:
        raise MalformedResponseError(f"Cannot parse response as XML: {exc}") from exc

    if soup.find() is None:
        raise MalformedResponseError("Response body contains no XML elements.")
    return DocumentQuery(soup)
