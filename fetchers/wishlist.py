# fetchers/wishlist.py
import datetime
import html
import logging
import os
import re
from pathlib import Path
from typing import Iterator

import pytz
import requests
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from core.errors import MalformedResponseError, NetworkError, PageLimitExceededError
from core.logger import get_logger
from core.models import PageState, WishlistItem

logger = get_logger(__name__)

WISHLIST_HOST = os.getenv("WISHLIST_HOST", "www.amazon.co.uk")
WISHLIST_MAX_PAGES = int(os.getenv("WISHLIST_MAX_PAGES", "50"))
HTTP_TIMEOUT = int(os.getenv("HTTP_TIMEOUT", "30"))
DEBUG_DIR = os.getenv("DEBUG_DIR", "").strip()

# Characters of page text scanned after an anchor
ITEM_WINDOW = 1000
IMAGE_WINDOW = 1000
PRICE_WINDOW_BEFORE = 50
PRICE_WINDOW_AFTER = 150

ITEM_START_RE = re.compile(r'<a\b[^>]*?\sid="itemName_([A-Z0-9]+)"')
NEXT_PAGE_RE = re.compile(r'<a\b[^>]*?\shref="([^"]*)"[^>]*>\s*Next')

DETAIL_LINK_RE = re.compile(r'href="/dp/([^/"]+)/ref')
BYLINE_RE = re.compile(r"</h5>\s*by (.*)\n")
AUTHOR_BINDING_RE = re.compile(r"(.*?)\s\((.*?)\)\s*")
# title attribute of the itemName tag the fragment starts with
TITLE_RE = re.compile(r'<a\b[^>]*?\stitle="([^"]*)"')
IMAGE_ANCHOR = r'<div\b[^>]*?\sid="itemImage_%s"'
PRICE_ANCHOR = r'<span\b[^>]*?\sid="itemPrice_%s"'
IMG_SRC_RE = re.compile(r'<img\b[^>]*?\ssrc="([^"]*)"')
SPAN_TEXT_RE = re.compile(r"<span\b[^>]*>\s*([^<]*?)\s*</span>")

POUND_SIGN = "\u00a3"
ZERO_WIDTH_SPACE = "\u200b"


def _sanitize(name: str) -> str:
    """Normalize arbitrary wishlist IDs to be filesystem-safe."""
    return "".join(ch if ch.isalnum() or ch in "._-" else "_" for ch in name)


def _dump_html(wishlist_id: str, page_number: int, text: str) -> None:
    """Write rendered page text to DEBUG_DIR when DEBUG logging is enabled."""
    if not DEBUG_DIR or not logger.isEnabledFor(logging.DEBUG):
        return

    timestamp = datetime.datetime.now(tz=pytz.UTC).strftime("%Y%m%d_%H%M%S")
    path = Path(DEBUG_DIR) / f"wishlist_{_sanitize(wishlist_id)}_page{page_number}_{timestamp}.html"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        logger.debug("Dumped wishlist page to %s", path)
    except OSError as exc:
        logger.debug("Failed to dump wishlist page to %s: %s", path, exc)


def normalize_wishlist_id(identifier: str) -> str:
    """
    Accept a bare wishlist ID or a wishlist URL and return the ID.

    Examples of accepted URLs:
      - http://www.amazon.co.uk/gp/registry/wishlist/XXXXXXXXXXXX/ref=...
      - https://www.amazon.co.uk/hz/wishlist/ls/XXXXXXXXXXXX
    """
    identifier = identifier.strip()
    m = re.search(r"/hz/wishlist/ls/([A-Za-z0-9]+)", identifier)
    if not m:
        m = re.search(r"/gp/registry/(?:wishlist|list)/([A-Za-z0-9]+)", identifier)
    return m.group(1) if m else identifier


def wishlist_url(wishlist_id: str, page_number: int, host: str = WISHLIST_HOST) -> str:
    return f"http://{host}/gp/registry/wishlist/{wishlist_id}/?page={page_number}"


class SourceOrderFormatter(HTMLFormatter):
    """Minimal entity escaping; attributes kept in document order."""

    def __init__(self):
        super().__init__(entity_substitution=EntitySubstitution.substitute_xml)

    def attributes(self, tag):
        return tag.attrs.items()


SOURCE_ORDER = SourceOrderFormatter()


def _declared_encoding(resp: requests.Response) -> str | None:
    """Charset from the Content-Type header, if the server sent one."""
    content_type = resp.headers.get("Content-Type", "")
    if "charset=" in content_type.lower():
        return resp.encoding
    return None


def fetch_page(url: str, session: requests.Session | None = None) -> str:
    """
    Fetch a page and return it parsed and re-serialized by BeautifulSoup.

    Pattern matching downstream relies on the re-serialized form (double
    quoted attributes in source order, closed tags), never on the raw
    payload.
    """
    if session is None:
        with requests.Session() as own_session:
            return fetch_page(url, own_session)

    logger.debug("Fetching wishlist page: %s", url)
    try:
        resp = session.get(url, timeout=HTTP_TIMEOUT)
    except requests.RequestException as exc:
        logger.error("Request for %s failed: %s", url, exc)
        raise NetworkError(f"Request to {url} failed: {exc}") from exc

    if not resp.content or not resp.content.strip():
        raise MalformedResponseError(f"Page {url} is empty.")

    try:
        soup = BeautifulSoup(
            resp.content, "html.parser", from_encoding=_declared_encoding(resp)
        )
    except ParserRejectedMarkup as exc:
        raise MalformedResponseError(f"Cannot parse {url} as HTML: {exc}") from exc

    if soup.find() is None:
        raise MalformedResponseError(f"Page {url} contains no markup.")
    return soup.decode(formatter=SOURCE_ORDER)


def _parse_price(text: str) -> tuple[str, str]:
    """Return (currency, price). Only the pound sign is recognized."""
    if text.startswith(POUND_SIGN):
        return "GBP", text[len(POUND_SIGN):]
    return "", text


def parse_item(page: str, item_html_id: str, fragment: str) -> WishlistItem:
    """
    Extract a single item's fields.

    page is the full rendered page, item_html_id the id shared by the
    item's name, image and price elements, and fragment the page text
    starting at the item's itemName anchor. Fields that cannot be found
    are left empty; this never raises.
    """
    amazon_id = author = binding = title = image_url = currency = price = ""

    m = DETAIL_LINK_RE.search(fragment)
    if m:
        amazon_id = m.group(1)

    # "by John Smith (Paperback)"
    m = BYLINE_RE.search(fragment)
    if m:
        byline = m.group(1)
        split = AUTHOR_BINDING_RE.search(byline)
        if split:
            author, binding = split.group(1), split.group(2)
        else:
            author = byline

    m = TITLE_RE.match(fragment.lstrip())
    if m:
        title = m.group(1)

    # image and price live outside the item's own block
    anchor = re.search(IMAGE_ANCHOR % re.escape(item_html_id), page)
    if anchor:
        m = IMG_SRC_RE.search(page[anchor.end():anchor.end() + IMAGE_WINDOW])
        if m:
            image_url = m.group(1)

    anchor = re.search(PRICE_ANCHOR % re.escape(item_html_id), page)
    if anchor:
        start = max(0, min(anchor.start(), anchor.end() - PRICE_WINDOW_BEFORE))
        m = SPAN_TEXT_RE.search(page[start:anchor.end() + PRICE_WINDOW_AFTER])
        if m:
            currency, price = _parse_price(m.group(1))

    return WishlistItem(
        amazon_id=amazon_id,
        author=author,
        binding=binding,
        title=title,
        image_url=image_url,
        currency=currency,
        price=price,
    )


def clean_text(text: str) -> str:
    """Decode HTML entities and drop zero-width spaces."""
    return html.unescape(text).replace(ZERO_WIDTH_SPACE, "")


def scan_items(page: str) -> Iterator[WishlistItem]:
    """Yield the items of one rendered page in document order."""
    for m in ITEM_START_RE.finditer(page):
        fragment = page[m.start():m.end() + ITEM_WINDOW]
        item = parse_item(page, m.group(1), fragment)
        yield WishlistItem(
            amazon_id=item.amazon_id,
            author=clean_text(item.author),
            binding=item.binding,
            title=clean_text(item.title),
            image_url=item.image_url,
            currency=item.currency,
            price=item.price,
        )


def has_next_page(page: str) -> bool:
    return NEXT_PAGE_RE.search(page) is not None


def iter_wishlist_items(
    identifier: str,
    session: requests.Session | None = None,
    host: str = WISHLIST_HOST,
    max_pages: int | None = None,
) -> Iterator[WishlistItem]:
    """
    Lazily yield every item of a wishlist, page by page.

    Pages are fetched strictly in order; page n+1 is requested only after
    page n's items have been yielded and page n shows a "Next" link. A
    failed page fetch ends the sequence with its error. When max_pages
    (default WISHLIST_MAX_PAGES, 0 for no limit) pages have been read and
    another is still announced, PageLimitExceededError is raised.
    """
    if session is None:
        with requests.Session() as own_session:
            yield from iter_wishlist_items(identifier, own_session, host, max_pages)
        return

    wishlist_id = normalize_wishlist_id(identifier)
    if max_pages is None:
        max_pages = WISHLIST_MAX_PAGES

    logger.info("Exporting wishlist '%s' from %s", wishlist_id, host)

    page_number = 1
    total = 0
    while True:
        url = wishlist_url(wishlist_id, page_number, host)
        state = PageState(page_number=page_number, raw_page_text=fetch_page(url, session))
        _dump_html(wishlist_id, state.page_number, state.raw_page_text)

        page_count = 0
        for item in scan_items(state.raw_page_text):
            page_count += 1
            yield item
        total += page_count
        logger.debug(
            "Wishlist '%s' page %d yielded %d items (%d total so far).",
            wishlist_id,
            state.page_number,
            page_count,
            total,
        )

        if not has_next_page(state.raw_page_text):
            break
        if max_pages and state.page_number >= max_pages:
            logger.error(
                "Wishlist '%s' still has a next page after %d pages; stopping.",
                wishlist_id,
                max_pages,
            )
            raise PageLimitExceededError(max_pages)
        page_number = state.page_number + 1

    logger.info("Extracted %d items from wishlist '%s'.", total, wishlist_id)
