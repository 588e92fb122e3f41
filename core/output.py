# core/output.py
from typing import Iterable

from .models import ItemAttributes, WishlistItem

DELIM = "\t"


def _row(fields: Iterable[str]) -> str:
    # tabs and newlines inside a field would break the row
    return DELIM.join(f.replace("\t", " ").replace("\n", " ") for f in fields)


def format_item_attributes(item: ItemAttributes) -> str:
    return _row(
        [
            ", ".join(item.authors),
            item.title,
            item.publisher,
            f"{item.edition} ed",
            item.publication_date,
            item.binding,
            f"{item.page_count} pages",
            item.isbn,
            item.ean,
            item.price,
            item.price_currency,
        ]
    )


def format_wishlist_item(item: WishlistItem) -> str:
    return _row(
        [
            item.amazon_id,
            item.author,
            item.title,
            item.binding,
            item.currency,
            item.price,
            item.image_url,
        ]
    )
