# core/models.py
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credentials:
    """
    Product Advertising API credentials. Passed explicitly to every call
    that needs them; the secret never appears in repr() or logs.
    """
    host: str
    access_key: str
    secret: str = field(repr=False)


@dataclass(frozen=True)
class ItemAttributes:
    """
    Bibliographic attributes of one catalog item as returned by ItemLookup.
    Missing elements in the response are represented by empty strings.
    """
    authors: tuple[str, ...] = ()
    binding: str = ""
    ean: str = ""
    edition: str = ""
    isbn: str = ""
    page_count: str = ""
    publication_date: str = ""
    publisher: str = ""
    title: str = ""
    price: str = ""
    price_currency: str = ""


@dataclass(frozen=True)
class WishlistItem:
    amazon_id: str = ""
    author: str = ""
    binding: str = ""
    title: str = ""
    image_url: str = ""
    currency: str = ""
    price: str = ""


@dataclass
class PageState:
    page_number: int
    raw_page_text: str
