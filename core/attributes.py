# core/attributes.py
from .models import ItemAttributes
from .xmlquery import DocumentQuery

AUTHOR_PATH = "Author"

# ItemAttributes field -> path of the single-valued element
FIELD_PATHS = {
    "binding": "Binding",
    "ean": "EAN",
    "edition": "Edition",
    "isbn": "ISBN",
    "page_count": "NumberOfPages",
    "publication_date": "PublicationDate",
    "publisher": "Publisher",
    "title": "Title",
    "price": "ListPrice > Amount",
    "price_currency": "ListPrice > CurrencyCode",
}


def extract_attributes(doc: DocumentQuery) -> ItemAttributes:
    """
    Map an ItemAttributes block (or any document containing one) to an
    ItemAttributes record. Missing elements leave the field empty.
    """
    values = {name: doc.first_text(path) or "" for name, path in FIELD_PATHS.items()}
    authors = tuple(doc.iter_text(AUTHOR_PATH))
    return ItemAttributes(authors=authors, **values)
