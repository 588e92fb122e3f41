# core/errors.py


class CatalogError(Exception):
    """Base class for catalog retrieval errors."""


class NetworkError(CatalogError):
    """The HTTP request could not be completed (connection, DNS, timeout)."""


class MalformedResponseError(CatalogError):
    """A body was received but could not be parsed as XML/HTML."""


class NotFoundError(CatalogError):
    """The response is well formed but has no item attributes block."""


class CredentialError(CatalogError):
    """Access key or secret missing or malformed."""


class PageLimitExceededError(CatalogError):
    """Pagination still reported a next page after the configured maximum."""

    def __init__(self, max_pages: int):
        super().__init__(
            f"Wishlist still has a next page after {max_pages} pages; "
            "raise WISHLIST_MAX_PAGES to continue."
        )
        self.max_pages = max_pages
