# core/signing.py
"""
Canonical query construction and HMAC-SHA256 request signing for the
Product Advertising API (signature version 2).

Parameter values must already be escaped with escape() before they are put
into the mapping; sign() only sorts and joins.
"""
import base64
import datetime
import hashlib
import hmac
from typing import Mapping
from urllib.parse import quote_plus

import pytz

HTTP_METHOD = "GET"


def escape(value: str) -> str:
    """Query-escape a value: unreserved characters kept, space as '+'."""
    return quote_plus(value, safe="")


def utc_timestamp(now: datetime.datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with second precision, e.g. 2015-03-01T12:00:00Z."""
    if now is None:
        now = datetime.datetime.now(tz=pytz.UTC)
    elif now.tzinfo is not None:
        now = now.astimezone(pytz.UTC)
    return now.strftime("%Y-%m-%dT%H:%M:%SZ")


def canonical_query(params: Mapping[str, str]) -> str:
    # sort the joined "key=value" strings by code point, not by locale
    pairs = sorted(f"{k}={v}" for k, v in params.items())
    return "&".join(pairs)


def string_to_sign(host: str, path: str, query: str) -> str:
    return "\n".join((HTTP_METHOD, host, path, query))


def hmac_sha256_b64(data: str, key: str) -> str:
    digest = hmac.new(key.encode("utf-8"), data.encode("utf-8"), hashlib.sha256).digest()
    return escape(base64.b64encode(digest).decode("ascii"))


def sign(params: Mapping[str, str], host: str, path: str, secret: str) -> tuple[str, str]:
    """
    Return (canonical_query, signature). The caller appends
    "&Signature=<signature>" to the canonical query to form the request.
    """
    query = canonical_query(params)
    signature = hmac_sha256_b64(string_to_sign(host, path, query), secret)
    return query, signature
