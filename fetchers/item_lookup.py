# fetchers/item_lookup.py
import os

import requests

from core.attributes import extract_attributes
from core.errors import CredentialError, NetworkError, NotFoundError
from core.logger import get_logger
from core.models import Credentials, ItemAttributes
from core.signing import escape, sign, utc_timestamp
from core.xmlquery import parse_document

logger = get_logger(__name__)

API_PATH = "/onca/xml"
SERVICE = "AWSECommerceService"
API_VERSION = "2011-08-01"
ASSOCIATE_TAG = os.getenv("AWS_ASSOCIATE_TAG", "PutYourAssociateTagHere")
HTTP_TIMEOUT = int(os.getenv("HTTP_TIMEOUT", "30"))


def check_credentials(cred: Credentials) -> None:
    if not cred.host or not cred.host.strip():
        raise CredentialError("API host is empty.")
    if not cred.access_key or not cred.access_key.strip():
        raise CredentialError("Access key is empty.")
    if not cred.secret or not cred.secret.strip():
        raise CredentialError("Secret key is empty.")
    if any(ch.isspace() for ch in cred.access_key):
        raise CredentialError("Access key contains whitespace.")


def base_params(
    access_key: str,
    associate_tag: str = ASSOCIATE_TAG,
    timestamp: str | None = None,
) -> dict[str, str]:
    """Parameters common to every signed request, values already escaped."""
    return {
        "Service": SERVICE,
        "Version": API_VERSION,
        "AssociateTag": escape(associate_tag),
        "Timestamp": escape(timestamp or utc_timestamp()),
        "AWSAccessKeyId": escape(access_key),
    }


def build_lookup_url(
    cred: Credentials,
    item_id: str,
    associate_tag: str = ASSOCIATE_TAG,
    timestamp: str | None = None,
) -> str:
    params = base_params(cred.access_key, associate_tag, timestamp)
    params["Operation"] = "ItemLookup"
    params["ItemId"] = escape(item_id)
    params["ResponseGroup"] = "ItemAttributes"

    query, signature = sign(params, cred.host, API_PATH, cred.secret)
    logger.debug("Canonical query for %s: %s", item_id, query)
    return f"http://{cred.host}{API_PATH}?{query}&Signature={signature}"


def _error_message(doc) -> str:
    message = doc.first_text("Error > Message")
    return f" API says: {message}" if message else ""


def lookup_item(
    cred: Credentials,
    item_id: str,
    session: requests.Session | None = None,
    associate_tag: str = ASSOCIATE_TAG,
) -> ItemAttributes:
    """
    Fetch one item's attributes with a signed ItemLookup request.

    Raises CredentialError before any network traffic when the credentials
    are unusable, NetworkError on transport failure, MalformedResponseError
    when the body is not XML and NotFoundError when the response carries no
    ItemAttributes block.
    """
    check_credentials(cred)
    if session is None:
        with requests.Session() as own_session:
            return lookup_item(cred, item_id, own_session, associate_tag)

    url = build_lookup_url(cred, item_id, associate_tag)
    logger.info("Looking up item %s at %s", item_id, cred.host)

    try:
        resp = session.get(url, timeout=HTTP_TIMEOUT)
    except requests.RequestException as exc:
        logger.error("Item lookup request for %s failed: %s", item_id, exc)
        raise NetworkError(f"Request to {cred.host} failed: {exc}") from exc

    doc = parse_document(resp.content)
    block = doc.first("ItemAttributes")
    if block is None:
        logger.warning("No ItemAttributes block in response for %s.", item_id)
        raise NotFoundError(
            f"Cannot parse response for item {item_id} "
            f"(wrong credentials or unknown item id?).{_error_message(doc)}"
        )

    item = extract_attributes(block)
    logger.debug("Parsed item %s: %s", item_id, item)
    return item
