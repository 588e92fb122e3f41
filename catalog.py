import argparse
import os
import sys
from typing import List, Optional

from core.errors import CatalogError, CredentialError
from core.logger import get_logger
from core.models import Credentials
from core.output import format_item_attributes, format_wishlist_item
from fetchers import item_lookup, wishlist

logger = get_logger(__name__)

AWS_HOST = os.getenv("AWS_HOST", "ecs.amazonaws.co.uk")


def credentials_from_env(host: str = AWS_HOST) -> Credentials:
    access_key = os.getenv("AWS_KEY", "").strip()
    secret = os.getenv("AWS_SECRET", "").strip()
    if not access_key or not secret:
        raise CredentialError(
            "AWS credentials are read from the environment variables AWS_KEY and AWS_SECRET."
        )
    return Credentials(host=host, access_key=access_key, secret=secret)


def run_lookup(args: argparse.Namespace) -> int:
    cred = credentials_from_env(args.host)
    item = item_lookup.lookup_item(cred, args.item_id, associate_tag=args.associate_tag)
    print(format_item_attributes(item))
    return 0


def run_wishlist(args: argparse.Namespace) -> int:
    count = 0
    for item in wishlist.iter_wishlist_items(
        args.wishlist, host=args.host, max_pages=args.max_pages
    ):
        print(format_wishlist_item(item), flush=True)
        count += 1
    logger.info("Exported %d wishlist items.", count)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog",
        description="Retrieve book metadata from the Amazon catalog as tab separated rows.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_lookup = sub.add_parser("lookup", help="Look up one item with the Product Advertising API")
    p_lookup.add_argument("item_id", help="ASIN or ISBN of the item")
    p_lookup.add_argument("--host", default=AWS_HOST, help="API endpoint host")
    p_lookup.add_argument(
        "--associate-tag",
        default=item_lookup.ASSOCIATE_TAG,
        help="Associate tag sent with the request",
    )
    p_lookup.set_defaults(func=run_lookup)

    p_wishlist = sub.add_parser("wishlist", help="Export every item of a public wishlist")
    p_wishlist.add_argument(
        "wishlist",
        help="Wishlist ID or URL, e.g. http://www.amazon.co.uk/gp/registry/wishlist/THIS_IS_THE_ID/",
    )
    p_wishlist.add_argument("--host", default=wishlist.WISHLIST_HOST, help="Store host")
    p_wishlist.add_argument(
        "--max-pages",
        type=int,
        default=wishlist.WISHLIST_MAX_PAGES,
        help="Stop with an error after this many pages (0 = no limit)",
    )
    p_wishlist.set_defaults(func=run_wishlist)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except CatalogError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
