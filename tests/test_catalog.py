"""
Tests for the command-line entry point.
"""

import io
import os
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

import catalog
from core.errors import NetworkError
from core.models import Credentials, ItemAttributes, WishlistItem


class TestCatalogCli(unittest.TestCase):

    def test_wishlist_rows(self):
        items = [WishlistItem(amazon_id="A1", title="One"), WishlistItem(amazon_id="A2", title="Two")]
        out = io.StringIO()
        with mock.patch("catalog.wishlist.iter_wishlist_items", return_value=iter(items)) as it, \
                redirect_stdout(out):
            rc = catalog.main(["wishlist", "3T9KD", "--host", "www.amazon.co.uk", "--max-pages", "3"])

        self.assertEqual(rc, 0)
        self.assertEqual(out.getvalue().splitlines(), ["A1\t\tOne\t\t\t\t", "A2\t\tTwo\t\t\t\t"])
        it.assert_called_once_with("3T9KD", host="www.amazon.co.uk", max_pages=3)

    def test_lookup_uses_env_credentials(self):
        env = {"AWS_KEY": "AKID", "AWS_SECRET": "secret"}
        out = io.StringIO()
        with mock.patch.dict(os.environ, env), \
                mock.patch("catalog.item_lookup.lookup_item", return_value=ItemAttributes(title="SICP")) as lookup, \
                redirect_stdout(out):
            rc = catalog.main(["lookup", "0262510871", "--host", "ecs.amazonaws.co.uk"])

        self.assertEqual(rc, 0)
        cred = lookup.call_args[0][0]
        self.assertEqual(cred, Credentials("ecs.amazonaws.co.uk", "AKID", "secret"))
        self.assertIn("SICP", out.getvalue())

    def test_lookup_without_credentials(self):
        err = io.StringIO()
        with mock.patch.dict(os.environ, {"AWS_KEY": "", "AWS_SECRET": ""}), \
                mock.patch("catalog.item_lookup.lookup_item") as lookup, \
                redirect_stderr(err):
            rc = catalog.main(["lookup", "0262510871"])

        self.assertEqual(rc, 1)
        lookup.assert_not_called()
        self.assertIn("AWS_KEY", err.getvalue())

    def test_error_exit_status(self):
        with mock.patch("catalog.wishlist.iter_wishlist_items", side_effect=NetworkError("down")), \
                redirect_stderr(io.StringIO()):
            self.assertEqual(catalog.main(["wishlist", "3T9KD"]), 1)

    def test_usage_error(self):
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            catalog.main([])
        self.assertEqual(ctx.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
