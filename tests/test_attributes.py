"""
Unit tests for XML path queries and item attribute extraction.
"""

import unittest
from pathlib import Path

from core.attributes import extract_attributes
from core.errors import MalformedResponseError
from core.models import ItemAttributes
from core.xmlquery import parse_document

FIXTURES = Path(__file__).parent / "fixtures"


class TestParseDocument(unittest.TestCase):

    def test_empty_body_is_malformed(self):
        with self.assertRaises(MalformedResponseError):
            parse_document(b"")

    def test_first_text_and_missing(self):
        doc = parse_document(b"<Root><A>one</A><A>two</A></Root>")
        self.assertEqual(doc.first_text("A"), "one")
        self.assertIsNone(doc.first_text("B"))
        self.assertEqual(list(doc.iter_text("A")), ["one", "two"])
        self.assertEqual([n.text() for n in doc.iter_nodes("A")], ["one", "two"])

    def test_default_namespace_ignored(self):
        doc = parse_document(b'<Root xmlns="http://example.com/ns"><A><B>x</B></A></Root>')
        self.assertEqual(doc.first_text("A > B"), "x")


class TestExtractAttributes(unittest.TestCase):

    def test_full_response(self):
        doc = parse_document((FIXTURES / "item_lookup.xml").read_bytes())
        item = extract_attributes(doc.first("ItemAttributes"))
        self.assertEqual(
            item,
            ItemAttributes(
                authors=("Harold Abelson", "Gerald Jay Sussman", "Julie Sussman"),
                binding="Paperback",
                ean="9780262510875",
                edition="2",
                isbn="0262510871",
                page_count="657",
                publication_date="1996-07-25",
                publisher="MIT Press",
                title="Structure and Interpretation of Computer Programs",
                price="4295",
                price_currency="GBP",
            ),
        )

    def test_title_only(self):
        doc = parse_document(b"<ItemAttributes><Title>Only a title</Title></ItemAttributes>")
        item = extract_attributes(doc)
        self.assertEqual(item, ItemAttributes(title="Only a title"))
        self.assertEqual(item.authors, ())
        self.assertEqual(item.price, "")

    def test_author_order_preserved(self):
        doc = parse_document(
            b"<ItemAttributes>"
            b"<Author>Zed</Author><Author>Adam</Author><Author>Zed</Author>"
            b"</ItemAttributes>"
        )
        self.assertEqual(extract_attributes(doc).authors, ("Zed", "Adam", "Zed"))

    def test_price_needs_list_price_parent(self):
        doc = parse_document(
            b"<ItemAttributes><Amount>100</Amount>"
            b"<ListPrice><Amount>4295</Amount></ListPrice></ItemAttributes>"
        )
        item = extract_attributes(doc)
        self.assertEqual(item.price, "4295")
        self.assertEqual(item.price_currency, "")


if __name__ == "__main__":
    unittest.main()
