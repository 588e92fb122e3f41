import unittest

from core.models import ItemAttributes, WishlistItem
from core.output import format_item_attributes, format_wishlist_item


class TestOutput(unittest.TestCase):

    def test_item_attributes_row(self):
        item = ItemAttributes(
            authors=("Harold Abelson", "Gerald Jay Sussman"),
            binding="Paperback",
            ean="9780262510875",
            edition="2",
            isbn="0262510871",
            page_count="657",
            publication_date="1996-07-25",
            publisher="MIT Press",
            title="SICP",
            price="4295",
            price_currency="GBP",
        )
        self.assertEqual(
            format_item_attributes(item),
            "Harold Abelson, Gerald Jay Sussman\tSICP\tMIT Press\t2 ed\t1996-07-25"
            "\tPaperback\t657 pages\t0262510871\t9780262510875\t4295\tGBP",
        )

    def test_wishlist_row(self):
        item = WishlistItem(
            amazon_id="0201633612",
            author="Erich Gamma",
            binding="Hardcover",
            title="Design\tPatterns",
            image_url="http://img.example/1.jpg",
            price="12.99",
        )
        self.assertEqual(
            format_wishlist_item(item),
            "0201633612\tErich Gamma\tDesign Patterns\tHardcover\t\t12.99\thttp://img.example/1.jpg",
        )


if __name__ == "__main__":
    unittest.main()
