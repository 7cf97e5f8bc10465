from unittest import TestCase

from core.exceptions import InvalidPaginationError
from core.pagination import page_count, percentage, validate_page_window


class TestPagination(TestCase):
    def test_negative_page_index_rejected(self):
        with self.assertRaises(InvalidPaginationError):
            validate_page_window(-1, 10)

    def test_zero_page_size_rejected(self):
        with self.assertRaises(InvalidPaginationError):
            validate_page_window(0, 0)

    def test_valid_window_passes(self):
        validate_page_window(0, 1)
        validate_page_window(3, 50)

    def test_page_count(self):
        self.assertEqual(page_count(0, 10), 0)
        self.assertEqual(page_count(25, 10), 3)
        self.assertEqual(page_count(30, 10), 3)

    def test_percentage_without_rows_is_zero(self):
        self.assertEqual(percentage(0, 0), 0)
        self.assertEqual(percentage(1, 4), 25.0)
