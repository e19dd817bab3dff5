"""
Tests for page selection and page-tree editing.
"""

import pytest

from slide_shrink_bot.processor.errors import CannotShrink
from slide_shrink_bot.processor.page_labels import extract_slide_ranges
from slide_shrink_bot.processor.selector import (
    delete_all_except,
    keep_pages_from_ranges,
    relabel_pages,
    select_and_delete,
)

from decks import MARKER, new_deck


def _markers(pdf):
    return [int(page.obj[MARKER]) for page in pdf.pages]


class TestKeepPages:
    """Test keep-set computation."""

    def test_last_page_of_each_range(self):
        ranges = {1: (1, 3), 2: (4, 4), 3: (5, 7)}
        assert keep_pages_from_ranges(ranges) == {3: 1, 4: 2, 7: 3}

    def test_empty(self):
        assert keep_pages_from_ranges({}) == {}


class TestSelectAndDelete:
    """Test the destructive edit."""

    def test_keeps_final_page_of_each_slide(self):
        pdf = new_deck(7)

        kept = select_and_delete(pdf, {1: (1, 3), 2: (4, 4), 3: (5, 7)})

        assert kept == [3, 4, 7]
        assert len(pdf.pages) == 3
        assert _markers(pdf) == [3, 4, 7]

    def test_empty_mapping_raises_and_leaves_document(self):
        pdf = new_deck(4)

        with pytest.raises(CannotShrink):
            select_and_delete(pdf, {})

        assert _markers(pdf) == [1, 2, 3, 4]
        assert "/PageLabels" not in pdf.Root

    def test_ranges_outside_document_raise_and_leave_document(self):
        pdf = new_deck(3)

        with pytest.raises(CannotShrink):
            select_and_delete(pdf, {1: (5, 9)})

        assert _markers(pdf) == [1, 2, 3]
        assert "/PageLabels" not in pdf.Root

    def test_one_page_per_slide_is_unchanged(self):
        pdf = new_deck(3)

        kept = select_and_delete(pdf, {1: (1, 1), 2: (2, 2), 3: (3, 3)})

        assert kept == [1, 2, 3]
        assert _markers(pdf) == [1, 2, 3]

    def test_output_is_relabelled(self):
        pdf = new_deck(7)

        select_and_delete(pdf, {4: (1, 3), 5: (4, 4), 9: (5, 7)})

        assert extract_slide_ranges(pdf) == {4: (1, 1), 5: (2, 2), 9: (3, 3)}


class TestDeleteAllExcept:
    """Test raw page deletion."""

    def test_unknown_pages_are_ignored(self):
        pdf = new_deck(3)

        kept = delete_all_except(pdf, {2, 10})

        assert kept == [2]
        assert _markers(pdf) == [2]

    def test_order_is_preserved(self):
        pdf = new_deck(6)

        delete_all_except(pdf, [6, 1, 4])

        assert _markers(pdf) == [1, 4, 6]


class TestRelabelPages:
    """Test /PageLabels rewriting."""

    def test_zero_slide_number(self):
        pdf = new_deck(2)

        relabel_pages(pdf, [0, 1])

        assert extract_slide_ranges(pdf) == {0: (1, 1), 1: (2, 2)}
