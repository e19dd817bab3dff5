"""Page selection and page-tree editing.

Works on a ``pikepdf.Pdf`` in place:

1) keep the last page of each slide range;
2) delete every other page from the page tree;
3) drop resources nothing references any more.

QPDF only writes objects that are still reachable from the trailer, so the
content streams and images of deleted pages disappear on save.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Tuple

import pikepdf

from slide_shrink_bot.processor.errors import CannotShrink

log = logging.getLogger(__name__)


def keep_pages_from_ranges(slide_ranges: Mapping[int, Tuple[int, int]]) -> Dict[int, int]:
    """Map the last page of every range to its slide number."""
    return {last: slide for slide, (_first, last) in slide_ranges.items()}


def prune_objects(pdf: pikepdf.Pdf) -> None:
    pdf.remove_unreferenced_resources()


def delete_all_except(pdf: pikepdf.Pdf, keep_pages: Iterable[int]) -> List[int]:
    """Delete every page whose 1-based number is not in ``keep_pages``.

    Returns
    -------
    List[int]
        The kept original page numbers, ascending.
    """
    keep = set(keep_pages)
    all_pages = set(range(1, len(pdf.pages) + 1))
    delete = all_pages - keep

    # From the back, so indices of pages still to be deleted do not shift.
    for page_no in sorted(delete, reverse=True):
        del pdf.pages[page_no - 1]

    prune_objects(pdf)
    log.info("Pages: %d -> %d (deleted %d)", len(all_pages), len(pdf.pages), len(delete))
    return sorted(all_pages & keep)


def relabel_pages(pdf: pikepdf.Pdf, slide_numbers: List[int]) -> None:
    """Rewrite /PageLabels so page ``i`` is labelled ``slide_numbers[i]``."""
    nums = pikepdf.Array()
    for index, slide in enumerate(slide_numbers):
        nums.append(index)
        nums.append(pikepdf.Dictionary(P=pikepdf.String(str(slide))))
    pdf.Root.PageLabels = pikepdf.Dictionary(Nums=nums)


def select_and_delete(pdf: pikepdf.Pdf, slide_ranges: Mapping[int, Tuple[int, int]]) -> List[int]:
    """Reduce ``pdf`` to the final page of every slide.

    Parameters
    ----------
    pdf:
        Document to edit in place.
    slide_ranges:
        Slide number -> (first, last) 1-based inclusive physical pages.

    Returns
    -------
    List[int]
        Kept original page numbers, ascending.

    Raises
    ------
    CannotShrink
        ``slide_ranges`` is empty, or none of its ranges ends on a page of
        the document. The document is not touched.
    """
    if not slide_ranges:
        raise CannotShrink("no slide ranges to select pages from")

    keep = keep_pages_from_ranges(slide_ranges)
    if not any(1 <= p <= len(pdf.pages) for p in keep):
        raise CannotShrink(f"no slide range ends inside the document ({len(pdf.pages)} pages)")

    kept = delete_all_except(pdf, keep)
    relabel_pages(pdf, [keep[p] for p in kept])
    return kept
