"""Slide numbers recovered from "N/M" page footers.

Used only when the document has no page labels. Each page's text is extracted
with PyMuPDF and the trailing ``12 / 44`` style footer gives the slide number.
Build steps of a slide come before its final version, so the last page of
every slide number is the one to keep.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Set

import fitz  # PyMuPDF

from slide_shrink_bot.processor.errors import CannotShrink, ParseError

log = logging.getLogger(__name__)

FOOTER_RE = re.compile(r"\s*(\d+)\s*/\s*\d+\s*$")


def extract_page_texts(data: bytes) -> List[str]:
    """Extract plain text for every page, in page-tree order."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise ParseError(f"PyMuPDF could not open the document: {e}") from e

    try:
        return [page.get_text("text") for page in doc]
    finally:
        doc.close()


def slide_number_from_text(text: str) -> Optional[int]:
    m = FOOTER_RE.search(text or "")
    if not m:
        return None
    return int(m.group(1))


def group_pages_by_footer(texts: List[str]) -> Dict[int, List[int]]:
    """Group 1-based page numbers by the slide number in their footer.

    Pages without a footer are left out.
    """
    groups: Dict[int, List[int]] = {}
    for page_no, text in enumerate(texts, start=1):
        slide = slide_number_from_text(text)
        if slide is None:
            continue
        groups.setdefault(slide, []).append(page_no)
    return groups


def recover_keep_pages(texts: List[str]) -> Set[int]:
    """Pages to keep: the last page per footer number.

    Pages without a footer belong to no slide and are dropped.

    Raises
    ------
    CannotShrink
        No page carries an "N/M" footer.
    """
    groups = group_pages_by_footer(texts)
    if not groups:
        raise CannotShrink("no page-labels and no 'N/M' footer found on any page")

    numbered = sum(len(pages) for pages in groups.values())
    keep = {pages[-1] for pages in groups.values()}
    log.info(
        "Footer text: %d numbered pages in %d slides, %d pages without footer",
        numbered,
        len(groups),
        len(texts) - numbered,
    )
    return keep
