"""Slide ranges from the /PageLabels number tree.

Presentation tools that export every build step as its own page usually label
all pages of one slide with the same number. The catalog's /PageLabels entry
records where each label run begins, so the physical span of a slide is the
distance between two consecutive breakpoints.

Nothing in here raises for missing or broken metadata: an empty mapping is the
"no metadata" answer, and callers decide what to do with it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, NamedTuple, Optional

import pikepdf

log = logging.getLogger(__name__)

_UTF16_BOM = b"\xfe\xff"
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")

# /Kids nesting deeper than this is treated as a broken (or cyclic) tree.
_MAX_TREE_DEPTH = 32


@dataclass(frozen=True)
class PageLabelEntry:
    """A label breakpoint: pages from ``start_index`` on carry ``label_value``."""
    start_index: int
    label_value: int


class SlideRange(NamedTuple):
    """1-indexed, inclusive physical page span of one slide."""
    first: int
    last: int


SlideRanges = Dict[int, SlideRange]


def decode_label_prefix(raw: bytes) -> Optional[int]:
    """Decode a /P label prefix and parse it as an unsigned integer.

    Strings starting with the UTF-16BE byte order mark are decoded as UTF-16BE
    (a dangling odd byte is ignored). Anything else maps byte-for-byte to
    characters. Surrounding whitespace is stripped.

    Returns
    -------
    Optional[int]
        The number, or None when the prefix is not purely numeric.
    """
    if raw.startswith(_UTF16_BOM):
        body = raw[2:]
        body = body[: len(body) - len(body) % 2]
        try:
            text = body.decode("utf-16-be")
        except UnicodeDecodeError:
            return None
    else:
        text = raw.decode("latin-1")

    text = text.strip()
    if not _UNSIGNED_RE.fullmatch(text):
        return None
    return int(text)


def _as_dictionary(obj) -> Optional[pikepdf.Dictionary]:
    # pikepdf dereferences indirect objects on access, so both the direct and
    # the indirect form arrive here as a Dictionary.
    if isinstance(obj, pikepdf.Dictionary):
        return obj
    return None


def _as_unsigned(obj) -> Optional[int]:
    if isinstance(obj, bool) or not isinstance(obj, int):
        return None
    if obj < 0:
        return None
    return obj


def parse_label_descriptor(descriptor) -> Optional[int]:
    """Return the slide number a page label dictionary encodes.

    The explicit /P prefix wins over the numeric /St start value.
    """
    label = _as_dictionary(descriptor)
    if label is None:
        return None

    prefix = label.get("/P")
    if isinstance(prefix, pikepdf.String):
        value = decode_label_prefix(bytes(prefix))
        if value is not None:
            return value

    return _as_unsigned(label.get("/St"))


def _iter_nums_arrays(node: pikepdf.Dictionary, depth: int = 0) -> Iterator[pikepdf.Array]:
    if depth > _MAX_TREE_DEPTH:
        log.warning("PageLabels tree deeper than %d levels, ignoring the rest", _MAX_TREE_DEPTH)
        return

    nums = node.get("/Nums")
    if isinstance(nums, pikepdf.Array):
        yield nums

    kids = node.get("/Kids")
    if isinstance(kids, pikepdf.Array):
        for kid in kids:
            kid_dict = _as_dictionary(kid)
            if kid_dict is not None:
                yield from _iter_nums_arrays(kid_dict, depth + 1)


def read_page_label_entries(pdf: pikepdf.Pdf) -> List[PageLabelEntry]:
    """Read every usable breakpoint of the document's /PageLabels tree.

    Malformed pairs are skipped one by one; the result is sorted by start index.
    """
    try:
        root = pdf.Root
    except (AttributeError, KeyError, pikepdf.PdfError):
        return []

    page_labels = _as_dictionary(root.get("/PageLabels"))
    if page_labels is None:
        return []

    entries: List[PageLabelEntry] = []
    for nums in _iter_nums_arrays(page_labels):
        flat = list(nums)
        if len(flat) % 2:
            log.debug("PageLabels /Nums has odd length %d, dropping trailing item", len(flat))
        entries.extend(_parse_pairs(flat))

    entries.sort(key=lambda e: e.start_index)
    return entries


def _parse_pairs(flat: list) -> List[PageLabelEntry]:
    entries: List[PageLabelEntry] = []
    for i in range(0, len(flat) - 1, 2):
        start_index = _as_unsigned(flat[i])
        if start_index is None:
            log.debug("Skipping breakpoint with bad start index: %r", flat[i])
            continue

        label_value = parse_label_descriptor(flat[i + 1])
        if label_value is None:
            log.debug("Skipping breakpoint at page index %d: no numeric label", start_index)
            continue

        entries.append(PageLabelEntry(start_index=start_index, label_value=label_value))

    return entries


def ranges_from_entries(entries: List[PageLabelEntry], total_pages: int) -> SlideRanges:
    """Turn sorted breakpoints into 1-indexed inclusive slide ranges.

    A later breakpoint with the same label overwrites the earlier one.
    """
    result: SlideRanges = {}
    for i, entry in enumerate(entries):
        if i + 1 < len(entries):
            end_index = entries[i + 1].start_index - 1
        else:
            end_index = total_pages - 1

        end_index = min(end_index, total_pages - 1)

        first, last = entry.start_index + 1, end_index + 1
        if first > last:
            # duplicate start index, or a breakpoint past the last page
            continue

        result[entry.label_value] = SlideRange(first, last)

    return result


def extract_slide_ranges(pdf: pikepdf.Pdf) -> SlideRanges:
    """Map each slide number to the physical pages that render it.

    Returns an empty dict when the document has no usable page labels.
    """
    entries = read_page_label_entries(pdf)
    if not entries:
        return {}

    ranges = ranges_from_entries(entries, len(pdf.pages))
    log.debug("PageLabels: %d breakpoints -> %d slide ranges", len(entries), len(ranges))
    return ranges
