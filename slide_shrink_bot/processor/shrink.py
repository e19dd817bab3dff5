"""Slide deck shrinking: one page per final slide."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

import pikepdf

from slide_shrink_bot.processor.errors import CannotShrink, NoMetadata, ParseError, SerializeError
from slide_shrink_bot.processor.footer_fallback import extract_page_texts, recover_keep_pages
from slide_shrink_bot.processor.page_labels import SlideRanges, extract_slide_ranges
from slide_shrink_bot.processor.selector import delete_all_except, select_and_delete

log = logging.getLogger(__name__)

SOURCE_PAGE_LABELS = "page_labels"
SOURCE_FOOTER_TEXT = "footer_text"


@dataclass(frozen=True)
class ShrinkResult:
    """Output of one shrink operation."""
    data: bytes
    pages_before: int
    pages_after: int
    kept_pages: Tuple[int, ...]
    source: str


def slide_ranges_from_labels(pdf: pikepdf.Pdf) -> SlideRanges:
    """Like ``extract_slide_ranges`` but raises ``NoMetadata`` instead of returning {}."""
    ranges = extract_slide_ranges(pdf)
    if not ranges:
        raise NoMetadata("document has no usable /PageLabels")
    return ranges


def _open_pdf(data: bytes) -> pikepdf.Pdf:
    try:
        return pikepdf.Pdf.open(io.BytesIO(data))
    except pikepdf.PdfError as e:
        raise ParseError(f"not a readable PDF: {e}") from e


def _save_pdf(pdf: pikepdf.Pdf, compress: bool) -> bytes:
    buf = io.BytesIO()
    try:
        if compress:
            # Same semantics, smaller file: compressed streams packed into object streams.
            pdf.save(
                buf,
                compress_streams=True,
                object_stream_mode=pikepdf.ObjectStreamMode.generate,
            )
        else:
            pdf.save(buf)
    except (pikepdf.PdfError, OSError) as e:
        raise SerializeError(f"failed to write PDF: {e}") from e
    return buf.getvalue()


def _shrink_by_footer_text(pdf: pikepdf.Pdf, data: bytes) -> List[int]:
    texts = extract_page_texts(data)
    if len(texts) != len(pdf.pages):
        raise CannotShrink(
            f"text extraction saw {len(texts)} pages, page tree has {len(pdf.pages)}"
        )
    return delete_all_except(pdf, recover_keep_pages(texts))


def shrink_pdf_bytes(
        data: bytes,
        *,
        text_fallback: bool = True,
        compress: bool = True,
) -> ShrinkResult:
    """Drop the intermediate build pages of a slide deck PDF.

    Parameters
    ----------
    data:
        Source PDF bytes.
    text_fallback:
        When the document has no page labels, recover slide numbers from
        "N/M" footers instead of failing.
    compress:
        Save with compressed streams and object streams.

    Raises
    ------
    ParseError
        ``data`` is not a PDF.
    CannotShrink
        No slide numbers could be derived.
    SerializeError
        The result could not be written.
    """
    with _open_pdf(data) as pdf:
        pages_before = len(pdf.pages)

        try:
            ranges = slide_ranges_from_labels(pdf)
        except NoMetadata as e:
            if not text_fallback:
                raise CannotShrink(str(e)) from e
            log.info("No page labels, falling back to footer text")
            kept = _shrink_by_footer_text(pdf, data)
            source = SOURCE_FOOTER_TEXT
        else:
            log.info("Page labels: %d slides over %d pages", len(ranges), pages_before)
            kept = select_and_delete(pdf, ranges)
            source = SOURCE_PAGE_LABELS

        pages_after = len(pdf.pages)
        out = _save_pdf(pdf, compress)

    log.info(
        "Shrunk via %s: pages %d -> %d, bytes %d -> %d",
        source,
        pages_before,
        pages_after,
        len(data),
        len(out),
    )
    return ShrinkResult(
        data=out,
        pages_before=pages_before,
        pages_after=pages_after,
        kept_pages=tuple(kept),
        source=source,
    )


def shrink_pdf(input_path: str | Path, output_path: str | Path, **kwargs) -> ShrinkResult:
    """Shrink ``input_path`` into ``output_path``.

    Keyword arguments are passed to :func:`shrink_pdf_bytes`. Nothing is written
    when shrinking fails, and a failed write leaves no temporary file behind.
    """
    input_path = Path(input_path)
    output_path = Path(output_path)

    result = shrink_pdf_bytes(input_path.read_bytes(), **kwargs)

    tmp = output_path.with_suffix(".tmp.pdf")
    try:
        tmp.write_bytes(result.data)
        tmp.replace(output_path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise SerializeError(f"failed to write {output_path}: {e}") from e
    return result
