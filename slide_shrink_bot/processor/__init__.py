"""Slide deck processing services."""

from .errors import CannotShrink, NoMetadata, ParseError, SerializeError, ShrinkError
from .page_labels import extract_slide_ranges
from .selector import select_and_delete
from .shrink import ShrinkResult, shrink_pdf, shrink_pdf_bytes

__all__ = [
    "CannotShrink",
    "NoMetadata",
    "ParseError",
    "SerializeError",
    "ShrinkError",
    "ShrinkResult",
    "extract_slide_ranges",
    "select_and_delete",
    "shrink_pdf",
    "shrink_pdf_bytes",
]
