"""Errors raised by the shrink pipeline."""

from __future__ import annotations


class ShrinkError(Exception):
    """Base class for every failure of a shrink operation."""


class ParseError(ShrinkError):
    """Input bytes are not a readable PDF document."""


class NoMetadata(ShrinkError):
    """The document carries no usable /PageLabels number tree."""


class CannotShrink(ShrinkError):
    """Neither page labels nor footer text yield slide numbers."""


class SerializeError(ShrinkError):
    """The edited document could not be written back to bytes."""
