"""Top-level package for the Slide Shrink bot.

This package contains:
- the shrink pipeline (pikepdf page labels + PyMuPDF footer text fallback);
- a Telegram bot (aiogram) entrypoint and handlers;
- a command line tool and small utilities (settings, logging setup).

Public API is intentionally small so the web API can reuse the same pipeline.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
