"""pdfsplice - splice the pages of one PDF into another at several points.

Quick Start:
    >>> from pdfsplice import merge, normalize
    >>> normalize("insert.pdf")
    >>> merge("book.pdf", [0, 4, 8], "insert.pdf")

Entry points:
    - normalize: pad a document with a blank page to an even page count
    - merge: insert a full copy of a source document after each of several
      destination pages, overwriting the destination
    - page_count: number of pages of a document

For CLI usage, use the 'pdfsplice' command after installation.
"""

from __future__ import annotations

from .config import DEFAULT_OPTIONS, SpliceOptions
from .exceptions import (
    InsertionPointError,
    PdfLoadError,
    PdfSpliceError,
    PdfStructureError,
    PdfWriteError,
)
from .merge import MergeResult, merge
from .normalize import NormalizeResult, normalize
from .store import Document, load, page_count, save

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_OPTIONS",
    "Document",
    "InsertionPointError",
    "MergeResult",
    "NormalizeResult",
    "PdfLoadError",
    "PdfSpliceError",
    "PdfStructureError",
    "PdfWriteError",
    "SpliceOptions",
    "load",
    "merge",
    "normalize",
    "page_count",
    "save",
    "__version__",
]
