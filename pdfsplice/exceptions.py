"""Custom exceptions for the :mod:`pdfsplice` package."""

from __future__ import annotations


class PdfSpliceError(Exception):
    """Base class for all errors raised by :mod:`pdfsplice`."""


class PdfLoadError(PdfSpliceError):
    """Raised when a PDF cannot be read or decoded."""


class PdfStructureError(PdfSpliceError):
    """Raised when the catalog or page tree has an unexpected shape."""


class PdfWriteError(PdfSpliceError):
    """Raised when a document cannot be persisted."""


class InsertionPointError(PdfSpliceError, ValueError):
    """Raised when insertion points are unsorted, duplicated or out of range."""
