"""Page-count normalisation for the :mod:`pdfsplice` toolkit."""

from __future__ import annotations

from .normalizer import NormalizeResult, normalize

__all__ = ["NormalizeResult", "normalize"]
