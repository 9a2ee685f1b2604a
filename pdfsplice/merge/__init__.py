"""Multi-point merge engine for the :mod:`pdfsplice` toolkit."""

from __future__ import annotations

from .layout import PageSlot, destination_positions, plan_layout, source_positions
from .merger import MergeResult, merge
from .policy import RootSelector, first_wins_union

__all__ = [
    "MergeResult",
    "PageSlot",
    "RootSelector",
    "destination_positions",
    "first_wins_union",
    "merge",
    "plan_layout",
    "source_positions",
]
