"""Behavioural options shared by the normalizer and the merge engine."""

from __future__ import annotations

import dataclasses
from typing import Literal, Sequence

from .exceptions import InsertionPointError

InsertionPolicy = Literal["strict", "normalize"]

_POLICIES: tuple[InsertionPolicy, ...] = ("strict", "normalize")


@dataclasses.dataclass(frozen=True)
class SpliceOptions:
    """Defines behavioural toggles for a splice run.

    ``insertion_policy`` controls how insertion points are checked:
    ``"strict"`` rejects anything that is not strictly ascending, while
    ``"normalize"`` sorts and de-duplicates first. Out-of-range points are
    rejected under both policies.
    """

    pdf_version: str = "1.5"
    compress_streams: bool = True
    prune_unreachable: bool = True
    keep_metadata: bool = True
    insertion_policy: InsertionPolicy = "strict"

    def __post_init__(self) -> None:
        if self.insertion_policy not in _POLICIES:
            raise ValueError(
                f"Unknown insertion policy {self.insertion_policy!r}; "
                f"expected one of {', '.join(_POLICIES)}"
            )

    def prepare_points(self, points: Sequence[int], page_count: int) -> list[int]:
        """Return *points* checked against ``page_count`` destination pages."""

        prepared = list(points)
        for point in prepared:
            if isinstance(point, bool) or not isinstance(point, int):
                raise InsertionPointError(
                    f"Insertion point {point!r} is not an integer"
                )

        if self.insertion_policy == "normalize":
            prepared = sorted(set(prepared))

        for previous, current in zip(prepared, prepared[1:]):
            if current <= previous:
                raise InsertionPointError(
                    "Insertion points must be strictly ascending, "
                    f"got {current} after {previous}"
                )

        for point in prepared:
            if point < 0 or point >= page_count:
                raise InsertionPointError(
                    f"Insertion point {point} is outside the destination "
                    f"page range 0..{page_count - 1}"
                )
        return prepared


DEFAULT_OPTIONS = SpliceOptions()

__all__ = ["DEFAULT_OPTIONS", "InsertionPolicy", "SpliceOptions"]
