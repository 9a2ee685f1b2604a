"""Final page positions for a multi-point insertion.

Positions are 1-based and run over the merged page sequence. A copy of the
source is placed after destination page ``p`` (0-based) for every insertion
point ``p``.
"""

from __future__ import annotations

from dataclasses import dataclass
from operator import attrgetter
from typing import List, Sequence

from ..exceptions import PdfStructureError

DESTINATION = "destination"
SOURCE = "source"


@dataclass(frozen=True)
class PageSlot:
    """One page occurrence in the merged document."""

    position: int
    origin: str
    page_index: int
    occurrence: int = 0


def destination_positions(
    destination_pages: int, insertion_points: Sequence[int], source_pages: int
) -> List[int]:
    """Return the final position of each destination page, in page order."""

    marks = set(insertion_points)
    positions: List[int] = []
    position = 0
    for index in range(destination_pages):
        position += 1
        positions.append(position)
        if index in marks:
            position += source_pages
    return positions


def source_positions(
    insertion_points: Sequence[int], source_pages: int
) -> List[List[int]]:
    """Return, per insertion point, the positions of one source copy."""

    copies: List[List[int]] = []
    added_pages = 0
    for point in insertion_points:
        # destination pages 0..point plus every earlier copy precede this one
        base = point + 1 + added_pages
        copies.append([base + offset for offset in range(1, source_pages + 1)])
        added_pages += source_pages
    return copies


def plan_layout(
    destination_pages: int, insertion_points: Sequence[int], source_pages: int
) -> List[PageSlot]:
    """Return every page occurrence ordered by final position.

    Raises:
        PdfStructureError: If the computed positions do not cover
            ``1..total`` exactly once, which happens for unsorted, duplicated
            or out-of-range insertion points.
    """

    slots = [
        PageSlot(position, DESTINATION, index)
        for index, position in enumerate(
            destination_positions(destination_pages, insertion_points, source_pages)
        )
    ]
    for occurrence, positions in enumerate(source_positions(insertion_points, source_pages)):
        slots.extend(
            PageSlot(position, SOURCE, index, occurrence)
            for index, position in enumerate(positions)
        )

    total = destination_pages + len(insertion_points) * source_pages
    slots.sort(key=attrgetter("position"))
    if [slot.position for slot in slots] != list(range(1, total + 1)):
        raise PdfStructureError(
            f"Insertion points {list(insertion_points)} do not produce a "
            f"consistent order of {total} pages"
        )
    return slots


__all__ = [
    "DESTINATION",
    "SOURCE",
    "PageSlot",
    "destination_positions",
    "plan_layout",
    "source_positions",
]
