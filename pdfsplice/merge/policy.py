"""Tie-break rules for objects that must be unique in a merged document."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from pypdf.generic import DictionaryObject, PdfObject

from ..store import ObjectId, type_name

LOGGER = logging.getLogger("pdfsplice.merge")

DROPPED_TYPES = ("Outlines", "Outline")


def first_wins_union(first: DictionaryObject, later: DictionaryObject) -> DictionaryObject:
    """Return the union of two dictionaries, preferring *first* on collisions.

    Keys only present in *later* are added; neither input is modified.
    """

    merged = DictionaryObject()
    for key, value in later.items():
        merged[key] = value
    for key, value in first.items():
        merged[key] = value
    return merged


class RootSelector:
    """Picks the surviving catalog and page tree root of a merge.

    Objects must be offered in ascending id order. The first catalog wins
    outright; page tree nodes are folded into the first one seen with
    :func:`first_wins_union`. Leaf pages are left to the caller and outline
    objects are dropped.
    """

    def __init__(self) -> None:
        self.catalog: Optional[Tuple[ObjectId, DictionaryObject]] = None
        self.pages: Optional[Tuple[ObjectId, DictionaryObject]] = None
        self.dropped = 0

    def offer(self, key: ObjectId, obj: PdfObject) -> bool:
        """Classify *obj*; return ``True`` if it should be copied verbatim."""

        kind = type_name(obj)
        if kind == "Catalog":
            if self.catalog is None:
                self.catalog = (key, obj)
            else:
                LOGGER.debug("Discarding additional catalog %s", key)
            return False
        if kind == "Pages":
            if self.pages is None:
                self.pages = (key, first_wins_union(obj, DictionaryObject()))
            else:
                survivor, merged = self.pages
                self.pages = (survivor, first_wins_union(merged, obj))
            return False
        if kind == "Page":
            return False
        if kind in DROPPED_TYPES:
            LOGGER.warning("%s not supported in merged documents, dropping %s", kind, key)
            self.dropped += 1
            return False
        return True


__all__ = ["DROPPED_TYPES", "RootSelector", "first_wins_union"]
