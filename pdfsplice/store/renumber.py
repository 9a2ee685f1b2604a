"""Explicit object-id translation tables.

Renumbering is split into two steps: :func:`build_translation` decides the new
id of every object through a single :class:`IdAllocator`, and :func:`rewrite`
copies an object with all of its references translated. Nothing is renumbered
as a side effect of reading or copying.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    IndirectObject,
    NullObject,
    StreamObject,
)

ObjectId = Tuple[int, int]


class IdAllocator:
    """Hands out consecutive object numbers, generation ``0``."""

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            raise ValueError("Object numbers start at 1")
        self._next = start

    @property
    def high_water(self) -> int:
        """Highest number handed out so far (``start - 1`` if none)."""

        return self._next - 1

    def allocate(self) -> ObjectId:
        key = (self._next, 0)
        self._next += 1
        return key


def build_translation(
    ids: Iterable[ObjectId],
    allocator: IdAllocator,
    pinned: Optional[Mapping[ObjectId, ObjectId]] = None,
) -> Dict[ObjectId, ObjectId]:
    """Map each of *ids* to a new id.

    Ids listed in *pinned* keep the target chosen by the caller and do not
    consume a number; every other id takes the allocator's next number in
    iteration order.
    """

    pinned = pinned or {}
    table: Dict[ObjectId, ObjectId] = {}
    for key in ids:
        if key in table:
            continue
        table[key] = pinned[key] if key in pinned else allocator.allocate()
    return table


def rewrite(obj: Any, table: Mapping[ObjectId, ObjectId], owner: Any) -> Any:
    """Return *obj* with every reference translated through *table*.

    Dictionaries and arrays are copied. Streams keep their payload and have
    their dictionary entries rewritten in place. References that are missing
    from *table* become ``null``, which PDF readers treat the same as a
    reference to a free object. New references resolve through *owner*.
    """

    if isinstance(obj, IndirectObject):
        target = table.get((obj.idnum, obj.generation))
        if target is None:
            return NullObject()
        return IndirectObject(target[0], target[1], owner)
    if isinstance(obj, StreamObject):
        for key, value in list(obj.items()):
            obj[key] = rewrite(value, table, owner)
        return obj
    if isinstance(obj, DictionaryObject):
        copy = DictionaryObject()
        for key, value in obj.items():
            copy[key] = rewrite(value, table, owner)
        return copy
    if isinstance(obj, ArrayObject):
        return ArrayObject([rewrite(value, table, owner) for value in obj])
    return obj


__all__ = ["IdAllocator", "ObjectId", "build_translation", "rewrite"]
