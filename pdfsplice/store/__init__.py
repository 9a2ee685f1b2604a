"""Object-level access to PDF documents for :mod:`pdfsplice`."""

from __future__ import annotations

from .document import (
    INHERITABLE_KEYS,
    Document,
    compress,
    iter_references,
    load,
    materialize_inherited,
    object_id,
    page_count,
    type_name,
)
from .renumber import IdAllocator, ObjectId, build_translation, rewrite
from .writer import save, to_writer

__all__ = [
    "Document",
    "INHERITABLE_KEYS",
    "IdAllocator",
    "ObjectId",
    "build_translation",
    "compress",
    "iter_references",
    "load",
    "materialize_inherited",
    "object_id",
    "page_count",
    "rewrite",
    "save",
    "to_writer",
    "type_name",
]
