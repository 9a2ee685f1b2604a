"""Saving a :class:`~pdfsplice.store.document.Document` through pypdf."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List

from pypdf import PdfWriter
from pypdf.generic import DictionaryObject, IndirectObject, PdfObject

from ..exceptions import PdfStructureError, PdfWriteError
from ..utils import PathLike, ensure_path
from .document import Document, iter_references, object_id
from .renumber import IdAllocator, ObjectId, build_translation, rewrite

LOGGER = logging.getLogger("pdfsplice.store")


def _object_number(writer: PdfWriter, target: PdfObject) -> int:
    for number, candidate in enumerate(writer._objects, start=1):  # type: ignore[attr-defined]
        if candidate is target:
            return number
    raise PdfWriteError("Writer lost track of its catalog")


def _info_object(document: Document) -> DictionaryObject | None:
    info = document.trailer.get("/Info")
    if not isinstance(info, IndirectObject):
        return None
    obj = document.objects.get(object_id(info))
    return obj if isinstance(obj, DictionaryObject) else None


def to_writer(document: Document) -> PdfWriter:
    """Build a :class:`~pypdf.PdfWriter` holding every object of *document*.

    The catalog and page tree root take the places of the writer's own, so
    the writer's trailer points at them. All other objects are appended
    after the writer's initial objects in :meth:`Document.ordered_ids` order,
    and ``/Info`` entries are copied into the writer's document information.
    """

    writer = PdfWriter()
    writer.pdf_header = f"%PDF-{document.version}"

    root = writer._root_object  # type: ignore[attr-defined]
    pinned: Dict[ObjectId, ObjectId] = {
        document.catalog_id(): (_object_number(writer, root), 0)
    }
    pages_id = document.find_pages_root_id()
    writer_pages = root.raw_get("/Pages")
    if pages_id is not None and isinstance(writer_pages, IndirectObject):
        pinned[pages_id] = (writer_pages.idnum, 0)

    info = _info_object(document)
    referenced = {
        object_id(reference)
        for obj in document.objects.values()
        for reference in iter_references(obj)
    }
    ids: List[ObjectId] = [
        key
        for key in document.ordered_ids()
        if info is None or document.objects[key] is not info or key in referenced
    ]

    objects = writer._objects  # type: ignore[attr-defined]
    table = build_translation(ids, IdAllocator(len(objects) + 1), pinned)
    for key in ids:
        obj = rewrite(document.objects[key], table, writer)
        if key in pinned:
            slot = objects[table[key][0] - 1]
            slot.clear()
            slot.update(obj)
            continue
        objects.append(obj)
        if len(objects) != table[key][0]:
            raise PdfWriteError(f"Object {key} was not written as number {table[key][0]}")

    if info is not None:
        writer.add_metadata({key: value for key, value in info.items()})
    return writer


def save(document: Document, path: PathLike) -> Path:
    """Write *document* to *path*, replacing any existing file atomically.

    The document is written to a temporary file next to *path* and moved
    into place, so *path* is left untouched if anything fails.

    Raises:
        PdfWriteError: If the document cannot be converted or written.
    """

    target = ensure_path(path)
    try:
        writer = to_writer(document)
    except PdfWriteError:
        raise
    except PdfStructureError as exc:
        LOGGER.error("Cannot save %s: %s", target, exc)
        raise PdfWriteError(f"Document for {target} has no catalog") from exc

    temporary: str | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handle, temporary = tempfile.mkstemp(
            prefix=".pdfsplice-", suffix=".pdf", dir=str(target.parent)
        )
        with os.fdopen(handle, "wb") as output:
            writer.write(output)
        os.replace(temporary, target)
    except Exception as exc:
        LOGGER.error("Failed to write PDF to %s: %s", target, exc)
        if temporary is not None and os.path.exists(temporary):
            os.unlink(temporary)
        raise PdfWriteError(f"Failed to write PDF to {target}") from exc

    LOGGER.info("Wrote %d objects to %s", len(document.objects), target)
    return target


__all__ = ["save", "to_writer"]
