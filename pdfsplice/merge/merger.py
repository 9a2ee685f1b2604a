"""Multi-point insertion of one PDF into another."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    NumberObject,
    PdfObject,
)

from ..config import DEFAULT_OPTIONS, SpliceOptions
from ..store import (
    Document,
    IdAllocator,
    ObjectId,
    build_translation,
    compress,
    load,
    materialize_inherited,
    object_id,
    rewrite,
    save,
)
from ..utils import PathLike, ensure_path
from .layout import DESTINATION, SOURCE, PageSlot, plan_layout
from .policy import RootSelector

LOGGER = logging.getLogger("pdfsplice.merge")


@dataclass
class MergeResult:
    """Outcome of :func:`merge`.

    ``success`` is ``False`` when the destination's page tree cannot be
    located, or when neither input provides a catalog or a page tree root;
    the destination file is not written in that case and ``error`` names
    what was missing.
    """

    success: bool
    output_path: Path
    page_count: int
    destination_pages: int
    source_pages: int
    insertion_points: List[int] = field(default_factory=list)
    error: Optional[str] = None

    def __str__(self) -> str:
        if self.success:
            return f"MergeResult(success=True, pages={self.page_count})"
        return f"MergeResult(success=False, error='{self.error}')"


class _MergeBuilder:
    """Assembles the merged object table.

    Page occurrences take the object number equal to their final position,
    so ``1..total_pages`` is reserved for them; every other object is
    numbered from one allocator starting just above that range.
    """

    def __init__(self, total_pages: int, options: SpliceOptions) -> None:
        self.total_pages = total_pages
        self.options = options
        self.document = Document(version=options.pdf_version)
        self._allocator = IdAllocator(total_pages + 1)
        self._candidates: Dict[ObjectId, PdfObject] = {}
        self._placements: Dict[int, DictionaryObject] = {}
        self._info: Optional[IndirectObject] = None

    def admit(
        self,
        document: Document,
        pages: Sequence[Tuple[int, ObjectId]],
        slots: Sequence[PageSlot],
    ) -> None:
        """Translate *document* into the merged id space.

        Each page is pinned to the position of its first occurrence, so
        references to a page from elsewhere in the document follow it there.
        """

        first_position: Dict[int, int] = {}
        for slot in slots:
            first_position.setdefault(slot.page_index, slot.position)
        pinned = {
            pages[index][1]: (position, 0) for index, position in first_position.items()
        }
        table = build_translation(document.ordered_ids(), self._allocator, pinned)
        LOGGER.debug(
            "Translated %d objects from %s, allocator now at %d",
            len(table),
            document.path,
            self._allocator.high_water,
        )

        page_ids = {key for _, key in pages}
        translated_pages: Dict[ObjectId, DictionaryObject] = {}
        for key, obj in document.objects.items():
            translated = rewrite(obj, table, self.document)
            if key in page_ids:
                translated_pages[key] = translated
            else:
                self._candidates[table[key]] = translated

        for slot in slots:
            key = pages[slot.page_index][1]
            page = translated_pages[key]
            if slot.position != table[key][0]:
                page = DictionaryObject(page)
            self._placements[slot.position] = page

        info = document.trailer.get("/Info")
        if self.options.keep_metadata and self._info is None and isinstance(info, IndirectObject):
            translated_info = rewrite(info, table, self.document)
            if isinstance(translated_info, IndirectObject):
                self._info = translated_info

    def build(self) -> Tuple[Optional[Document], Optional[str]]:
        """Return the merged document, or ``None`` and the reason it failed."""

        selector = RootSelector()
        for key in sorted(self._candidates):
            obj = self._candidates[key]
            if selector.offer(key, obj):
                self.document.objects[key] = obj

        if selector.catalog is None:
            return None, "Catalog root not found"
        if selector.pages is None:
            return None, "Pages root not found"

        pages_id, pages = selector.pages
        pages_ref = self.document.reference(pages_id)
        kids = ArrayObject()
        for position in range(1, self.total_pages + 1):
            page = self._placements[position]
            page[NameObject("/Parent")] = pages_ref
            key = (position, 0)
            self.document.objects[key] = page
            kids.append(self.document.reference(key))

        pages[NameObject("/Count")] = NumberObject(self.total_pages)
        pages[NameObject("/Kids")] = kids
        pages.pop("/Parent", None)
        self.document.objects[pages_id] = pages

        catalog_id, catalog = selector.catalog
        catalog = DictionaryObject(catalog)
        catalog[NameObject("/Pages")] = pages_ref
        catalog.pop("/Outlines", None)
        self.document.objects[catalog_id] = catalog

        self.document.trailer[NameObject("/Root")] = self.document.reference(catalog_id)
        if self._info is not None and object_id(self._info) in self.document.objects:
            self.document.trailer[NameObject("/Info")] = self._info
        self.document.max_id = self._allocator.high_water
        return self.document, None


def merge(
    destination: PathLike,
    insertion_points: Sequence[int],
    source: PathLike,
    *,
    options: SpliceOptions | None = None,
) -> MergeResult:
    """Insert all pages of *source* after each of *insertion_points*.

    The merged document replaces *destination*. Insertion points are 0-based
    destination page indices; the source is copied once per point.

    Args:
        destination: PDF that receives the inserted pages; overwritten.
        insertion_points: Destination page indices after which a copy of the
            source is spliced in.
        source: PDF whose pages are inserted.
        options: Behavioural toggles, see :class:`SpliceOptions`.

    Raises:
        PdfLoadError: If either input cannot be read.
        InsertionPointError: If *insertion_points* are rejected by the
            configured policy.
        PdfStructureError: If a page tree is malformed.
        PdfWriteError: If the merged document cannot be written.
    """

    opts = options or DEFAULT_OPTIONS
    destination_path = ensure_path(destination)
    source_path = ensure_path(source)

    destination_doc = load(destination_path)
    source_doc = load(source_path)
    if destination_doc.find_pages_root_id() is None:
        error = "Pages root not found"
        LOGGER.warning("%s in %s; leaving it unchanged", error, destination_path)
        return MergeResult(
            success=False,
            output_path=destination_path,
            page_count=0,
            destination_pages=0,
            source_pages=len(source_doc.pages()),
            insertion_points=list(insertion_points),
            error=error,
        )

    destination_pages = destination_doc.pages()
    source_pages = source_doc.pages()
    points = opts.prepare_points(insertion_points, len(destination_pages))

    slots = plan_layout(len(destination_pages), points, len(source_pages))
    total_pages = len(slots)
    LOGGER.info("Will result in %d pages", total_pages)

    materialize_inherited(destination_doc)
    materialize_inherited(source_doc)

    builder = _MergeBuilder(total_pages, opts)
    builder.admit(
        destination_doc,
        destination_pages,
        [slot for slot in slots if slot.origin == DESTINATION],
    )
    builder.admit(
        source_doc,
        source_pages,
        [slot for slot in slots if slot.origin == SOURCE],
    )
    merged, error = builder.build()

    result = MergeResult(
        success=merged is not None,
        output_path=destination_path,
        page_count=total_pages,
        destination_pages=len(destination_pages),
        source_pages=len(source_pages),
        insertion_points=points,
        error=error,
    )
    if merged is None:
        LOGGER.warning("%s; leaving %s unchanged", error, destination_path)
        return result

    if opts.prune_unreachable:
        merged.prune()
    merged.renumber()
    if opts.compress_streams:
        compress(merged)
    save(merged, destination_path)

    LOGGER.info(
        "Inserted %s at %d points into %s (%d pages)",
        source_path,
        len(points),
        destination_path,
        total_pages,
    )
    return result


__all__ = ["MergeResult", "merge"]
