"""Pad a PDF with a blank page so that its page count is even.

This is useful before merging documents meant for double-sided printing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pypdf.generic import ArrayObject, DictionaryObject, NameObject, NumberObject

from ..config import DEFAULT_OPTIONS, SpliceOptions
from ..exceptions import PdfStructureError
from ..store import compress, load, save
from ..utils import PathLike, ensure_path

LOGGER = logging.getLogger("pdfsplice.normalize")


@dataclass(frozen=True)
class NormalizeResult:
    """Outcome of :func:`normalize`."""

    path: Path
    original_pages: int
    page_count: int
    modified: bool


def normalize(path: PathLike, *, options: SpliceOptions | None = None) -> NormalizeResult:
    """Append one blank page to the PDF at *path* if its page count is odd.

    The file is rewritten in place; documents with an even page count are
    left untouched. Every structural check happens before anything is
    written.

    Raises:
        PdfLoadError: If *path* is not a readable PDF.
        PdfStructureError: If the catalog or page tree root cannot be found,
            or ``/Kids`` or ``/Count`` have the wrong type.
        PdfWriteError: If the result cannot be written.
    """

    opts = options or DEFAULT_OPTIONS
    pdf_path = ensure_path(path)
    document = load(pdf_path)
    pages_id = document.pages_root_id()
    leaves = document.pages()
    count = len(leaves)

    if count % 2 == 0:
        LOGGER.info("%s already has an even page count (%d)", pdf_path, count)
        return NormalizeResult(pdf_path, count, count, modified=False)

    pages = document.objects[pages_id]
    _, kids = document.dereference(pages.get("/Kids"))
    if not isinstance(kids, ArrayObject):
        raise PdfStructureError(f"/Kids of pages root {pages_id} is not an array")
    _, pages_count = document.dereference(pages.get("/Count"))
    if isinstance(pages_count, bool) or not isinstance(pages_count, int):
        raise PdfStructureError(f"/Count of pages root {pages_id} is not an integer")

    blank = DictionaryObject()
    blank[NameObject("/Type")] = NameObject("/Page")
    blank[NameObject("/Parent")] = document.reference(pages_id)
    if document.inherited(pages_id, "/MediaBox") is None:
        # match the size of the page the blank one follows
        mediabox = document.inherited(leaves[-1][1], "/MediaBox")
        if mediabox is not None:
            blank[NameObject("/MediaBox")] = mediabox

    page_id = document.add_object(blank)
    kids.append(document.reference(page_id))
    pages[NameObject("/Count")] = NumberObject(int(pages_count) + 1)
    LOGGER.debug("Added blank page %s under %s", page_id, pages_id)

    document.renumber()
    if opts.compress_streams:
        compress(document)
    save(document, pdf_path)

    LOGGER.info("Padded %s from %d to %d pages", pdf_path, count, count + 1)
    return NormalizeResult(pdf_path, count, count + 1, modified=True)


__all__ = ["NormalizeResult", "normalize"]
