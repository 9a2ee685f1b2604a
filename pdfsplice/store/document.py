"""In-memory object table for a PDF document built on :mod:`pypdf.generic`."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple, Union

from pypdf import PdfReader
from pypdf.errors import PdfReadError
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    PdfObject,
    StreamObject,
)

from ..exceptions import PdfLoadError, PdfStructureError
from ..utils import PathLike, ensure_path
from .renumber import IdAllocator, ObjectId, build_translation, rewrite

LOGGER = logging.getLogger("pdfsplice.store")

INHERITABLE_KEYS = ("/Resources", "/MediaBox", "/CropBox", "/Rotate")

ObjectKey = Union[ObjectId, IndirectObject]


def object_id(reference: IndirectObject) -> ObjectId:
    """Return the ``(number, generation)`` pair of *reference*."""

    return (reference.idnum, reference.generation)


def type_name(obj: object) -> str:
    """Return the ``/Type`` of a dictionary without its leading slash.

    An empty string is returned for anything that is not a dictionary or
    carries no usable type entry.
    """

    if not isinstance(obj, DictionaryObject):
        return ""
    value = obj.get("/Type")
    if isinstance(value, IndirectObject):
        value = value.get_object()
    if isinstance(value, NameObject):
        return str(value)[1:]
    return ""


def iter_references(obj: object) -> Iterator[IndirectObject]:
    """Yield every reference held directly inside *obj*.

    Referenced objects are not entered; only the direct structure of *obj*
    (nested dictionaries and arrays) is walked.
    """

    stack = [obj]
    while stack:
        current = stack.pop()
        if isinstance(current, IndirectObject):
            yield current
        elif isinstance(current, DictionaryObject):
            stack.extend(current.values())
        elif isinstance(current, ArrayObject):
            stack.extend(current)


class Document:
    """A PDF object table together with its trailer.

    Objects are stored by :data:`ObjectId`. References created through
    :meth:`reference` resolve against this table, so pypdf's accessors
    (``dictionary["/Key"]``, ``reference.get_object()``) keep working after
    the document has been renumbered.
    """

    def __init__(
        self,
        objects: Optional[Dict[ObjectId, PdfObject]] = None,
        trailer: Optional[DictionaryObject] = None,
        *,
        version: str = "1.5",
        path: Optional[PathLike] = None,
    ) -> None:
        self.objects: Dict[ObjectId, PdfObject] = dict(objects or {})
        self.trailer = trailer if trailer is not None else DictionaryObject()
        self.version = version
        self.path = ensure_path(path) if path is not None else None
        self.max_id = max((number for number, _ in self.objects), default=0)

    def __repr__(self) -> str:
        return (
            f"Document(path={self.path!s}, objects={len(self.objects)}, "
            f"max_id={self.max_id})"
        )

    # -- object access -------------------------------------------------

    def reference(self, key: ObjectId) -> IndirectObject:
        """Return a reference to *key* that resolves against this document."""

        number, generation = key
        return IndirectObject(number, generation, self)

    def get_object(self, key: ObjectKey) -> Optional[PdfObject]:
        """Return the object stored under *key*, or ``None`` if absent."""

        if isinstance(key, IndirectObject):
            key = object_id(key)
        return self.objects.get(key)

    def dereference(self, value: object) -> Tuple[Optional[ObjectId], object]:
        """Resolve *value* if it is a reference.

        Returns the referenced object's id (``None`` for direct values)
        together with the resolved object.
        """

        if isinstance(value, IndirectObject):
            key = object_id(value)
            return key, self.objects.get(key)
        return None, value

    def add_object(self, obj: PdfObject) -> ObjectId:
        """Store *obj* under the next free object number and return its id."""

        self.max_id += 1
        key = (self.max_id, 0)
        self.objects[key] = obj
        return key

    # -- document structure ----------------------------------------------

    def catalog_id(self) -> ObjectId:
        root = self.trailer.get("/Root")
        if not isinstance(root, IndirectObject):
            raise PdfStructureError("Trailer has no /Root reference")
        key = object_id(root)
        if not isinstance(self.objects.get(key), DictionaryObject):
            raise PdfStructureError(f"Catalog {key} is missing or not a dictionary")
        return key

    def catalog(self) -> DictionaryObject:
        """Return the document catalog, raising if it cannot be located."""

        return self.objects[self.catalog_id()]

    def pages_root_id(self) -> ObjectId:
        """Return the id of the page tree root referenced by the catalog."""

        pages = self.catalog().get("/Pages")
        if not isinstance(pages, IndirectObject):
            raise PdfStructureError("Catalog has no indirect /Pages entry")
        key = object_id(pages)
        if not isinstance(self.objects.get(key), DictionaryObject):
            raise PdfStructureError(f"Pages root {key} is missing or not a dictionary")
        return key

    def find_pages_root_id(self) -> Optional[ObjectId]:
        """Like :meth:`pages_root_id`, but return ``None`` instead of raising."""

        try:
            return self.pages_root_id()
        except PdfStructureError as exc:
            LOGGER.debug("No page tree in %s: %s", self.path, exc)
            return None

    def pages(self) -> List[Tuple[int, ObjectId]]:
        """Return ``(index, object id)`` for every leaf page in reading order.

        ``/Parent`` links are never followed and a node reachable twice is
        only counted once, so malformed trees cannot loop.
        """

        root_id = self.find_pages_root_id()
        if root_id is None:
            return []

        leaves: List[ObjectId] = []
        visited: set[ObjectId] = set()
        stack = [root_id]
        while stack:
            node_id = stack.pop()
            if node_id in visited:
                LOGGER.warning("Page tree node %s is referenced more than once", node_id)
                continue
            visited.add(node_id)

            node = self.objects.get(node_id)
            if not isinstance(node, DictionaryObject):
                LOGGER.warning("Skipping page tree node %s: not a dictionary", node_id)
                continue

            kind = type_name(node)
            if kind == "Page" or (kind != "Pages" and "/Kids" not in node):
                leaves.append(node_id)
                continue

            _, kids = self.dereference(node.get("/Kids"))
            if kids is None:
                continue
            if not isinstance(kids, ArrayObject):
                raise PdfStructureError(f"/Kids of page tree node {node_id} is not an array")
            children = [object_id(kid) for kid in kids if isinstance(kid, IndirectObject)]
            stack.extend(reversed(children))

        return list(enumerate(leaves))

    def inherited(self, node_id: ObjectId, key: str) -> Optional[PdfObject]:
        """Return the raw value of *key* on *node_id* or its nearest ancestor."""

        visited: set[ObjectId] = set()
        current: Optional[ObjectId] = node_id
        while current is not None and current not in visited:
            visited.add(current)
            node = self.objects.get(current)
            if not isinstance(node, DictionaryObject):
                return None
            if key in node:
                return node.get(key)
            parent = node.get("/Parent")
            current = object_id(parent) if isinstance(parent, IndirectObject) else None
        return None

    def ordered_ids(self) -> List[ObjectId]:
        """Return object ids with the catalog and page tree root first.

        The remaining ids follow in ascending order. Renumbering in this order
        gives the structural roots the lowest numbers of the document.
        """

        leading: List[ObjectId] = []
        root = self.trailer.get("/Root")
        if isinstance(root, IndirectObject) and object_id(root) in self.objects:
            leading.append(object_id(root))
            pages_root = self.find_pages_root_id()
            if pages_root is not None and pages_root not in leading:
                leading.append(pages_root)
        rest = sorted(key for key in self.objects if key not in leading)
        return leading + rest

    # -- whole-table operations --------------------------------------------

    def renumber(self, start: int = 1) -> Dict[ObjectId, ObjectId]:
        """Renumber every object into a compact range beginning at *start*.

        All references, including the trailer's, are rewritten; references to
        objects that are not in the table become ``null``. Returns the
        translation table and leaves ``max_id`` at the highest number used.
        """

        allocator = IdAllocator(start)
        table = build_translation(self.ordered_ids(), allocator)
        self.objects = {
            table[key]: rewrite(obj, table, self) for key, obj in self.objects.items()
        }
        self.trailer = rewrite(self.trailer, table, self)
        self.max_id = allocator.high_water
        LOGGER.debug("Renumbered %d objects starting at %d", len(table), start)
        return table

    def prune(self) -> int:
        """Drop objects unreachable from the trailer and return how many."""

        reachable: set[ObjectId] = set()
        pending = list(iter_references(self.trailer))
        while pending:
            key = object_id(pending.pop())
            if key in reachable or key not in self.objects:
                continue
            reachable.add(key)
            pending.extend(iter_references(self.objects[key]))

        unreachable = [key for key in self.objects if key not in reachable]
        for key in unreachable:
            del self.objects[key]
        if unreachable:
            LOGGER.debug("Pruned %d unreachable objects", len(unreachable))
        return len(unreachable)


def materialize_inherited(document: Document) -> None:
    """Copy inheritable attributes from ancestors onto every leaf page."""

    for _, page_id in document.pages():
        page = document.objects[page_id]
        for key in INHERITABLE_KEYS:
            if key in page:
                continue
            value = document.inherited(page_id, key)
            if value is not None:
                page[NameObject(key)] = value


def compress(document: Document) -> int:
    """Flate-encode every stream without a ``/Filter``; return the count."""

    encoded = 0
    for key, obj in list(document.objects.items()):
        if isinstance(obj, StreamObject) and "/Filter" not in obj:
            document.objects[key] = obj.flate_encode()
            encoded += 1
    if encoded:
        LOGGER.debug("Flate-encoded %d streams", encoded)
    return encoded


def _header_version(header: str) -> str:
    if header.startswith("%PDF-"):
        return header[5:].strip() or "1.4"
    return "1.4"


def _collect_objects(reader: PdfReader) -> Tuple[Dict[ObjectId, PdfObject], DictionaryObject]:
    trailer = DictionaryObject()
    for key in ("/Root", "/Info"):
        if key in reader.trailer:
            value = reader.trailer.raw_get(key)
            if isinstance(value, IndirectObject):
                trailer[NameObject(key)] = value

    objects: Dict[ObjectId, PdfObject] = {}
    pending = list(iter_references(trailer))
    while pending:
        reference = pending.pop()
        key = object_id(reference)
        if key in objects:
            continue
        obj = reference.get_object()
        if obj is None:
            LOGGER.debug("Skipping dangling reference %s", key)
            continue
        objects[key] = obj
        pending.extend(iter_references(obj))
    return objects, trailer


def load(path: PathLike) -> Document:
    """Load the PDF at *path* into a :class:`Document`.

    Raises:
        PdfLoadError: If the file is missing, unreadable, encrypted with a
            non-empty password, or cannot be decoded.
    """

    pdf_path = ensure_path(path)
    if not pdf_path.is_file():
        LOGGER.error("PDF file not found: %s", pdf_path)
        raise PdfLoadError(f"PDF file not found: {pdf_path}")

    LOGGER.debug("Loading PDF %s", pdf_path)
    try:
        reader = PdfReader(str(pdf_path), strict=False)
        if reader.is_encrypted and not reader.decrypt(""):
            raise PdfLoadError(f"Unable to decrypt encrypted PDF: {pdf_path}")
        objects, trailer = _collect_objects(reader)
        version = _header_version(reader.pdf_header)
    except PdfLoadError as exc:
        LOGGER.error("%s", exc)
        raise
    except PdfReadError as exc:
        LOGGER.error("Failed to read PDF %s: %s", pdf_path, exc)
        raise PdfLoadError(f"Corrupted or invalid PDF file: {pdf_path}") from exc
    except Exception as exc:  # pragma: no cover - dependency exceptions vary
        LOGGER.error("Unexpected error reading PDF %s: %s", pdf_path, exc)
        raise PdfLoadError(f"Unexpected error reading PDF: {pdf_path}") from exc

    if "/Root" not in trailer:
        LOGGER.warning("PDF %s has no catalog reference in its trailer", pdf_path)

    document = Document(objects, trailer, version=version, path=pdf_path)
    LOGGER.info("Loaded %s with %d objects", pdf_path, len(objects))
    return document


def page_count(path: PathLike) -> int:
    """Return the number of leaf pages of the PDF at *path*."""

    return len(load(path).pages())


__all__ = [
    "Document",
    "INHERITABLE_KEYS",
    "compress",
    "iter_references",
    "load",
    "materialize_inherited",
    "object_id",
    "page_count",
    "type_name",
]
