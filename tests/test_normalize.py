from __future__ import annotations

from pathlib import Path

import pytest
from pypdf.generic import NameObject, NumberObject

from pdfsplice import normalize
from pdfsplice.exceptions import PdfLoadError, PdfStructureError
from pdfsplice.store import load, page_count, save

from .helpers import DESTINATION_WIDTHS, page_widths


def _corrupt_pages_root(path: Path, key: str, value: object) -> bytes:
    document = load(path)
    document.objects[document.pages_root_id()][NameObject(key)] = value
    save(document, path)
    return path.read_bytes()


def test_odd_page_count_gets_blank_page(destination_pdf: Path) -> None:
    assert page_count(destination_pdf) == 9

    result = normalize(destination_pdf)

    assert result.modified is True
    assert result.original_pages == 9
    assert result.page_count == 10
    assert page_count(destination_pdf) == 10
    assert page_widths(destination_pdf) == DESTINATION_WIDTHS + [DESTINATION_WIDTHS[-1]]


def test_count_matches_leaves_after_normalization(destination_pdf: Path) -> None:
    normalize(destination_pdf)

    document = load(destination_pdf)
    root = document.objects[document.pages_root_id()]
    assert root["/Count"] == len(document.pages()) == 10
    assert sorted(document.objects) == [(n, 0) for n in range(1, len(document.objects) + 1)]


def test_even_page_count_is_not_rewritten(pdf_factory) -> None:
    path = pdf_factory("even.pdf", [100, 200])
    before = path.read_bytes()

    result = normalize(path)

    assert result.modified is False
    assert result.page_count == 2
    assert path.read_bytes() == before


def test_normalization_is_idempotent(destination_pdf: Path) -> None:
    normalize(destination_pdf)
    after_first = destination_pdf.read_bytes()

    result = normalize(destination_pdf)

    assert result.modified is False
    assert destination_pdf.read_bytes() == after_first


def test_single_page_document(pdf_factory) -> None:
    path = pdf_factory("single.pdf", [300])

    normalize(path)

    assert page_widths(path) == [300, 300]


def test_non_numeric_count_is_structure_error(destination_pdf: Path) -> None:
    before = _corrupt_pages_root(destination_pdf, "/Count", NameObject("/Bogus"))

    with pytest.raises(PdfStructureError):
        normalize(destination_pdf)

    assert destination_pdf.read_bytes() == before


def test_non_array_kids_is_structure_error(destination_pdf: Path) -> None:
    before = _corrupt_pages_root(destination_pdf, "/Kids", NumberObject(3))

    with pytest.raises(PdfStructureError):
        normalize(destination_pdf)

    assert destination_pdf.read_bytes() == before


def test_missing_page_tree_is_structure_error(destination_pdf: Path) -> None:
    document = load(destination_pdf)
    del document.catalog()["/Pages"]
    save(document, destination_pdf)
    before = destination_pdf.read_bytes()

    with pytest.raises(PdfStructureError):
        normalize(destination_pdf)

    assert destination_pdf.read_bytes() == before


def test_missing_file_is_load_error(tmp_path: Path) -> None:
    with pytest.raises(PdfLoadError):
        normalize(tmp_path / "absent.pdf")
