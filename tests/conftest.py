from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from .helpers import DESTINATION_WIDTHS, SOURCE_WIDTHS

PdfFactory = Callable[..., Path]


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> PdfFactory:
    def _create(
        filename: str,
        widths: Sequence[int],
        *,
        title: str | None = None,
        outline: bool = False,
    ) -> Path:
        path = tmp_path / filename
        writer = PdfWriter()
        for width in widths:
            writer.add_blank_page(width=width, height=200)
        if title is not None:
            writer.add_metadata({"/Title": title})
        if outline and widths:
            writer.add_outline_item("Start", 0)
        with path.open("wb") as handle:
            writer.write(handle)
        return path

    return _create


@pytest.fixture()
def destination_pdf(pdf_factory: PdfFactory) -> Path:
    return pdf_factory("destination.pdf", DESTINATION_WIDTHS, title="Destination")


@pytest.fixture()
def source_pdf(pdf_factory: PdfFactory) -> Path:
    return pdf_factory("source.pdf", SOURCE_WIDTHS, title="Source")
