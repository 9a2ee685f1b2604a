from __future__ import annotations

from pathlib import Path

from pypdf import PdfReader

# Page widths identify where every page ends up after a merge.
DESTINATION_WIDTHS = [100 + index for index in range(9)]
SOURCE_WIDTHS = [500, 600]


def page_widths(path: Path) -> list[int]:
    reader = PdfReader(str(path))
    return [round(float(page.mediabox.width)) for page in reader.pages]
