from __future__ import annotations

import logging

import pytest
from pypdf.generic import DictionaryObject, NameObject, NumberObject

from pdfsplice.merge.policy import RootSelector, first_wins_union


def _dictionary(**entries: object) -> DictionaryObject:
    result = DictionaryObject()
    for key, value in entries.items():
        result[NameObject(f"/{key}")] = value
    return result


def test_first_wins_union_prefers_first_on_collision() -> None:
    first = _dictionary(Count=NumberObject(1), Rotate=NumberObject(90))
    later = _dictionary(Count=NumberObject(7), Extra=NumberObject(3))

    merged = first_wins_union(first, later)

    assert merged["/Count"] == 1
    assert merged["/Rotate"] == 90
    assert merged["/Extra"] == 3
    assert "/Extra" not in first
    assert later["/Count"] == 7


def test_selector_keeps_first_catalog() -> None:
    selector = RootSelector()
    first = _dictionary(Type=NameObject("/Catalog"), Lang=NumberObject(1))
    second = _dictionary(Type=NameObject("/Catalog"), Lang=NumberObject(2))

    assert selector.offer((10, 0), first) is False
    assert selector.offer((20, 0), second) is False

    assert selector.catalog == ((10, 0), first)


def test_selector_unions_page_tree_nodes() -> None:
    selector = RootSelector()
    selector.offer((10, 0), _dictionary(Type=NameObject("/Pages"), Count=NumberObject(9)))
    selector.offer((20, 0), _dictionary(Type=NameObject("/Pages"), Count=NumberObject(2), Rotate=NumberObject(90)))

    key, pages = selector.pages
    assert key == (10, 0)
    assert pages["/Count"] == 9
    assert pages["/Rotate"] == 90


def test_selector_defers_pages_and_copies_others() -> None:
    selector = RootSelector()

    assert selector.offer((1, 0), _dictionary(Type=NameObject("/Page"))) is False
    assert selector.offer((2, 0), _dictionary(Type=NameObject("/Font"))) is True
    assert selector.offer((3, 0), NumberObject(4)) is True


@pytest.mark.parametrize("kind", ["/Outlines", "/Outline"])
def test_selector_drops_outlines(kind: str, caplog: pytest.LogCaptureFixture) -> None:
    selector = RootSelector()

    with caplog.at_level(logging.WARNING, logger="pdfsplice.merge"):
        assert selector.offer((5, 0), _dictionary(Type=NameObject(kind))) is False

    assert selector.dropped == 1
    assert "not supported" in caplog.text
