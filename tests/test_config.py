from __future__ import annotations

import pytest

from pdfsplice.config import DEFAULT_OPTIONS, SpliceOptions
from pdfsplice.exceptions import InsertionPointError


def test_default_options() -> None:
    assert DEFAULT_OPTIONS.insertion_policy == "strict"
    assert DEFAULT_OPTIONS.pdf_version == "1.5"
    assert DEFAULT_OPTIONS.compress_streams is True


def test_unknown_policy_rejected() -> None:
    with pytest.raises(ValueError):
        SpliceOptions(insertion_policy="shuffle")  # type: ignore[arg-type]


def test_strict_accepts_ascending_points() -> None:
    assert DEFAULT_OPTIONS.prepare_points((0, 1, 2, 4, 8), 9) == [0, 1, 2, 4, 8]


@pytest.mark.parametrize(
    "points",
    [[2, 1], [1, 1], [0, 9], [-1], [1.5], [True]],
)
def test_strict_rejects_bad_points(points: list[object]) -> None:
    with pytest.raises(InsertionPointError):
        DEFAULT_OPTIONS.prepare_points(points, 9)  # type: ignore[arg-type]


def test_normalize_sorts_and_deduplicates() -> None:
    options = SpliceOptions(insertion_policy="normalize")

    assert options.prepare_points([8, 0, 4, 0], 9) == [0, 4, 8]


def test_normalize_still_checks_range() -> None:
    options = SpliceOptions(insertion_policy="normalize")

    with pytest.raises(InsertionPointError):
        options.prepare_points([3, 12], 9)


def test_insertion_point_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        DEFAULT_OPTIONS.prepare_points([5], 2)
