"""Unit tests for repository path helpers."""

from __future__ import annotations

import pytest

from quayside.common.paths import qualified_repository_name, split_repository_path


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("busybox", (None, "busybox")),
        ("team/busybox", ("team", "busybox")),
        ("team/tools/busybox", ("team", "tools/busybox")),
    ],
)
def test_split_repository_path(path: str, expected: tuple[str | None, str]) -> None:
    """Only the first slash separates the namespace."""
    assert split_repository_path(path) == expected


@pytest.mark.parametrize("path", ["", "/busybox", "team/"])
def test_split_repository_path_rejects_empty_components(path: str) -> None:
    """Empty namespace or repository names are invalid."""
    with pytest.raises(ValueError, match="Invalid repository path"):
        split_repository_path(path)


def test_qualified_repository_name_round_trips() -> None:
    """Qualified names join namespace and repository with a slash."""
    assert qualified_repository_name(None, "busybox") == "busybox"
    assert qualified_repository_name("team", "busybox") == "team/busybox"
    assert split_repository_path(qualified_repository_name("team", "a/b")) == (
        "team",
        "a/b",
    )
