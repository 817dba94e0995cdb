"""Tests for the lookup indexes."""

from collections.abc import Callable
from typing import Any

import pytest

from packagedb.indexing import (
    build_category_index,
    build_indexes,
    build_name_index,
    build_tag_index,
)
from packagedb.models import Package


@pytest.fixture
def packages(make_package: Callable[..., dict[str, Any]]) -> list[Package]:
    """Three packages in final collection order."""
    documents = [
        make_package("bat", category="essential", tags=["pager", "rust"]),
        make_package("ansible", category="infrastructure", tags=["automation"]),
        make_package("eza", category="essential", tags=["rust", "ls", "rust"]),
    ]
    return [Package.model_validate(d) for d in documents]


class TestNameIndex:
    """Tests for build_name_index."""

    def test_positions(self, packages: list[Package]) -> None:
        """Test each name maps to its position in the collection."""
        index = build_name_index(packages)
        assert index == {"ansible": 1, "bat": 0, "eza": 2}
        for name, position in index.items():
            assert packages[position].name == name

    def test_keys_sorted(self, packages: list[Package]) -> None:
        """Test keys are emitted in sorted order."""
        assert list(build_name_index(packages)) == ["ansible", "bat", "eza"]

    def test_empty(self) -> None:
        """Test an empty collection gives empty indexes."""
        indexes = build_indexes([])
        assert indexes.by_name == {}
        assert indexes.by_category == {}
        assert indexes.by_tag == {}


class TestCategoryIndex:
    """Tests for build_category_index."""

    def test_buckets(self, packages: list[Package]) -> None:
        """Test every package lands in exactly its category bucket."""
        index = build_category_index(packages)
        assert index == {"essential": [0, 2], "infrastructure": [1]}
        assert sorted(p for bucket in index.values() for p in bucket) == [0, 1, 2]


class TestTagIndex:
    """Tests for build_tag_index."""

    def test_buckets(self, packages: list[Package]) -> None:
        """Test a package with N distinct tags appears in N buckets."""
        index = build_tag_index(packages)
        assert index == {
            "automation": [1],
            "ls": [2],
            "pager": [0],
            "rust": [0, 2],
        }

    def test_repeated_tag_listed_once(self, packages: list[Package]) -> None:
        """Test a tag repeated on one package does not duplicate the position."""
        assert build_tag_index(packages)["rust"].count(2) == 1

    def test_package_without_tags(self, make_package: Callable[..., dict[str, Any]]) -> None:
        """Test a package with no tags is in no tag bucket."""
        package = Package.model_validate(make_package("x", tags=[]))
        assert build_tag_index([package]) == {}


def test_build_indexes(packages: list[Package]) -> None:
    """Test build_indexes combines the three builders."""
    indexes = build_indexes(packages)
    assert indexes.by_name == build_name_index(packages)
    assert indexes.by_category == build_category_index(packages)
    assert indexes.by_tag == build_tag_index(packages)
