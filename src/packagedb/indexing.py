"""
Position-based lookup indexes over the final package collection.

Indexing assumes its input already passed structural validation (unique
names) and has no failure modes of its own. Keys are emitted in sorted
order so the encoded database does not depend on insertion order.
"""

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass

from packagedb.models import Package


@dataclass(frozen=True)
class Indexes:
    """The three lookup indexes of a compiled database."""

    by_name: dict[str, int]
    by_category: dict[str, list[int]]
    by_tag: dict[str, list[int]]


def build_name_index(packages: Sequence[Package]) -> dict[str, int]:
    """Map each package name to its position."""
    index = {package.name: i for i, package in enumerate(packages)}
    return dict(sorted(index.items()))


def build_category_index(packages: Sequence[Package]) -> dict[str, list[int]]:
    """Map each category to the positions of its packages, in collection order."""
    index: defaultdict[str, list[int]] = defaultdict(list)
    for i, package in enumerate(packages):
        index[package.category].append(i)
    return dict(sorted(index.items()))


def build_tag_index(packages: Sequence[Package]) -> dict[str, list[int]]:
    """
    Map each tag to the positions of the packages carrying it.

    A package with N tags lands in N buckets; a tag repeated on the same
    package is listed once.
    """
    index: defaultdict[str, list[int]] = defaultdict(list)
    for i, package in enumerate(packages):
        for tag in dict.fromkeys(package.tags):
            index[tag].append(i)
    return dict(sorted(index.items()))


def build_indexes(packages: Sequence[Package]) -> Indexes:
    """Build all indexes over the ordered package collection."""
    return Indexes(
        by_name=build_name_index(packages),
        by_category=build_category_index(packages),
        by_tag=build_tag_index(packages),
    )
