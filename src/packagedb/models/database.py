"""The compiled database as written to disk."""

from pydantic import BaseModel, Field

from packagedb.models.group import PackageGroup
from packagedb.models.package import Package

# Bump when the encoded layout changes incompatibly
DATABASE_VERSION = 1


class CompiledDatabase(BaseModel):
    """
    Validated packages and groups plus position-based indexes.

    Every index value is a position in `packages`.
    """

    version: int = Field(default=DATABASE_VERSION)
    last_updated: str = Field(description="UTC compile time, ISO-8601")
    packages: list[Package]
    groups: list[PackageGroup]
    index_by_name: dict[str, int]
    index_by_category: dict[str, list[int]]
    index_by_tag: dict[str, list[int]]
