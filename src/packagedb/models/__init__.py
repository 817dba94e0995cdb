"""Typed entity models."""

from packagedb.models.database import DATABASE_VERSION, CompiledDatabase
from packagedb.models.group import GroupPackages, PackageGroup, PlatformOverride
from packagedb.models.package import (
    PACKAGE_MANAGERS,
    PLATFORM_NAMES,
    Dependencies,
    Dependency,
    Package,
    Platforms,
)

__all__ = [
    "DATABASE_VERSION",
    "PACKAGE_MANAGERS",
    "PLATFORM_NAMES",
    "CompiledDatabase",
    "Dependencies",
    "Dependency",
    "GroupPackages",
    "Package",
    "PackageGroup",
    "Platforms",
    "PlatformOverride",
]
