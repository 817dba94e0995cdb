"""Typed PackageGroup entity."""

from pydantic import BaseModel, Field


class GroupPackages(BaseModel):
    """Package names a group installs."""

    required: list[str]
    optional: list[str] = Field(default_factory=list)


class PlatformOverride(BaseModel):
    """Package-manager-native names used instead of the group list on one platform."""

    packages: list[str] = Field(default_factory=list)
    casks: list[str] = Field(default_factory=list)


class PackageGroup(BaseModel):
    """A named bundle of packages."""

    id: str
    name: str
    description: str
    category: str
    packages: GroupPackages
    platform_overrides: dict[str, PlatformOverride] = Field(default_factory=dict)
