"""
Typed Package entity.

Mirrors the package record layout; unknown keys are ignored here because
the JSON schema is the authority on which keys are allowed.
"""

from pydantic import BaseModel, Field

PLATFORM_NAMES: tuple[str, ...] = ("apt", "brew", "dnf", "pacman", "mas")
# Package managers only; the App Store id is not a package manager mapping
PACKAGE_MANAGERS: tuple[str, ...] = ("apt", "brew", "dnf", "pacman")


class Platforms(BaseModel):
    """Per-platform install keys; None means not available there."""

    apt: str | None = Field(default=None, description="Debian/Ubuntu package name")
    brew: str | None = Field(default=None, description="Homebrew formula or cask")
    dnf: str | None = Field(default=None, description="Fedora/RHEL package name")
    pacman: str | None = Field(default=None, description="Arch Linux package name")
    mas: int | None = Field(default=None, description="Mac App Store identifier")

    def available(self) -> list[str]:
        """Platform identifiers with a mapping, in declaration order."""
        return [name for name in PLATFORM_NAMES if getattr(self, name) is not None]

    def package_manager_count(self) -> int:
        """Number of package managers the package is mapped on."""
        return sum(1 for name in PACKAGE_MANAGERS if getattr(self, name) is not None)


class Dependency(BaseModel):
    """A reference to another package plus the reason it is needed."""

    package: str
    reason: str


class Dependencies(BaseModel):
    """Required and optional dependencies, in declaration order."""

    required: list[Dependency] = Field(default_factory=list)
    optional: list[Dependency] = Field(default_factory=list)


class Package(BaseModel):
    """Metadata for one software package."""

    name: str = Field(description="Unique identifier, also the file stem")
    description: str
    category: str
    # Upper bound is a structural check so it can be reported, not a parse error
    popularity: int = Field(ge=0)
    platforms: Platforms
    dependencies: Dependencies = Field(default_factory=Dependencies)
    alternatives: list[str] = Field(default_factory=list)
    related: list[str] = Field(default_factory=list)
    tags: list[str]
    website: str | None = None
    license: str | None = None
    source: str | None = None
