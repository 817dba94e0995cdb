"""
Typed configuration models using Pydantic.

All configuration is defined here with explicit typing and validation.
Every path is relative to the source root unless given as absolute.
"""

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Ordering(str, Enum):
    """Order of the compiled package and group collections."""

    NAME = "name"  # Sorted by identifier, reproducible everywhere
    DISCOVERY = "discovery"  # Order in which files were found


class SourceConfig(BaseModel):
    """Layout of the source tree."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(default=Path("."), description="Root of the source tree")
    packages_dir: Path = Field(
        default=Path("packages"), description="Directory holding one file per package"
    )
    groups_dir: Path = Field(
        default=Path("groups"),
        description="Directory holding one file per group (may be absent)",
    )
    schemas_dir: Path = Field(
        default=Path("schemas"), description="Directory holding *.schema.json files"
    )
    profiles_dir: Path = Field(
        default=Path("profiles"), description="Directory of profile files, counted by stats only"
    )
    mappings_dir: Path = Field(
        default=Path("mappings"), description="Directory of mapping files, counted by stats only"
    )
    extension: str = Field(default=".yaml", description="Recognized record file extension")

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Normalize the extension to a leading dot."""
        v = v.strip()
        if not v or v == ".":
            msg = "extension must not be empty"
            raise ValueError(msg)
        return v if v.startswith(".") else f".{v}"

    def resolve(self, path_attr: str) -> Path:
        """Resolve a configured directory against the source root."""
        rel_path: Path = getattr(self, path_attr)
        return self.root / rel_path

    @property
    def packages_path(self) -> Path:
        """Absolute-or-root-relative packages directory."""
        return self.resolve("packages_dir")

    @property
    def groups_path(self) -> Path:
        """Absolute-or-root-relative groups directory."""
        return self.resolve("groups_dir")

    @property
    def schemas_path(self) -> Path:
        """Absolute-or-root-relative schemas directory."""
        return self.resolve("schemas_dir")

    @property
    def profiles_path(self) -> Path:
        """Absolute-or-root-relative profiles directory."""
        return self.resolve("profiles_dir")

    @property
    def mappings_path(self) -> Path:
        """Absolute-or-root-relative mappings directory."""
        return self.resolve("mappings_dir")


class OutputConfig(BaseModel):
    """Output artifact locations."""

    model_config = ConfigDict(frozen=True)

    target_dir: Path = Field(
        default=Path("target"), description="Directory receiving the artifacts"
    )
    database_name: str = Field(
        default="packages.db", description="File name of the compiled database"
    )


class ValidationConfig(BaseModel):
    """Thresholds and patterns used by the structural checks."""

    model_config = ConfigDict(frozen=True)

    max_popularity: int = Field(default=100, ge=0, description="Inclusive upper bound")
    min_platforms: int = Field(
        default=2, ge=0, description="Platforms below which a coverage warning is issued"
    )
    tag_pattern: str = Field(default=r"^[a-z0-9-]+$", description="Allowed tag form")
    ordering: Ordering = Field(default=Ordering.NAME)

    @field_validator("tag_pattern")
    @classmethod
    def validate_tag_pattern(cls, v: str) -> str:
        """Ensure the tag pattern compiles."""
        try:
            re.compile(v)
        except re.error as e:
            msg = f"Invalid tag_pattern {v!r}: {e}"
            raise ValueError(msg) from e
        return v


class BuildConfig(BaseModel):
    """Complete compiler configuration."""

    model_config = ConfigDict(frozen=True)

    source: SourceConfig = Field(default_factory=SourceConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    @property
    def target_dir(self) -> Path:
        """Target directory resolved against the source root."""
        return self.source.root / self.output.target_dir

    @property
    def database_path(self) -> Path:
        """Path of the compiled database."""
        return self.target_dir / self.output.database_name

    @property
    def checksum_path(self) -> Path:
        """Path of the digest file sitting next to the database."""
        return self.target_dir / f"{self.output.database_name}.sha256"
