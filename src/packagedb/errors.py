"""
Exception hierarchy for the compilation pipeline.

Every failure the pipeline reports on purpose derives from PackageDBError,
so the CLI can turn it into a clean exit code without masking bugs.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from packagedb.issues import Issue


class PackageDBError(Exception):
    """Base class for all expected pipeline failures."""


class RecordParseError(PackageDBError):
    """A source record is not well-formed or cannot be decoded to its entity."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class SchemaLoadError(PackageDBError):
    """A schema document is missing, unparsable, or not a valid JSON Schema."""


class SerializationError(PackageDBError):
    """Encoding followed by decoding did not reproduce the database."""


class ValidationFailure(PackageDBError):
    """Raised in fail-fast mode on the first hard error."""

    def __init__(self, issue: Issue) -> None:
        self.issue = issue
        super().__init__(issue.render())
