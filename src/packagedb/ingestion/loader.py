"""
Record loading from the source tree.

Each source file is read once and kept in two forms: the generic document
(for JSON schema checks) and, later, the typed entity (for structural
checks). The two passes are independent so a record can fail one without
crashing the other.
"""

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Generic, TypeVar

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from packagedb.errors import RecordParseError
from packagedb.issues import IssueKind, ValidationReport
from packagedb.utils.logging import get_logger

log = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class SourceRecord:
    """A parsed source file in its generic document form."""

    path: Path
    document: dict[str, Any]

    @property
    def stem(self) -> str:
        """File name without the extension."""
        return self.path.stem


def discover_files(directory: Path, extension: str = ".yaml") -> list[Path]:
    """
    Recursively find all record files under a directory.

    Results are sorted by path so discovery order does not depend on the
    filesystem. A missing directory yields no files.

    Args:
        directory: Directory to walk.
        extension: Recognized file extension, including the dot.

    Returns:
        Sorted list of matching file paths.
    """
    if not directory.is_dir():
        log.debug("Record directory not found, treating as empty", path=str(directory))
        return []
    return sorted(
        p for p in directory.rglob(f"*{extension}") if p.is_file() and p.suffix == extension
    )


def to_json_compatible(value: Any) -> Any:
    """
    Convert a YAML document into the JSON data model.

    YAML timestamps become ISO strings and mapping keys become strings, so
    the document validates the same way a JSON file would.
    """
    if isinstance(value, dict):
        return {str(k): to_json_compatible(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_json_compatible(item) for item in value]
    if isinstance(value, datetime | date):
        return value.isoformat()
    return value


def load_document(path: Path) -> dict[str, Any]:
    """
    Parse one record file into a generic document.

    Args:
        path: Path to a YAML record.

    Returns:
        The top-level mapping, converted to the JSON data model.

    Raises:
        RecordParseError: If the file cannot be read, is not valid YAML,
            or its top level is not a mapping.
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RecordParseError(path, f"invalid YAML: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise RecordParseError(path, f"cannot read file: {e}") from e

    if not isinstance(data, dict):
        found = "empty document" if data is None else type(data).__name__
        raise RecordParseError(path, f"expected a mapping at the top level, got {found}")
    return to_json_compatible(data)


class RecordLoader:
    """
    Loads every record of one kind from a directory tree.

    Parse failures go to the report; under the fail-fast policy the report
    raises on the first one, otherwise the record is skipped and loading
    continues.
    """

    def __init__(self, directory: Path, kind: str, extension: str = ".yaml") -> None:
        """
        Initialize record loader.

        Args:
            directory: Root directory of this record kind.
            kind: Entity kind ("package" or "group"), used in logs.
            extension: Recognized file extension.
        """
        self.directory = directory
        self.kind = kind
        self.extension = extension

    def load(self, report: ValidationReport) -> list[SourceRecord]:
        """
        Discover and parse all records.

        Args:
            report: Report receiving parse errors.

        Returns:
            Successfully parsed records in discovery order.
        """
        records: list[SourceRecord] = []
        files = discover_files(self.directory, self.extension)

        for path in files:
            try:
                document = load_document(path)
            except RecordParseError as e:
                report.error(e.reason, kind=IssueKind.PARSE, path=path, cause=e)
                continue
            records.append(SourceRecord(path=path, document=document))

        log.info(
            "Loaded records",
            kind=self.kind,
            directory=str(self.directory),
            files=len(files),
            parsed=len(records),
        )
        return records


def _format_pydantic_error(error: PydanticValidationError) -> str:
    """Condense a Pydantic error into one line per failing field."""
    parts = []
    for err in error.errors():
        location = ".".join(str(loc) for loc in err["loc"]) or "<root>"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def parse_entity(
    record: SourceRecord,
    model: type[M],
    report: ValidationReport,
) -> M | None:
    """
    Decode a generic document into its typed entity.

    Args:
        record: Parsed source record.
        model: Pydantic model of the entity.
        report: Report receiving the decode error, if any.

    Returns:
        The entity, or None if decoding failed (collect-all mode).
    """
    try:
        return model.model_validate(record.document)
    except PydanticValidationError as e:
        report.error(
            f"cannot decode {model.__name__}: {_format_pydantic_error(e)}",
            kind=IssueKind.PARSE,
            path=record.path,
            cause=e,
        )
        return None


@dataclass(frozen=True)
class LoadedEntity(Generic[M]):
    """A typed entity together with the record it was decoded from."""

    record: SourceRecord
    entity: M

    @property
    def path(self) -> Path:
        """Source file of the entity."""
        return self.record.path
