"""Source record ingestion module."""

from packagedb.ingestion.loader import (
    LoadedEntity,
    RecordLoader,
    SourceRecord,
    discover_files,
    load_document,
    parse_entity,
)

__all__ = [
    "LoadedEntity",
    "RecordLoader",
    "SourceRecord",
    "discover_files",
    "load_document",
    "parse_entity",
]
