"""
Compilation pipeline.

Validates the source tree in fail-fast mode, builds the indexes, encodes
the database with a self-check, and publishes the artifact and its
SHA-256 digest. Nothing in the target directory changes unless every
step succeeded.
"""

import os
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from packagedb.build.serializer import encode_with_self_check
from packagedb.config.settings import BuildConfig
from packagedb.indexing import build_indexes
from packagedb.issues import ErrorPolicy, ValidationReport
from packagedb.models import DATABASE_VERSION, CompiledDatabase, Package, PackageGroup
from packagedb.utils.hashing import sha256_hex
from packagedb.utils.logging import get_logger
from packagedb.validation.core import ValidationRunner
from packagedb.validation.schema import SchemaRegistry

log = get_logger(__name__)


@dataclass
class CompileResult:
    """
    Result of a successful compilation.

    Attributes:
        database: The compiled database.
        database_path: Where the encoded database was written.
        checksum_path: Where the digest was written.
        checksum: Lowercase hex SHA-256 of the encoded bytes.
        size_bytes: Size of the encoded database.
        report: Validation report (warnings only; errors abort).
    """

    database: CompiledDatabase
    database_path: Path
    checksum_path: Path
    checksum: str
    size_bytes: int
    report: ValidationReport


def _timestamp(now: datetime | None) -> str:
    """UTC ISO-8601 timestamp; naive datetimes are taken as UTC."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat()


def assemble_database(
    packages: Sequence[Package],
    groups: Sequence[PackageGroup],
    now: datetime | None = None,
) -> CompiledDatabase:
    """
    Build the database structure from validated, ordered collections.

    Args:
        packages: Validated packages in final order.
        groups: Validated groups in final order.
        now: Compile time; current UTC time if None.

    Returns:
        The CompiledDatabase with all indexes.
    """
    indexes = build_indexes(packages)
    log.info(
        "Built indexes",
        names=len(indexes.by_name),
        categories=len(indexes.by_category),
        tags=len(indexes.by_tag),
    )
    return CompiledDatabase(
        version=DATABASE_VERSION,
        last_updated=_timestamp(now),
        packages=list(packages),
        groups=list(groups),
        index_by_name=indexes.by_name,
        index_by_category=indexes.by_category,
        index_by_tag=indexes.by_tag,
    )


def publish(artifacts: dict[Path, bytes]) -> None:
    """
    Write several files so that none of them is ever seen half-written.

    Every file is first written to a temporary sibling; only when all of
    them are on disk are they moved into place with os.replace. On any
    error the temporaries are removed and existing files are untouched.

    Args:
        artifacts: Target path -> content.
    """
    staged: list[tuple[Path, Path]] = []
    try:
        for target, content in artifacts.items():
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
            )
            tmp_path = Path(tmp_name)
            staged.append((tmp_path, target))
            with os.fdopen(fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())

        for tmp_path, target in staged:
            os.replace(tmp_path, target)
            log.info("Wrote artifact", path=str(target))
    finally:
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)


def run_compile(
    config: BuildConfig,
    now: datetime | None = None,
    schemas: SchemaRegistry | None = None,
) -> CompileResult:
    """
    Compile the source tree into the binary database and its checksum.

    Args:
        config: Build configuration.
        now: Pin the compile timestamp (for reproducible artifacts).
        schemas: Pre-compiled schemas; loaded from the source tree if None.

    Returns:
        CompileResult describing the published artifacts.

    Raises:
        ValidationFailure: On the first hard validation error.
        SchemaLoadError: If a schema is missing or invalid.
        SerializationError: If the encoded bytes do not round-trip.
    """
    log.info("Compiling database", root=str(config.source.root))

    outcome = ValidationRunner(config, policy=ErrorPolicy.FAIL_FAST, schemas=schemas).run()
    db = assemble_database(outcome.packages, outcome.groups, now=now)

    encoded = encode_with_self_check(db)
    checksum = sha256_hex(encoded)

    publish(
        {
            config.database_path: encoded,
            config.checksum_path: checksum.encode("ascii"),
        }
    )

    log.info(
        "Database compiled",
        version=db.version,
        packages=len(db.packages),
        groups=len(db.groups),
        size_bytes=len(encoded),
        sha256=checksum,
    )
    return CompileResult(
        database=db,
        database_path=config.database_path,
        checksum_path=config.checksum_path,
        checksum=checksum,
        size_bytes=len(encoded),
        report=outcome.report,
    )
