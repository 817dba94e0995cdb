"""
Binary encoding of the compiled database.

The database is reduced to plain Python data (dicts, lists, strings,
ints) and dumped through joblib into an in-memory buffer, uncompressed and
with a fixed pickle protocol, so identical input gives identical bytes.
"""

import io
from typing import Any

import joblib

from packagedb.errors import SerializationError
from packagedb.models import CompiledDatabase
from packagedb.utils.logging import get_logger

log = get_logger(__name__)

# Fixed so output does not change with the interpreter's default
PICKLE_PROTOCOL = 4


def to_plain(db: CompiledDatabase) -> dict[str, Any]:
    """Plain-data form of the database (no model classes in the payload)."""
    return db.model_dump(mode="python")


def encode_database(db: CompiledDatabase) -> bytes:
    """
    Encode a database to bytes.

    Args:
        db: Database to encode.

    Returns:
        The encoded artifact.
    """
    buffer = io.BytesIO()
    joblib.dump(to_plain(db), buffer, compress=0, protocol=PICKLE_PROTOCOL)
    return buffer.getvalue()


def decode_database(data: bytes) -> CompiledDatabase:
    """
    Decode bytes produced by `encode_database`.

    Args:
        data: Encoded artifact.

    Returns:
        The decoded database.

    Raises:
        SerializationError: If the bytes do not decode to a database.
    """
    try:
        payload = joblib.load(io.BytesIO(data))
        return CompiledDatabase.model_validate(payload)
    except Exception as e:
        msg = f"Failed to decode database ({len(data)} bytes): {type(e).__name__}: {e}"
        raise SerializationError(msg) from e


def encode_with_self_check(db: CompiledDatabase) -> bytes:
    """
    Encode a database and prove the bytes decode back to it.

    A failure here is a defect in the encoder/decoder pair, not in the
    source data, and must stop the artifact from being published.

    Raises:
        SerializationError: If decoding fails or yields a different database.
    """
    encoded = encode_database(db)
    log.info("Serialized database", size_bytes=len(encoded))

    decoded = decode_database(encoded)
    if to_plain(decoded) != to_plain(db):
        msg = "Self-check failed: decoded database differs from the encoded one"
        raise SerializationError(msg)

    log.info(
        "Deserialization check passed",
        packages=len(decoded.packages),
        groups=len(decoded.groups),
    )
    return encoded
