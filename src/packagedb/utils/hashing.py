"""
Content hashing for compiled artifacts.

The checksum file holds the lowercase hex SHA-256 of the database bytes
and nothing else (no filename, no trailing newline).
"""

import hashlib
from pathlib import Path

from packagedb.utils.logging import get_logger

log = get_logger(__name__)


def sha256_hex(data: bytes) -> str:
    """
    Compute the SHA-256 digest of a byte string.

    Args:
        data: Bytes to hash.

    Returns:
        Lowercase hex digest (64 characters).
    """
    return hashlib.sha256(data).hexdigest()


def hash_file_content(path: Path, chunk_size: int = 65536) -> str:
    """
    Compute the SHA-256 digest of a file's contents.

    Args:
        path: Path to file.
        chunk_size: Chunk size for reading.

    Returns:
        Lowercase hex digest.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    hasher = hashlib.sha256()
    with Path(path).open("rb") as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)
    return hasher.hexdigest()


def read_checksum(path: Path) -> str:
    """Read a stored digest, tolerating surrounding whitespace."""
    return Path(path).read_text(encoding="ascii").strip().lower()


def verify_checksum(artifact: Path, checksum_file: Path) -> bool:
    """
    Check that an artifact still matches its stored digest.

    Args:
        artifact: Path to the compiled database.
        checksum_file: Path to the sibling .sha256 file.

    Returns:
        True if re-hashing the artifact reproduces the stored digest.

    Raises:
        FileNotFoundError: If either file is missing.
    """
    expected = read_checksum(checksum_file)
    actual = hash_file_content(artifact)
    if actual != expected:
        log.warning(
            "Checksum mismatch",
            artifact=str(artifact),
            expected=expected,
            actual=actual,
        )
        return False
    log.info("Checksum verified", artifact=str(artifact), sha256=actual)
    return True
