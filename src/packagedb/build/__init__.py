"""Database assembly, encoding and publishing."""

from packagedb.build.pipeline import CompileResult, assemble_database, run_compile
from packagedb.build.serializer import decode_database, encode_database

__all__ = [
    "CompileResult",
    "assemble_database",
    "decode_database",
    "encode_database",
    "run_compile",
]
