"""Source tree validation module."""

from packagedb.validation.core import ValidationOutcome, ValidationRunner
from packagedb.validation.reporter import ConsoleReporter
from packagedb.validation.schema import SchemaRegistry, SchemaValidator

__all__ = [
    "ConsoleReporter",
    "SchemaRegistry",
    "SchemaValidator",
    "ValidationOutcome",
    "ValidationRunner",
]
