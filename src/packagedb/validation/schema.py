"""
JSON Schema validation of generic record documents.

Each schema document is read and compiled once per run; the compiled
validator owns its schema for as long as the SchemaValidator lives.
"""

import json
from pathlib import Path
from typing import Any, ClassVar

from jsonschema import exceptions as jsonschema_exceptions
from jsonschema.validators import validator_for

from packagedb.errors import SchemaLoadError
from packagedb.utils.logging import get_logger

log = get_logger(__name__)


def _format_location(path: Any) -> str:
    """Render a jsonschema error path as dotted notation."""
    parts = [f"[{p}]" if isinstance(p, int) else str(p) for p in path]
    return ".".join(parts).replace(".[", "[") or "<root>"


class SchemaValidator:
    """A compiled JSON schema for one entity kind."""

    def __init__(self, schema: dict[str, Any], name: str = "schema") -> None:
        """
        Compile a schema document.

        Args:
            schema: Parsed JSON schema.
            name: Label used in logs and error messages.

        Raises:
            SchemaLoadError: If the document is not a valid JSON Schema.
        """
        self.name = name
        self.schema = schema
        validator_cls = validator_for(schema)
        try:
            validator_cls.check_schema(schema)
        except jsonschema_exceptions.SchemaError as e:
            msg = f"Invalid JSON schema '{name}': {e.message}"
            raise SchemaLoadError(msg) from e
        self._validator = validator_cls(schema)

    @classmethod
    def from_file(cls, path: Path) -> "SchemaValidator":
        """
        Load and compile a schema from a .schema.json file.

        Raises:
            SchemaLoadError: If the file is missing, not JSON, or not a schema.
        """
        if not path.is_file():
            msg = f"Schema not found: {path}"
            raise SchemaLoadError(msg)
        try:
            with path.open(encoding="utf-8") as f:
                schema = json.load(f)
        except json.JSONDecodeError as e:
            msg = f"Failed to parse schema {path}: {e}"
            raise SchemaLoadError(msg) from e
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Cannot read schema {path}: {e}"
            raise SchemaLoadError(msg) from e
        if not isinstance(schema, dict):
            msg = f"Schema {path} must be a JSON object"
            raise SchemaLoadError(msg)

        validator = cls(schema, name=path.name)
        log.debug("Compiled schema", path=str(path))
        return validator

    def errors(self, document: Any) -> list[str]:
        """
        Check a document against the schema.

        Args:
            document: Generic document in the JSON data model.

        Returns:
            One message per violated constraint, ordered by location;
            empty if the document conforms.
        """
        violations = sorted(
            self._validator.iter_errors(document),
            key=lambda e: ([str(p) for p in e.absolute_path], str(e.validator), e.message),
        )
        return [
            f"schema violation at {_format_location(e.absolute_path)} "
            f"({e.validator}): {e.message}"
            for e in violations
        ]


class SchemaRegistry:
    """
    Compiled schemas for every record kind.

    Schemas live in `<schemas_dir>/<kind>.schema.json`.
    """

    KINDS: ClassVar[tuple[str, ...]] = ("package", "group")

    def __init__(self, validators: dict[str, SchemaValidator]) -> None:
        self._validators = validators

    @classmethod
    def from_directory(cls, schemas_dir: Path) -> "SchemaRegistry":
        """
        Load and compile the schema of every record kind.

        Raises:
            SchemaLoadError: If any schema is missing or invalid.
        """
        validators = {
            kind: SchemaValidator.from_file(schemas_dir / f"{kind}.schema.json")
            for kind in cls.KINDS
        }
        log.info("Loaded schemas", directory=str(schemas_dir), kinds=list(validators))
        return cls(validators)

    def get(self, kind: str) -> SchemaValidator:
        """
        Get the validator for a record kind.

        Raises:
            KeyError: If no schema is registered for the kind.
        """
        if kind not in self._validators:
            available = ", ".join(self._validators)
            msg = f"Unknown record kind '{kind}'. Available: {available}"
            raise KeyError(msg)
        return self._validators[kind]
