"""
Schema checks for files hunkreview reads from the user.

Schemas live in hunkreview/schemas/<name>.schema.json. Only the most
relevant error is reported, with its location as a dotted path
(e.g. "annotations.3.hunk") so a hand-written file can be fixed quickly.
"""

import json
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema.exceptions import best_match

SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"


class ValidationError(Exception):
    """Input does not match its schema, or cannot be read at all."""

    def __init__(self, schema_name: str, message: str, path: str = None):
        self.schema_name = schema_name
        self.path = path
        super().__init__(f"[{schema_name}] {message}" + (f" at {path}" if path else ""))


_validators: dict[str, jsonschema.Draft7Validator] = {}


def get_validator(schema_name: str) -> jsonschema.Draft7Validator:
    """Compiled validator for a named schema, loaded once per process."""
    if schema_name not in _validators:
        schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
        if not schema_path.exists():
            raise ValidationError(schema_name, f"Schema file not found: {schema_path}")
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        jsonschema.Draft7Validator.check_schema(schema)
        _validators[schema_name] = jsonschema.Draft7Validator(schema)
    return _validators[schema_name]


def error_location(error: jsonschema.ValidationError) -> str:
    """'annotations.0.hunk' style path, or '(root)'."""
    if not error.absolute_path:
        return "(root)"
    return ".".join(str(part) for part in error.absolute_path)


def validate(data: Any, schema_name: str) -> None:
    """
    Check parsed JSON against a named schema.

    Raises:
        ValidationError: with the best-matching schema error
    """
    error = best_match(get_validator(schema_name).iter_errors(data))
    if error is not None:
        raise ValidationError(schema_name, error.message, error_location(error))


def validate_file(filepath: Path, schema_name: str) -> Any:
    """Read a JSON file and check it; returns the parsed data."""
    if not filepath.exists():
        raise ValidationError(schema_name, f"File not found: {filepath}")

    try:
        data = json.loads(filepath.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(schema_name, f"Invalid JSON in {filepath}: {e}") from None
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(schema_name, f"Cannot read {filepath}: {e}") from None

    validate(data, schema_name)
    return data
