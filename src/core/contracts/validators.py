"""
Projection definition contract

Mapping-form projection definitions (JSON objects whose keys are proj
parameter names) are checked against JSON Schema documents shipped in the
`schema/` directory before they are turned into parameter tokens.

Schemas:
- projection_definition.json: mapping form of a proj parameter list
"""

import json
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADING
# =============================================================================


class SchemaLoader:
    """
    Reads and meta-validates schema documents, caching each by name.

    Examples:
        >>> SchemaLoader().load_schema("projection_definition")["required"]
        ['proj']
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self.schema_dir = schema_dir or SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"schema directory missing: {self.schema_dir}")
        self._cache: dict[str, dict[str, Any]] = {}

    def load_schema(self, name: str) -> dict[str, Any]:
        """
        Return the schema stored as `<name>.json`.

        Raises:
            FileNotFoundError: No such schema file
            ValueError: The document is not a valid Draft 2020-12 schema
        """
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        path = self.schema_dir / f"{name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"no schema named {name!r} in {self.schema_dir}")
        document = json.loads(path.read_text(encoding="utf-8"))

        try:
            Draft202012Validator.check_schema(document)
        except jsonschema.SchemaError as exc:
            raise ValueError(f"Invalid JSON Schema in {path.name}: {exc.message}") from exc

        self._cache[name] = document
        return document


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# VALIDATORS
# =============================================================================


class ContractValidator:
    """Draft 2020-12 validator bound to one named schema."""

    def __init__(self, schema_name: str, loader: Optional[SchemaLoader] = None):
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, data: Mapping[str, Any]) -> None:
        """
        Raises:
            ValidationError: The first violation found
        """
        self._validator.validate(data)

    def is_valid(self, data: Mapping[str, Any]) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Mapping[str, Any]) -> Iterator[ValidationError]:
        """Every violation, ordered by location in the document."""
        errors = sorted(self._validator.iter_errors(data), key=lambda error: [str(part) for part in error.path])
        return iter(errors)


class ProjectionDefinitionValidator(ContractValidator):
    def __init__(self, loader: Optional[SchemaLoader] = None):
        super().__init__("projection_definition", loader)


_DEFINITION_VALIDATOR = ProjectionDefinitionValidator()


# =============================================================================
# DEFINITIONS -> TOKENS
# =============================================================================


def validate_projection_definition(data: Mapping[str, Any]) -> None:
    """
    Check a definition mapping such as {"proj": "utm", "zone": 33, "south": True}.

    Raises:
        ValidationError: If the mapping breaks the contract
    """
    _DEFINITION_VALIDATOR.validate(data)


def definition_to_tokens(data: Mapping[str, Any]) -> list[str]:
    """
    Turn a validated definition mapping into parameter tokens.

    True becomes a bare flag, False is dropped, and lists (towgs84) are
    joined with commas.

    Examples:
        >>> definition_to_tokens({"proj": "utm", "zone": 33, "south": True})
        ['proj=utm', 'zone=33', 'south']
    """
    tokens = []
    for key, value in data.items():
        if value is True:
            tokens.append(key)
        elif value is False:
            continue
        elif isinstance(value, (list, tuple)):
            tokens.append(f"{key}={','.join(repr(float(v)) for v in value)}")
        else:
            tokens.append(f"{key}={value}")
    return tokens


__all__ = [
    "SCHEMA_DIR",
    "SchemaLoader",
    "ContractValidator",
    "ProjectionDefinitionValidator",
    "ValidationError",
    "validate_projection_definition",
    "definition_to_tokens",
]
