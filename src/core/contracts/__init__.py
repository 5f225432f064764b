"""
Projection definition contracts (JSON Schema, Draft 2020-12).
"""

from .validators import (
    SCHEMA_DIR,
    ContractValidator,
    ProjectionDefinitionValidator,
    SchemaLoader,
    ValidationError,
    definition_to_tokens,
    validate_projection_definition,
)

__all__ = [
    "SCHEMA_DIR",
    "SchemaLoader",
    "ContractValidator",
    "ProjectionDefinitionValidator",
    "ValidationError",
    "validate_projection_definition",
    "definition_to_tokens",
]
