"""
Schema Descriptors for Structured Gemini Output

A SchemaField describes the JSON shape requested from the model. The same
descriptor renders the `response_schema` sent with the request and drives the
response validation, so the requested and checked shapes cannot diverge.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


class SchemaKind(str, Enum):
    """Primitive kinds understood by the Gemini response schema."""
    STRING = "STRING"
    NUMBER = "NUMBER"
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    OBJECT = "OBJECT"
    ARRAY = "ARRAY"


@dataclass(frozen=True)
class SchemaField:
    """One node of a schema descriptor."""
    kind: SchemaKind
    description: Optional[str] = None
    nullable: bool = False
    enum: Optional[Tuple[str, ...]] = None
    # Read-only view; left out of the hash, still compared for equality
    properties: Mapping[str, "SchemaField"] = field(default_factory=dict, hash=False)
    items: Optional["SchemaField"] = None
    required: Tuple[str, ...] = ()

    def __post_init__(self):
        # Caller lists and dicts are frozen
        if self.enum is not None:
            object.__setattr__(self, 'enum', tuple(self.enum))
        object.__setattr__(self, 'properties', MappingProxyType(dict(self.properties)))
        object.__setattr__(self, 'required', tuple(self.required))

        if self.properties and self.kind != SchemaKind.OBJECT:
            raise ValueError(f"Only OBJECT fields may declare properties, got {self.kind.value}")
        if self.items is not None and self.kind != SchemaKind.ARRAY:
            raise ValueError(f"Only ARRAY fields may declare items, got {self.kind.value}")
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            raise ValueError(f"Required fields not declared in properties: {unknown}")

    def to_response_schema(self) -> Dict[str, Any]:
        """
        Render the descriptor as a Gemini `response_schema` dict.

        Returns:
            Dict in the OBJECT/STRING/... form accepted by GenerateContentConfig
        """
        schema: Dict[str, Any] = {"type": self.kind.value}
        if self.description:
            schema["description"] = self.description
        if self.nullable:
            schema["nullable"] = True
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.properties:
            schema["properties"] = {
                name: prop.to_response_schema()
                for name, prop in self.properties.items()
            }
        if self.items is not None:
            schema["items"] = self.items.to_response_schema()
        if self.required:
            schema["required"] = list(self.required)
        return schema


def string(description: Optional[str] = None, nullable: bool = False,
           enum: Optional[List[str]] = None) -> SchemaField:
    return SchemaField(SchemaKind.STRING, description=description, nullable=nullable, enum=enum)


def number(description: Optional[str] = None, nullable: bool = False) -> SchemaField:
    return SchemaField(SchemaKind.NUMBER, description=description, nullable=nullable)


def integer(description: Optional[str] = None, nullable: bool = False) -> SchemaField:
    return SchemaField(SchemaKind.INTEGER, description=description, nullable=nullable)


def boolean(description: Optional[str] = None, nullable: bool = False) -> SchemaField:
    return SchemaField(SchemaKind.BOOLEAN, description=description, nullable=nullable)


def array(items: SchemaField, description: Optional[str] = None,
          nullable: bool = False) -> SchemaField:
    return SchemaField(SchemaKind.ARRAY, description=description, nullable=nullable, items=items)


def obj(properties: Dict[str, SchemaField], required: Optional[List[str]] = None,
        description: Optional[str] = None, nullable: bool = False) -> SchemaField:
    """Build an OBJECT field; `required` defaults to none."""
    return SchemaField(
        SchemaKind.OBJECT,
        description=description,
        nullable=nullable,
        properties=dict(properties),
        required=list(required or []),
    )


# ============================================================================
# Validation
# ============================================================================

class ResponseValidator:
    """Interface for checking a parsed response against a schema descriptor."""

    def errors(self, data: Any, schema: SchemaField) -> List[str]:
        """
        Check a parsed response.

        Args:
            data: Value produced by json.loads
            schema: Descriptor the request was made with

        Returns:
            List of problems found, empty when the response is accepted
        """
        raise NotImplementedError


class ShallowValidator(ResponseValidator):
    """
    Top-level required-key presence check.

    Value types, nested required fields and array element shapes are not
    inspected. A required key present with a null value passes.
    """

    def errors(self, data: Any, schema: SchemaField) -> List[str]:
        if not isinstance(data, dict):
            return [f"response is not a JSON object (got {type(data).__name__})"]
        return [
            f"missing required key '{name}'"
            for name in schema.required
            if name not in data
        ]
