"""Type emission utilities for code generation.

This module provides the TypeEmitter class which names the Python type a
response body decodes into.
"""

from __future__ import annotations

import keyword
from dataclasses import dataclass, field
from typing import cast

from ..errors import ClassificationError
from ..loader import SCHEMA_NAME_EXTENSION
from ..openapi import SchemaObject
from .profile import GenerationProfile

OPEN_TYPE = "object"
"""Sentinel target type: no concrete decoder can be generated."""

_SCHEMA_REF_PREFIX = "#/components/schemas/"


@dataclass
class TypeEmitter:
    """Converts response schemas to Python type annotation strings.

    Attributes:
        profile: Generation profile controlling Python version features
        schema_names: Component schema names that ``$ref`` may point at
        imports: Set of typing imports required by emitted types

    Note:
        ``emit()`` records the typing names it needs in ``imports``; they
        accumulate across calls on the same instance.

    Example:
        >>> emitter = TypeEmitter(GenerationProfile.from_version("3.12"), frozenset({"Pet"}))
        >>> emitter.emit({"type": "array", "items": {"$ref": "#/components/schemas/Pet"}})
        'list[Pet]'
        >>> emitter.emit({"oneOf": [{"type": "string"}, {"type": "integer"}]})
        'object'
    """

    profile: GenerationProfile
    schema_names: frozenset[str] = frozenset()
    imports: set[str] = field(default_factory=set)

    def emit(self, schema: SchemaObject | None) -> str:
        """Convert a schema to a Python type annotation string.

        Polymorphic schemas (``oneOf``/``anyOf``), empty schemas, and missing
        schemas produce ``OPEN_TYPE``.

        Raises:
            ClassificationError: If the schema holds a ``$ref`` that does not
                name a known component schema.
        """
        if not isinstance(schema, dict) or not schema:
            return OPEN_TYPE
        if "$ref" in schema:
            return self._ref_name(schema["$ref"])
        schema_name = schema.get(SCHEMA_NAME_EXTENSION)
        if isinstance(schema_name, str) and schema_name:
            return _component_type_name(schema_name)

        if schema.get("oneOf") or schema.get("anyOf"):
            return OPEN_TYPE
        all_of = schema.get("allOf")
        if all_of:
            return self._emit_all_of(all_of)

        enum_values = schema.get("enum")
        if enum_values:
            self.imports.add("Literal")
            literals = ", ".join(repr(value) for value in enum_values)
            return f"Literal[{literals}]"

        schema_type = schema.get("type")
        if schema_type == "null":
            return "None"
        if schema_type == "string":
            return "str"
        if schema_type == "integer":
            return "int"
        if schema_type == "number":
            return "float"
        if schema_type == "boolean":
            return "bool"
        if schema_type == "array":
            items_schema = schema.get("items")
            item_type = self.emit(cast(SchemaObject, items_schema)) if isinstance(items_schema, dict) else OPEN_TYPE
            return f"list[{item_type}]"
        if schema_type == "object" or "properties" in schema:
            additional = schema.get("additionalProperties")
            if isinstance(additional, dict) and additional:
                value_type = self.emit(cast(SchemaObject, additional))
                return f"dict[str, {value_type}]"
            return "dict[str, object]"
        return OPEN_TYPE

    def apply_nullable(self, base: str, schema: SchemaObject | None) -> str:
        if not schema or not schema.get("nullable") or base == OPEN_TYPE:
            return base
        if not self.profile.use_pep604:
            self.imports.add("Optional")
        return self.profile.optional(base)

    def _ref_name(self, ref: str) -> str:
        if not ref.startswith(_SCHEMA_REF_PREFIX):
            raise ClassificationError(f"unresolved schema reference {ref!r}")
        name = ref[len(_SCHEMA_REF_PREFIX) :]
        if name not in self.schema_names:
            raise ClassificationError(f"schema reference {ref!r} does not name a component schema")
        return _component_type_name(name)

    def _emit_all_of(self, items: list[SchemaObject]) -> str:
        if len(items) == 1:
            return self.emit(items[0])
        # No intersection types in Python; fall back to a plain mapping.
        if any(item.get("type") == "object" or "properties" in item for item in items):
            return "dict[str, object]"
        return OPEN_TYPE


def _component_type_name(name: str) -> str:
    if not name.isidentifier() or keyword.iskeyword(name):
        raise ClassificationError(f"component schema name {name!r} is not a valid Python identifier")
    return name
