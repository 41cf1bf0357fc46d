"""Declarative configuration-schema builder for plugin options."""

from signalk_plugin.schema.builder import (
    DuplicateOptionError,
    SchemaBuilder,
    SchemaBuilderError,
    UnbalancedObjectError,
    fill_defaults,
    fill_defaults_deep,
)
from signalk_plugin.schema.nodes import ArrayNode, ObjectNode, ScalarNode, SchemaNode
from signalk_plugin.schema.options import (
    REQUIRED_CONSTRAINTS,
    ObjectOption,
    ScalarOption,
)

__all__ = [
    "ArrayNode",
    "DuplicateOptionError",
    "ObjectNode",
    "ObjectOption",
    "REQUIRED_CONSTRAINTS",
    "ScalarNode",
    "ScalarOption",
    "SchemaBuilder",
    "SchemaBuilderError",
    "SchemaNode",
    "UnbalancedObjectError",
    "fill_defaults",
    "fill_defaults_deep",
]
