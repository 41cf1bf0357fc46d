"""Schema tree nodes and their JSON rendering.

The builder holds the schema as a tree of these nodes. Property maps are
insertion-ordered dicts owned by exactly one ObjectNode, so the tree never
shares sub-nodes. to_dict() renders a fresh JSON-compatible document on
every call; callers may mutate the result freely.
"""

import copy
from dataclasses import dataclass, field
from typing import Any

from signalk_plugin.contracts import OptionType
from signalk_plugin.schema.options import REQUIRED_CONSTRAINTS


def _with_description(out: dict[str, Any], description: str | None) -> dict[str, Any]:
    if description is not None:
        out["description"] = description
    return out


@dataclass(frozen=True)
class ScalarNode:
    """A single string, number, integer or boolean option."""

    data_type: OptionType
    title: str
    default: Any
    description: str | None = None
    required: bool = False

    def to_dict(self) -> dict[str, Any]:
        out = _with_description(
            {"type": self.data_type.value, "title": self.title}, self.description
        )
        out["default"] = copy.deepcopy(self.default)
        if self.required:
            out.update(REQUIRED_CONSTRAINTS[self.data_type])
        return out


@dataclass(frozen=True)
class ObjectNode:
    """A group of named options.

    title is None for the document root and for the element of an
    array of objects declared without an item title.
    """

    title: str | None = None
    description: str | None = None
    properties: dict[str, "SchemaNode"] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": "object"}
        if self.title is not None:
            out["title"] = self.title
        _with_description(out, self.description)
        out["properties"] = {
            name: node.to_dict() for name, node in self.properties.items()
        }
        return out


@dataclass(frozen=True)
class ArrayNode:
    """A list of scalars, or a list of objects sharing one ObjectNode shape."""

    item_type: OptionType | ObjectNode
    title: str
    default: list[Any] = field(default_factory=list)
    description: str | None = None
    required: bool = False

    @property
    def item_title(self) -> str | None:
        if isinstance(self.item_type, ObjectNode):
            return self.item_type.title
        return None

    def to_dict(self) -> dict[str, Any]:
        out = _with_description(
            {"type": "array", "title": self.title}, self.description
        )
        out["default"] = copy.deepcopy(self.default)

        if isinstance(self.item_type, ObjectNode):
            out["items"] = self.item_type.to_dict()
        else:
            items: dict[str, Any] = {"type": self.item_type.value}
            if self.required:
                items.update(REQUIRED_CONSTRAINTS[self.item_type])
            out["items"] = items
        return out


SchemaNode = ScalarNode | ArrayNode | ObjectNode
