"""Incremental builder for a plugin's configuration schema.

A plugin describes its options with a flat, ordered sequence of calls. Nested
objects are opened with begin_object() and closed with end_object(); every
declaration in between lands inside the open object:

    builder = SchemaBuilder()
    builder.declare_scalar(ScalarOption(type=OptionType.STRING, name="host", title="Host"))
    builder.begin_object(ObjectOption(name="alarm", title="Alarm settings"))
    builder.declare_scalar(ScalarOption(type=OptionType.NUMBER, name="limit", title="Limit"))
    builder.end_object()

    builder.schema()
    # {"type": "object", "properties": {"host": {...}, "alarm": {"type": "object", ...}}}

Builder misuse, such as an end_object() with no open object or a name
declared twice in one object, raises immediately at the offending call.
"""

import copy
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from signalk_plugin.schema.nodes import ArrayNode, ObjectNode, ScalarNode, SchemaNode
from signalk_plugin.schema.options import ObjectOption, ScalarOption


class SchemaBuilderError(Exception):
    """Raised when the schema builder is used incorrectly."""

    pass


class UnbalancedObjectError(SchemaBuilderError):
    """Raised when begin_object()/end_object() calls do not pair up."""

    pass


class DuplicateOptionError(SchemaBuilderError):
    """Raised when a name is declared twice in the same object."""

    pass


class SchemaBuilder:
    """Accumulates option declarations into a schema tree.

    The builder owns a stack of property maps. The bottom entry is the root's
    map and is never popped; begin_object() pushes the new object's map and
    end_object() pops it.
    """

    def __init__(self) -> None:
        self._root = ObjectNode()
        self._containers: list[dict[str, SchemaNode]] = [self._root.properties]

    @property
    def root(self) -> ObjectNode:
        return self._root

    @property
    def depth(self) -> int:
        """Number of objects currently open."""
        return len(self._containers) - 1

    @property
    def is_complete(self) -> bool:
        """True when every begin_object() has been matched by end_object()."""
        return self.depth == 0

    def _insert(self, name: str, node: SchemaNode) -> None:
        container = self._containers[-1]
        if name in container:
            raise DuplicateOptionError(
                f"Option '{name}' is already declared in this object"
            )
        container[name] = node

    def declare_scalar(self, option: ScalarOption) -> None:
        """Declare a scalar option (or array of scalars) in the open object."""
        node: SchemaNode
        if option.is_array:
            node = ArrayNode(
                item_type=option.type,
                title=option.title,
                default=list(option.default),
                description=option.description,
                required=option.required,
            )
        else:
            node = ScalarNode(
                data_type=option.type,
                title=option.title,
                default=option.default,
                description=option.description,
                required=option.required,
            )
        self._insert(option.name, node)

    def begin_object(self, option: ObjectOption) -> None:
        """Declare an object option and make it the target of later declarations.

        Must be matched by end_object().
        """
        if option.is_array:
            item = ObjectNode(title=option.item_title)
            self._insert(
                option.name,
                ArrayNode(
                    item_type=item,
                    title=option.title,
                    description=option.description,
                ),
            )
        else:
            item = ObjectNode(title=option.title, description=option.description)
            self._insert(option.name, item)
        self._containers.append(item.properties)

    def end_object(self) -> None:
        """Close the innermost open object.

        Raises:
            UnbalancedObjectError: If no object is open
        """
        if self.depth == 0:
            raise UnbalancedObjectError(
                "end_object() called with no open object"
            )
        self._containers.pop()

    @contextmanager
    def nested(self, option: ObjectOption) -> Iterator[None]:
        """Scope an object declaration to a with-block.

        Usage:
            with builder.nested(ObjectOption(name="alarm", title="Alarm")):
                builder.declare_scalar(...)

        The object is closed on exit only if it is still the innermost open
        one, so an end_object() inside the block is not repeated.
        """
        self.begin_object(option)
        opened = self._containers[-1]
        try:
            yield
        finally:
            if self.depth and self._containers[-1] is opened:
                self.end_object()

    def schema(self) -> dict[str, Any]:
        """Render the schema document.

        Safe to call at any time; a document rendered while an object is
        still open simply reflects the declarations made so far.
        """
        return self._root.to_dict()

    def require_complete(self) -> None:
        """Raise if any object is still open.

        Raises:
            UnbalancedObjectError: If begin_object() calls are unmatched
        """
        if not self.is_complete:
            raise UnbalancedObjectError(
                f"{self.depth} object(s) still open; call end_object() "
                f"before using the schema"
            )

    def fill_defaults(self, options: dict[str, Any]) -> dict[str, Any]:
        """Fill missing top-level options from their declared defaults."""
        self.require_complete()
        return fill_defaults(options, self.schema())

    def fill_defaults_deep(self, options: dict[str, Any]) -> dict[str, Any]:
        """Fill missing options at every nesting level."""
        self.require_complete()
        return fill_defaults_deep(options, self.schema())


def fill_defaults(options: dict[str, Any], document: dict[str, Any]) -> dict[str, Any]:
    """Set each missing top-level option to its declared default.

    Present keys are never overwritten, whatever their value. Properties that
    declare no default (plain objects) are left missing. Nested objects are
    not descended into; see fill_defaults_deep().

    Args:
        options: Options record, updated in place
        document: Rendered schema document

    Returns:
        The same options record
    """
    for name, prop in document.get("properties", {}).items():
        if name not in options and "default" in prop:
            options[name] = copy.deepcopy(prop["default"])
    return options


def fill_defaults_deep(
    options: dict[str, Any], document: dict[str, Any]
) -> dict[str, Any]:
    """Set missing options to their defaults at every nesting level.

    Missing object options are created empty and filled. Present object
    options are filled in place, as is each dict element of an array of
    objects. Values of the wrong shape are left untouched.

    Args:
        options: Options record, updated in place
        document: Rendered schema document (or an object node within one)

    Returns:
        The same options record
    """
    for name, prop in document.get("properties", {}).items():
        kind = prop.get("type")

        if name not in options:
            if "default" in prop:
                options[name] = copy.deepcopy(prop["default"])
            elif kind == "object":
                options[name] = fill_defaults_deep({}, prop)
            continue

        value = options[name]
        if kind == "object" and isinstance(value, dict):
            fill_defaults_deep(value, prop)
        elif kind == "array" and isinstance(value, list):
            items = prop.get("items", {})
            if items.get("type") == "object":
                for item in value:
                    if isinstance(item, dict):
                        fill_defaults_deep(item, items)
    return options
