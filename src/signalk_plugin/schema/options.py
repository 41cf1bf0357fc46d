"""Typed option declarations accepted by the schema builder.

Each builder operation takes exactly one of these models. They are frozen and
reject unknown fields so that a typo in a declaration fails at plugin
construction rather than producing a silently wrong schema.

Example:
    builder.declare_scalar(
        ScalarOption(type=OptionType.INTEGER, name="port", title="UDP port", default=10110)
    )
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from signalk_plugin.contracts import OptionType

# "required" means "must hold a non-default value". JSON schema has no such
# keyword, so each type declares the constraint that expresses it.
# BOOLEAN has no entry: every boolean value counts as set.
REQUIRED_CONSTRAINTS: dict[OptionType, dict[str, Any]] = {
    OptionType.STRING: {"minLength": 1},
    OptionType.NUMBER: {"minimum": 1},
    OptionType.INTEGER: {"minimum": 1},
}

ZERO_DEFAULTS: dict[OptionType, Any] = {
    OptionType.STRING: "",
    OptionType.NUMBER: 0,
    OptionType.INTEGER: 0,
    OptionType.BOOLEAN: False,
}


def _matches_type(option_type: OptionType, value: Any) -> bool:
    """Check a default value against an option type.

    bool is a subclass of int, so it is excluded from the numeric types.
    """
    if option_type is OptionType.STRING:
        return isinstance(value, str)
    if option_type is OptionType.BOOLEAN:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if option_type is OptionType.INTEGER:
        return isinstance(value, int)
    return isinstance(value, int | float)


class ScalarOption(BaseModel):
    """A string, number, integer or boolean option, or an array of one of those.

    Attributes:
        type: Data type of the value (or of each array element)
        name: Property name in the options record
        title: Short label shown in the admin UI
        default: Default value; omitted means the type's zero value, or [] for arrays
        is_array: True if the option holds a list of values
        description: Optional long description
        required: True if the value must differ from "unset" (see REQUIRED_CONSTRAINTS)
    """

    model_config = {"frozen": True, "extra": "forbid"}

    type: OptionType
    name: str = Field(min_length=1)
    title: str
    default: Any = None
    is_array: bool = False
    description: str | None = None
    required: bool = False

    @model_validator(mode="before")
    @classmethod
    def apply_zero_default(cls, data: Any) -> Any:
        """Fill an omitted default from the option type."""
        if not isinstance(data, dict) or data.get("default") is not None:
            return data
        if "type" not in data:
            return data  # Field validation reports the missing type
        if data.get("is_array"):
            return {**data, "default": []}
        return {**data, "default": ZERO_DEFAULTS[OptionType(data["type"])]}

    @model_validator(mode="after")
    def validate_declaration(self) -> "ScalarOption":
        """Reject defaults of the wrong shape and unsupported required flags."""
        if self.required and self.type not in REQUIRED_CONSTRAINTS:
            raise ValueError(
                f"Option '{self.name}': required is not supported for "
                f"{self.type.value} options"
            )

        if self.is_array:
            if not isinstance(self.default, list):
                raise ValueError(
                    f"Option '{self.name}': array default must be a list, "
                    f"got {type(self.default).__name__}"
                )
            bad = [v for v in self.default if not _matches_type(self.type, v)]
            if bad:
                raise ValueError(
                    f"Option '{self.name}': array default contains "
                    f"non-{self.type.value} values {bad!r}"
                )
        elif not _matches_type(self.type, self.default):
            raise ValueError(
                f"Option '{self.name}': default {self.default!r} is not a "
                f"{self.type.value}"
            )
        return self


class ObjectOption(BaseModel):
    """An option that groups other options, or an array of such groups.

    Attributes:
        name: Property name in the options record
        title: Short label shown in the admin UI
        is_array: True if the option holds a list of objects
        description: Optional long description
        item_title: Title of one array element (arrays only)
    """

    model_config = {"frozen": True, "extra": "forbid"}

    name: str = Field(min_length=1)
    title: str
    is_array: bool = False
    description: str | None = None
    item_title: str | None = None

    @model_validator(mode="after")
    def validate_item_title(self) -> "ObjectOption":
        """item_title only applies to arrays of objects."""
        if self.item_title is not None and not self.is_array:
            raise ValueError(
                f"Option '{self.name}': item_title requires is_array=True"
            )
        return self
