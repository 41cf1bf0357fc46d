"""Status codes and type names shared across subsystem boundaries."""

from enum import Enum


class PluginState(str, Enum):
    """Lifecycle state of a plugin instance.

    STARTING is transient: it lasts for the duration of start(). A plugin
    left in STARTING means on_plugin_started() raised.
    """

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"


class OptionType(str, Enum):
    """Scalar data types a configuration option may hold.

    Uses (str, Enum) because the value IS the JSON schema "type" keyword.
    """

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
