# src/signalk_plugin/cli.py
"""signalk-plugin command line interface.

Developer tooling for plugins built on the base layer: print a plugin's
option schema, apply its defaults to a configuration file, and list the
plugins installed through entry points.
"""

import importlib
import json
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from signalk_plugin import __version__
from signalk_plugin.plugins.base import SignalKPlugin
from signalk_plugin.plugins.config_base import PluginConfigError, load_plugin_config
from signalk_plugin.plugins.manager import PluginManager
from signalk_plugin.schema import SchemaBuilderError, fill_defaults_deep

app = typer.Typer(
    name="signalk-plugin",
    help="Developer tools for SignalK plugins.",
    no_args_is_help=True,
)

plugins_app = typer.Typer(help="Inspect installed plugins.")
app.add_typer(plugins_app, name="plugins")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"signalk-plugin version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Developer tools for SignalK plugins."""
    pass


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _resolve_plugin_class(target: str) -> type[SignalKPlugin]:
    """Resolve "module.path:ClassName" or a registered plugin id to a class."""
    if ":" in target:
        module_name, _, attr = target.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise _fail(f"Cannot import '{module_name}': {e}") from None
        try:
            plugin_cls = getattr(module, attr)
        except AttributeError:
            raise _fail(f"Module '{module_name}' has no attribute '{attr}'") from None
    else:
        manager = PluginManager()
        manager.load_entrypoints()
        found = manager.get_plugin_by_id(target)
        if found is None:
            raise _fail(f"No installed plugin with id '{target}'")
        plugin_cls = found

    if not (isinstance(plugin_cls, type) and issubclass(plugin_cls, SignalKPlugin)):
        raise _fail(f"'{target}' is not a SignalKPlugin subclass")
    return plugin_cls


def _build_plugin(target: str) -> SignalKPlugin:
    """Instantiate a plugin without a server app, only to read its schema."""
    plugin_cls = _resolve_plugin_class(target)
    try:
        return plugin_cls(None)
    except (SchemaBuilderError, ValidationError, ValueError) as e:
        raise _fail(f"Plugin {plugin_cls.__name__} failed to declare its options: {e}") from None


@app.command()
def schema(
    target: str = typer.Argument(
        ...,
        help="Plugin class as 'module.path:ClassName', or an installed plugin id.",
    ),
    indent: int = typer.Option(
        2,
        "--indent",
        "-i",
        help="JSON indentation.",
    ),
) -> None:
    """Print the option schema of a plugin as JSON."""
    plugin = _build_plugin(target)
    typer.echo(json.dumps(plugin.schema(), indent=indent))


@app.command()
def defaults(
    target: str = typer.Argument(
        ...,
        help="Plugin class as 'module.path:ClassName', or an installed plugin id.",
    ),
    options: str = typer.Option(
        ...,
        "--options",
        "-o",
        help="Options file (JSON or YAML); a server settings wrapper is unwrapped.",
    ),
    deep: bool = typer.Option(
        False,
        "--deep",
        help="Also fill defaults inside nested objects.",
    ),
) -> None:
    """Print an options record with the plugin's defaults filled in."""
    plugin = _build_plugin(target)

    try:
        record: dict[str, Any] = load_plugin_config(Path(options))
    except FileNotFoundError:
        raise _fail(f"Options file not found: {options}") from None
    except PluginConfigError as e:
        raise _fail(str(e)) from None

    try:
        if deep:
            plugin.schema_builder.require_complete()
            fill_defaults_deep(record, plugin.schema())
        else:
            plugin.fill_default_options(record)
    except SchemaBuilderError as e:
        raise _fail(str(e)) from None

    typer.echo(json.dumps(record, indent=2))


@plugins_app.command("list")
def plugins_list() -> None:
    """List plugins installed through the signalk_plugin entry point group."""
    manager = PluginManager()
    try:
        manager.load_entrypoints()
    except ValueError as e:
        raise _fail(str(e)) from None

    specs = manager.get_specs()
    if not specs:
        typer.echo("(no plugins installed)")
        return

    for spec in specs:
        typer.echo(f"  {spec.plugin_id:30} {spec.version:10} - {spec.name}")
