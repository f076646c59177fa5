"""Load component descriptions.

A component description is a TOML file that names the component, lists the types it knows
about, and declares its opaque types::

    [component]
    name = "MyComponent"

    [catalog]
    capnp_schemas = ["intermediates.capnp"]

    [[types]]
    name = "PoseIntermediate"
    reference_spelling = "PoseIntermediate&"
    argument_spelling = "PoseIntermediate const&"

    [[opaques]]
    type = "Pose"
    reference_spelling = "Pose&"
    argument_spelling = "Pose const&"
    intermediate = "PoseIntermediate"
    needs_copy = true

Parsing is done with `tomlkit`. Schema paths are relative to the description file.
"""

from __future__ import annotations

import logging
import os.path
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from marshalling_stub_generator.capnp_catalog import load_capnp_types
from marshalling_stub_generator.opaque_types import (
    DescriptionError,
    MalformedDefinitionError,
    OpaqueTypeDefinition,
    TypeDescriptor,
)
from marshalling_stub_generator.registry import OpaqueTypeRegistry
from marshalling_stub_generator.resolver import TypeResolver

logger = logging.getLogger(__name__)


@dataclass
class Component:
    """A component: its name, the types it knows and its opaque type definitions."""

    name: str
    resolver: TypeResolver
    registry: OpaqueTypeRegistry

    def find_type(self, name: str) -> TypeDescriptor:
        """Resolve a type in the component's catalog, see `TypeResolver.resolve`."""
        return self.resolver.resolve(name)


def _get(table: dict[str, Any], key: str, expected: type, default: Any, where: str) -> Any:
    """Read an optional key and check the type of its value.

    Raises:
        DescriptionError: If the value has the wrong type.
    """
    value = table.get(key, default)
    if not isinstance(value, expected):
        raise DescriptionError(f"{where}: '{key}' must be of type {expected.__name__}, got {type(value).__name__}")
    return value


def _get_tables(data: dict[str, Any], key: str, where: str) -> list[dict[str, Any]]:
    tables = _get(data, key, list, [], where)
    for index, table in enumerate(tables):
        if not isinstance(table, dict):
            raise DescriptionError(f"{where}: entry {index} of '{key}' must be a table")
    return tables


def _descriptor_from_table(table: dict[str, Any], name_key: str, where: str) -> TypeDescriptor:
    return TypeDescriptor(
        name=_get(table, name_key, str, "", where),
        reference_spelling=_get(table, "reference_spelling", str, "", where),
        argument_spelling=_get(table, "argument_spelling", str, "", where),
        cxx_name=_get(table, "cxx_name", str, "", where),
    )


def parse_component(
    data: dict[str, Any],
    base_directory: str,
    import_paths: Sequence[str] = (),
    where: str = "",
) -> Component:
    """Build a component from the parsed content of a description.

    Args:
        data (dict[str, Any]): The parsed description.
        base_directory (str): The directory that relative schema paths are resolved against.
        import_paths (Sequence[str]): Additional import paths for capnp schemas.
        where (str): Name of the description, used in error messages.

    Returns:
        Component: The component.

    Raises:
        DescriptionError: If a value has the wrong type.
        MalformedDefinitionError: If the component or an opaque type has no name.
        DuplicateTypeError: If a type or an opaque type is declared twice.
    """
    component_table = _get(data, "component", dict, {}, where)
    name = _get(component_table, "name", str, "", where)
    if not name:
        raise MalformedDefinitionError(f"{where}: the component has no name")

    resolver = TypeResolver()

    catalog_table = _get(data, "catalog", dict, {}, where)
    schemas = _get(catalog_table, "capnp_schemas", list, [], where)
    if schemas:
        for index, schema in enumerate(schemas):
            if not isinstance(schema, str):
                raise DescriptionError(f"{where}: entry {index} of 'capnp_schemas' must be of type str")
        schema_paths = [os.path.join(base_directory, schema) for schema in schemas]
        for descriptor in load_capnp_types(schema_paths, import_paths):
            resolver.register(descriptor)

    for index, table in enumerate(_get_tables(data, "types", where)):
        descriptor = _descriptor_from_table(table, "name", f"{where}: types[{index}]")
        if not descriptor.name:
            raise MalformedDefinitionError(f"{where}: types[{index}] has no name")
        resolver.register(descriptor)

    definitions: list[OpaqueTypeDefinition] = []
    for index, table in enumerate(_get_tables(data, "opaques", where)):
        entry = f"{where}: opaques[{index}]"
        real_type = _descriptor_from_table(table, "type", entry)
        if not real_type.name:
            raise MalformedDefinitionError(f"{entry} has no type")

        definitions.append(
            OpaqueTypeDefinition(
                real_type=real_type,
                intermediate_type_name=_get(table, "intermediate", str, "", entry),
                needs_copy=_get(table, "needs_copy", bool, True, entry),
                generate_code=_get(table, "generate_code", bool, True, entry),
            )
        )

    logger.debug("Loaded component '%s' with %d type(s) and %d opaque type(s).", name, len(resolver), len(definitions))
    return Component(name=name, resolver=resolver, registry=OpaqueTypeRegistry(definitions))


def load_component(path: str | Path, import_paths: Sequence[str] = ()) -> Component:
    """Load a component description file.

    Args:
        path (str | Path): Path to the TOML description.
        import_paths (Sequence[str]): Additional import paths for capnp schemas.

    Returns:
        Component: The component.

    Raises:
        DescriptionError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except OSError as e:
        raise DescriptionError(f"could not read component description '{path}': {e}") from e
    except TomlkitParseError as e:
        raise DescriptionError(f"could not parse component description '{path}': {e}") from e

    data: Any = doc.unwrap()
    return parse_component(data, str(path.parent), import_paths, where=str(path))
