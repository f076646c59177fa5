"""Import the types declared by *.capnp schemas into a type catalog.

Cap'n Proto structs and enums are middleware-visible types, so they can serve as the
intermediate types of opaque definitions. The C++ spellings follow the code that
`capnp compile -oc++` generates: structs are written through their `Builder` and read
through their `Reader`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import capnp

from marshalling_stub_generator import helper
from marshalling_stub_generator.cxx_types import CapnpElementType
from marshalling_stub_generator.opaque_types import DescriptionError, TypeDescriptor

if hasattr(capnp, "remove_import_hook"):
    capnp.remove_import_hook()

logger = logging.getLogger(__name__)


def struct_descriptor(scopes: list[str]) -> TypeDescriptor:
    """Descriptor of a capnproto struct, given its nested scope path.

    E.g. `["Outer", "Inner"]` is written through `Outer::Inner::Builder` and read through
    `Outer::Inner::Reader`.
    """
    cxx_name = helper.scoped_cxx_name(scopes)
    return TypeDescriptor(
        name=".".join(scopes),
        reference_spelling=f"{cxx_name}::Builder",
        argument_spelling=f"{cxx_name}::Reader",
        cxx_name=cxx_name,
    )


def enum_descriptor(scopes: list[str]) -> TypeDescriptor:
    """Descriptor of a capnproto enum, given its nested scope path."""
    cxx_name = helper.scoped_cxx_name(scopes)
    return TypeDescriptor(
        name=".".join(scopes),
        reference_spelling=f"{cxx_name}&",
        argument_spelling=cxx_name,
        cxx_name=cxx_name,
    )


def _collect_nested(schema: Any, scopes: list[str], descriptors: list[TypeDescriptor]) -> None:
    """Walk the nested nodes of a schema, recursively.

    Args:
        schema (Any): The parsed schema whose nested nodes are walked.
        scopes (list[str]): Names of the enclosing nodes.
        descriptors (list[TypeDescriptor]): Found descriptors are appended here.
    """
    for nested_node in schema.node.nestedNodes:
        nested_schema = schema.get_nested(nested_node.name)
        nested_scopes = [*scopes, nested_node.name]
        node_type = nested_schema.node.which()

        if node_type == CapnpElementType.STRUCT:
            descriptors.append(struct_descriptor(nested_scopes))
        elif node_type == CapnpElementType.ENUM:
            descriptors.append(enum_descriptor(nested_scopes))
        else:
            logger.debug("Skipping %s node '%s': not usable as intermediate type.", node_type, nested_node.name)

        _collect_nested(nested_schema, nested_scopes, descriptors)


def load_capnp_types(paths: Sequence[str], import_paths: Sequence[str] = ()) -> list[TypeDescriptor]:
    """Load *.capnp schemas and describe the structs and enums they declare.

    Args:
        paths (Sequence[str]): The schema files to load.
        import_paths (Sequence[str]): Additional import paths for resolving absolute imports.

    Returns:
        list[TypeDescriptor]: The descriptors, in schema and declaration order.

    Raises:
        DescriptionError: If a schema cannot be loaded.
    """
    parser = capnp.SchemaParser()
    descriptors: list[TypeDescriptor] = []

    for path in paths:
        try:
            module = parser.load(path, imports=list(import_paths))
        except (capnp.KjException, OSError) as e:
            raise DescriptionError(f"could not load capnp schema '{path}': {e}") from e

        found: list[TypeDescriptor] = []
        _collect_nested(module.schema, [], found)
        logger.info("Imported %d type(s) from '%s'.", len(found), path)
        descriptors.extend(found)

    return descriptors
