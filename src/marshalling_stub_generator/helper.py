"""Helper functionality that is used in other modules of this package."""

from __future__ import annotations

import re

from marshalling_stub_generator.cxx_types import (
    CXX_KEYWORDS,
    INCLUDE_GUARD_SUFFIX,
    TYPES_HEADER_SUFFIX,
    USER_HEADER_SUFFIX,
)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_valid_identifier(name: str) -> bool:
    """Check whether a name can be used as a C++ identifier, e.g. a namespace name.

    Args:
        name (str): The name to check.

    Returns:
        bool: True if the name is a non-keyword identifier.
    """
    return bool(_IDENTIFIER.match(name)) and name not in CXX_KEYWORDS


def include_guard(component_name: str) -> str:
    """Build the include guard token of a component's marshalling header.

    The component name is kept as is, so components whose names only differ by case get
    distinct guards.

    Examples:
        >>> include_guard("MyComponent")
        'MyComponent_USER_MARSHALLING_HH'
    """
    return f"{component_name}{INCLUDE_GUARD_SUFFIX}"


def types_header_name(component_name: str) -> str:
    """Name of the separately generated unit that declares the component's types."""
    return f"{component_name}{TYPES_HEADER_SUFFIX}"


def user_header_name(component_name: str) -> str:
    """Name of the generated marshalling header of a component."""
    return f"{component_name}{USER_HEADER_SUFFIX}"


def scoped_cxx_name(scopes: list[str]) -> str:
    """Join nested scope names into a qualified C++ name.

    E.g. `["Outer", "Inner"]` becomes `Outer::Inner`.
    """
    return "::".join(scopes)

