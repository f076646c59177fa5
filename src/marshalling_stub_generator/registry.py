"""The set of opaque type definitions of a component."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from marshalling_stub_generator.opaque_types import DuplicateTypeError, OpaqueTypeDefinition

logger = logging.getLogger(__name__)


class OpaqueTypeRegistry:
    """Holds the opaque type definitions of a component, in the order they were declared."""

    def __init__(self, definitions: Iterable[OpaqueTypeDefinition] = ()):
        """Initialize the registry.

        Args:
            definitions (Iterable[OpaqueTypeDefinition]): The definitions, in declaration order.

        Raises:
            DuplicateTypeError: If two definitions share the same real type.
        """
        self._definitions: tuple[OpaqueTypeDefinition, ...] = tuple(definitions)

        seen: set[str] = set()
        for definition in self._definitions:
            real_name = definition.real_type.name
            if real_name in seen:
                raise DuplicateTypeError(f"the opaque type '{real_name}' is declared more than once")
            seen.add(real_name)

    def templated_definitions(self) -> list[OpaqueTypeDefinition]:
        """The definitions that code should be generated for, in declaration order."""
        templated: list[OpaqueTypeDefinition] = []
        for definition in self._definitions:
            if not definition.generate_code:
                logger.debug("Skipping opaque type '%s': code generation is disabled.", definition.real_type.name)
                continue
            templated.append(definition)
        return templated

    def find(self, real_type_name: str) -> OpaqueTypeDefinition | None:
        """Return the definition of a real type, or None if it is not opaque."""
        for definition in self._definitions:
            if definition.real_type.name == real_type_name:
                return definition
        return None

    def __iter__(self) -> Iterator[OpaqueTypeDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)
