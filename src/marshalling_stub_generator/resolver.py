"""Lookup of the types a component knows about."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from marshalling_stub_generator.opaque_types import DuplicateTypeError, GenerationError, TypeDescriptor

logger = logging.getLogger(__name__)


class UnknownTypeError(GenerationError):
    """Raised when a type name is not part of the component's type catalog."""

    pass


class TypeResolver:
    """Maps type names to their descriptors.

    The resolver is filled while the component is loaded. After that it is only read from,
    so a single instance can be shared between generation runs.
    """

    def __init__(self, descriptors: Iterable[TypeDescriptor] = ()):
        """Initialize the resolver.

        Args:
            descriptors (Iterable[TypeDescriptor]): Types to register right away.
        """
        self._types: dict[str, TypeDescriptor] = {}

        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: TypeDescriptor) -> None:
        """Add a type to the catalog.

        Registering the same descriptor twice is allowed and does nothing.

        Args:
            descriptor (TypeDescriptor): The type to add.

        Raises:
            DuplicateTypeError: If a different type with the same name is already registered.
        """
        existing = self._types.get(descriptor.name)
        if existing is not None:
            if existing != descriptor:
                raise DuplicateTypeError(f"the type '{descriptor.name}' is already registered with other spellings")
            return

        self._types[descriptor.name] = descriptor
        logger.debug("Registered type '%s'.", descriptor.name)

    def resolve(self, type_: str | Any) -> TypeDescriptor:
        """Return the descriptor of a type.

        Args:
            type_ (str | Any): A type name, or any object with a `name` attribute.

        Returns:
            TypeDescriptor: The descriptor that is registered under that name.

        Raises:
            ValueError: If the name is empty.
            UnknownTypeError: If no type of that name is registered.
        """
        name = type_ if isinstance(type_, str) else type_.name
        if not name:
            raise ValueError("cannot resolve an empty type name")

        try:
            return self._types[name]
        except KeyError as e:
            raise UnknownTypeError(f"the type '{name}' is not known to the component's type catalog") from e

    def include(self, type_: str | Any) -> bool:
        """Tests whether a type is registered, without raising."""
        name = type_ if isinstance(type_, str) else getattr(type_, "name", "")
        return name in self._types

    def __contains__(self, type_: object) -> bool:
        return self.include(type_)

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)
