"""Data model of opaque type definitions and their conversion policies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class GenerationError(Exception):
    """Base class for all errors that abort the generation of a marshalling unit."""

    pass


class MalformedDefinitionError(GenerationError):
    """Raised when a definition lacks a field that is needed to declare its functions."""

    pass


class DuplicateTypeError(GenerationError):
    """Raised when a type, or the real type of an opaque definition, is declared twice."""

    pass


class DescriptionError(GenerationError):
    """Raised when a component description cannot be read or has values of the wrong type."""

    pass


@dataclass(frozen=True)
class TypeDescriptor:
    """The textual spellings of a type that are needed to declare parameters and return values.

    Attributes:
        name: The name under which the type is known in the type catalog.
        reference_spelling: Spelling of a mutable output parameter, e.g. `Pose&`.
        argument_spelling: Spelling of an input parameter, e.g. `Pose const&`.
        cxx_name: The bare type name, used to form pointer types. Defaults to `name`.
    """

    name: str
    reference_spelling: str = ""
    argument_spelling: str = ""
    cxx_name: str = ""

    @property
    def pointer_spelling(self) -> str:
        """The spelling of a raw pointer to this type."""
        return f"{self.cxx_name or self.name}*"

    def missing_spellings(self) -> list[str]:
        """Lists the spelling fields that are empty.

        Returns:
            list[str]: Names of the empty fields, in declaration order.
        """
        missing: list[str] = []
        if not self.name:
            missing.append("name")
        if not self.reference_spelling:
            missing.append("reference_spelling")
        if not self.argument_spelling:
            missing.append("argument_spelling")
        return missing


@dataclass(frozen=True)
class OpaqueTypeDefinition:
    """One pairing of a real (opaque) type with the intermediate type that stands in for it."""

    real_type: TypeDescriptor
    intermediate_type_name: str
    needs_copy: bool = True
    generate_code: bool = True

    def validate(self) -> None:
        """Check that the definition carries everything needed to declare its functions.

        Raises:
            MalformedDefinitionError: If the intermediate name or a real type spelling is missing.
        """
        if not self.intermediate_type_name:
            raise MalformedDefinitionError(f"opaque type '{self.real_type.name}' does not name an intermediate type")

        missing = self.real_type.missing_spellings()
        if missing:
            raise MalformedDefinitionError(
                f"opaque type '{self.real_type.name}' is missing {', '.join(missing)} on its real type"
            )


class ConversionPolicy(Enum):
    """How values of an opaque type are converted to and from their intermediate."""

    COPY = "copy"
    TRANSFER = "transfer"


def select_policy(definition: OpaqueTypeDefinition) -> ConversionPolicy:
    """Choose the conversion policy of an opaque type definition.

    Args:
        definition (OpaqueTypeDefinition): The definition to choose a policy for.

    Returns:
        ConversionPolicy: `COPY` when the definition needs a copy, `TRANSFER` otherwise.
    """
    if definition.needs_copy:
        return ConversionPolicy.COPY
    return ConversionPolicy.TRANSFER
