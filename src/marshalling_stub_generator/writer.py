"""Generate the marshalling header of a component's opaque types."""

from __future__ import annotations

import logging

from marshalling_stub_generator import helper
from marshalling_stub_generator.opaque_types import (
    ConversionPolicy,
    MalformedDefinitionError,
    OpaqueTypeDefinition,
    TypeDescriptor,
    select_policy,
)
from marshalling_stub_generator.registry import OpaqueTypeRegistry
from marshalling_stub_generator.resolver import TypeResolver
from marshalling_stub_generator.scope import Scope
from marshalling_stub_generator.writer_dto import ConversionBlock, FunctionDeclaration, ParameterInfo

logger = logging.getLogger(__name__)

REAL_PARAM = "real_type"
INTERMEDIATE_PARAM = "intermediate"

THREAD_SAFETY_DOC = (
    "Not thread-safe: calls to from_intermediate and release on a shared",
    "\\c real_type must be synchronized by the caller.",
)


class Writer:
    """A class that handles writing the marshalling header of one component."""

    def __init__(self, component_name: str, registry: OpaqueTypeRegistry, resolver: TypeResolver):
        """Initialize the writer.

        Args:
            component_name (str): Name of the owning component, used as namespace name.
            registry (OpaqueTypeRegistry): The opaque type definitions of the component.
            resolver (TypeResolver): The catalog that intermediate types are looked up in.

        Raises:
            MalformedDefinitionError: If the component name cannot be used as a namespace.
        """
        if not helper.is_valid_identifier(component_name):
            raise MalformedDefinitionError(f"'{component_name}' cannot be used as a C++ namespace name")

        self.component_name = component_name
        self.scope = Scope(name="")
        self.blocks: list[ConversionBlock] = []

        self._registry = registry
        self._resolver = resolver

        self.docstring = f"// This file is automatically generated for component `{component_name}`. Do not edit."

    def emit(
        self,
        definition: OpaqueTypeDefinition,
        intermediate: TypeDescriptor,
        policy: ConversionPolicy,
    ) -> list[FunctionDeclaration]:
        """Build the conversion function declarations of one opaque type.

        Args:
            definition (OpaqueTypeDefinition): The opaque type definition.
            intermediate (TypeDescriptor): The resolved descriptor of its intermediate type.
            policy (ConversionPolicy): The conversion policy of the definition.

        Returns:
            list[FunctionDeclaration]: The declarations, in output order.
        """
        match policy:
            case ConversionPolicy.COPY:
                return self._copy_declarations(definition.real_type, intermediate)
            case ConversionPolicy.TRANSFER:
                return self._transfer_declarations(definition.real_type, intermediate)

    def _copy_declarations(self, real: TypeDescriptor, intermediate: TypeDescriptor) -> list[FunctionDeclaration]:
        to_intermediate = FunctionDeclaration(
            return_type="void",
            name="to_intermediate",
            parameters=(
                ParameterInfo(INTERMEDIATE_PARAM, intermediate.reference_spelling),
                ParameterInfo(REAL_PARAM, real.argument_spelling),
            ),
            doc=(
                "Converts \\c real_type into \\c intermediate",
                "",
                "\\c intermediate receives a snapshot of \\c real_type. \\c real_type is",
                "left unchanged and keeps ownership of its own state. Equal inputs must",
                "give equivalent outputs.",
            ),
        )
        from_intermediate = FunctionDeclaration(
            return_type="void",
            name="from_intermediate",
            parameters=(
                ParameterInfo(REAL_PARAM, real.reference_spelling),
                ParameterInfo(INTERMEDIATE_PARAM, intermediate.argument_spelling),
            ),
            doc=(
                "Converts \\c intermediate into \\c real_type",
                "",
                "\\c intermediate stays owned by the caller and is not consumed. Equal",
                "inputs must give equivalent outputs.",
            ),
        )
        return [to_intermediate, from_intermediate]

    def _transfer_declarations(self, real: TypeDescriptor, intermediate: TypeDescriptor) -> list[FunctionDeclaration]:
        to_intermediate = FunctionDeclaration(
            return_type=intermediate.argument_spelling,
            name="to_intermediate",
            parameters=(ParameterInfo(REAL_PARAM, real.argument_spelling),),
            doc=(
                "Returns the intermediate value that is contained in \\c real_type",
                "",
                "The returned value is a read-only snapshot. Ownership of the resources",
                "of \\c real_type is not affected.",
            ),
        )
        from_intermediate = FunctionDeclaration(
            return_type="bool",
            name="from_intermediate",
            parameters=(
                ParameterInfo(REAL_PARAM, real.reference_spelling),
                ParameterInfo(INTERMEDIATE_PARAM, intermediate.pointer_spelling),
            ),
            doc=(
                "Stores \\c intermediate into \\c real_type. \\c intermediate is owned by \\c",
                "real_type afterwards.",
                "",
                "On success (true), the caller must not delete, inspect or reuse",
                "\\c intermediate other than through the API of \\c real_type.",
                "Returns false if the store is rejected, e.g. because \\c real_type",
                "already owns an intermediate pointer. Ownership is then not",
                "transferred and the caller stays responsible for \\c intermediate.",
                "",
                *THREAD_SAFETY_DOC,
            ),
        )
        release = FunctionDeclaration(
            return_type="void",
            name="release",
            parameters=(ParameterInfo(REAL_PARAM, real.reference_spelling),),
            doc=(
                "Release ownership of \\c real_type on the corresponding intermediate",
                "pointer.",
                "",
                "The pointer stored by from_intermediate passes back to the caller, who",
                "becomes responsible for disposing of it. Afterwards \\c real_type owns",
                "no intermediate pointer. Calling release while \\c real_type owns no",
                "pointer violates this contract.",
                "",
                *THREAD_SAFETY_DOC,
            ),
        )
        return [to_intermediate, from_intermediate, release]

    def _resolve_intermediate(self, definition: OpaqueTypeDefinition) -> TypeDescriptor:
        """Look up the intermediate type of a definition and check its spellings.

        Raises:
            UnknownTypeError: If the intermediate type is not in the catalog.
            MalformedDefinitionError: If the resolved descriptor lacks a spelling.
        """
        intermediate = self._resolver.resolve(definition.intermediate_type_name)

        missing = intermediate.missing_spellings()
        if missing:
            raise MalformedDefinitionError(
                f"intermediate type '{intermediate.name}' of opaque type '{definition.real_type.name}' "
                f"is missing {', '.join(missing)}"
            )
        return intermediate

    def generate_all(self) -> None:
        """Generate the declaration blocks of all templated definitions, in registry order.

        Every definition is validated and resolved before anything is added to the output,
        so a failure leaves the writer without any generated content.

        Raises:
            UnknownTypeError: If an intermediate type cannot be resolved.
            MalformedDefinitionError: If a definition lacks a required field.
        """
        blocks: list[ConversionBlock] = []

        for definition in self._registry.templated_definitions():
            definition.validate()
            intermediate = self._resolve_intermediate(definition)
            policy = select_policy(definition)

            block = ConversionBlock(definition, intermediate, policy, self.emit(definition, intermediate, policy))
            logger.debug("Generated %r.", block)
            blocks.append(block)

        self.blocks = blocks

    def new_scope(self, name: str, scope_heading: str) -> Scope:
        """Open a new scope below the current one.

        Args:
            name (str): The name of the new scope.
            scope_heading (str): The line of code that starts the new scope.

        Returns:
            Scope: The parent of the new scope.
        """
        parent_scope = self.scope
        parent_scope.add(scope_heading)
        parent_scope.add("{")

        self.scope = Scope(name=name, parent=parent_scope)
        return parent_scope

    def return_from_scope(self) -> None:
        """Close the current scope and continue writing to its parent."""
        assert self.scope.parent is not None, "The current scope is the root scope and cannot be returned from."

        parent_scope = self.scope.parent
        parent_scope.lines += self.scope.lines
        parent_scope.add("}")

        self.scope = parent_scope

    def dumps_hpp(self) -> str:
        """Generates string output for the marshalling header.

        Returns:
            str: The output string.
        """
        assert self.scope.is_root

        guard = helper.include_guard(self.component_name)

        self.scope.lines = []
        self.new_scope(self.component_name, f"namespace {self.component_name}")
        for index, block in enumerate(self.blocks):
            if index > 0:
                self.scope.add("")
            for declaration in block.declarations:
                self.scope.extend(declaration.to_lines())
        self.return_from_scope()

        out: list[str] = []
        out.append(self.docstring)
        out.append(f"#ifndef {guard}")
        out.append(f"#define {guard}")
        out.append("")
        out.append(f"#include <{helper.types_header_name(self.component_name)}>")
        out.append("")
        out.extend(self.scope.lines)
        out.append("")
        out.append("#endif")

        return "\n".join(out) + "\n"
