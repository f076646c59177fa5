from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

if TYPE_CHECKING:
    from marshalling_stub_generator.opaque_types import ConversionPolicy, OpaqueTypeDefinition, TypeDescriptor


@dataclass(frozen=True)
class ParameterInfo:
    """A single parameter of a generated function declaration.

    Attributes:
        name: Parameter name, e.g. "real_type"
        type_spelling: The C++ spelling of the parameter type, e.g. "Pose const&"
    """

    name: str
    type_spelling: str

    def to_declaration(self) -> str:
        """Format as a named parameter.

        Returns:
            Parameter string like "Pose const& real_type"
        """
        return f"{self.type_spelling} {self.name}"


@dataclass(frozen=True)
class FunctionDeclaration:
    """A conversion function declaration, together with the comment documenting its contract.

    Attributes:
        return_type: The C++ return type spelling, e.g. "void" or "bool"
        name: The function name, e.g. "to_intermediate"
        parameters: The parameters, in order
        doc: Lines of the documentation comment, without comment markers
    """

    return_type: str
    name: str
    parameters: tuple[ParameterInfo, ...] = ()
    doc: tuple[str, ...] = field(default=(), compare=False)

    @property
    def prototype(self) -> str:
        """The declaration without parameter names, e.g. `void release(Buffer&)`."""
        params = ", ".join(param.type_spelling for param in self.parameters)
        return f"{self.return_type} {self.name}({params})"

    @property
    def signature(self) -> str:
        """The declaration with parameter names, as it is written to the header."""
        params = ", ".join(param.to_declaration() for param in self.parameters)
        return f"{self.return_type} {self.name}({params})"

    def to_lines(self, indent: str = "") -> list[str]:
        """Render the documentation comment and the declaration.

        Args:
            indent: Prefix of every rendered line.

        Returns:
            The lines, without trailing newlines.
        """
        lines: list[str] = []
        if len(self.doc) == 1:
            lines.append(f"{indent}/** {self.doc[0]} */")
        elif self.doc:
            lines.append(f"{indent}/** {self.doc[0]}")
            for doc_line in self.doc[1:]:
                lines.append(f"{indent} * {doc_line}".rstrip())
            lines.append(f"{indent} */")
        lines.append(f"{indent}{self.signature};")
        return lines


@dataclass
class ConversionBlock:
    """The declarations generated for one opaque type definition.

    Attributes:
        definition: The opaque type definition the block was generated for
        intermediate: The resolved descriptor of the intermediate type
        policy: The conversion policy the declarations follow
        declarations: The generated declarations, in output order
    """

    definition: OpaqueTypeDefinition
    intermediate: TypeDescriptor
    policy: ConversionPolicy
    declarations: list[FunctionDeclaration] = field(default_factory=list)

    @property
    def function_names(self) -> list[str]:
        """Names of the declared functions, in output order."""
        return [declaration.name for declaration in self.declarations]

    @override
    def __repr__(self) -> str:
        """Return a readable representation for debugging."""
        return (
            f"ConversionBlock("
            f"real_type={self.definition.real_type.name!r}, "
            f"intermediate={self.intermediate.name!r}, "
            f"policy={self.policy.value}, "
            f"functions={self.function_names})"
        )
