"""Tests for the marshalling header writer."""

from __future__ import annotations

import pytest
from conftest import cxx_descriptor

from marshalling_stub_generator.description import Component
from marshalling_stub_generator.opaque_types import (
    ConversionPolicy,
    MalformedDefinitionError,
    OpaqueTypeDefinition,
    TypeDescriptor,
)
from marshalling_stub_generator.registry import OpaqueTypeRegistry
from marshalling_stub_generator.resolver import TypeResolver, UnknownTypeError
from marshalling_stub_generator.run import generate_marshalling_header
from marshalling_stub_generator.writer import Writer


def _writer(component: Component) -> Writer:
    writer = Writer(component.name, component.registry, component.resolver)
    writer.generate_all()
    return writer


class TestCopyPolicy:
    """Opaque types that need a copy get two value conversion functions."""

    def test_declarations(self, component, pose_definition):
        intermediate = component.find_type("PoseIntermediate")
        declarations = Writer(component.name, component.registry, component.resolver).emit(
            pose_definition, intermediate, ConversionPolicy.COPY
        )

        assert [declaration.prototype for declaration in declarations] == [
            "void to_intermediate(PoseIntermediate&, Pose const&)",
            "void from_intermediate(Pose&, PoseIntermediate const&)",
        ]

    def test_rendered_with_parameter_names(self, component):
        lines = generate_marshalling_header(component).splitlines()

        assert "    void to_intermediate(PoseIntermediate& intermediate, Pose const& real_type);" in lines
        assert "    void from_intermediate(Pose& real_type, PoseIntermediate const& intermediate);" in lines

    def test_spellings_are_taken_verbatim(self):
        real = TypeDescriptor(name="Pose", reference_spelling="::geo::Pose &", argument_spelling="const ::geo::Pose &")
        intermediate = TypeDescriptor(
            name="wire.Pose", reference_spelling="wire::Pose::Builder", argument_spelling="wire::Pose::Reader"
        )
        definition = OpaqueTypeDefinition(real_type=real, intermediate_type_name="wire.Pose")
        writer = Writer("Geo", OpaqueTypeRegistry([definition]), TypeResolver([intermediate]))

        declarations = writer.emit(definition, intermediate, ConversionPolicy.COPY)

        assert [declaration.prototype for declaration in declarations] == [
            "void to_intermediate(wire::Pose::Builder, const ::geo::Pose &)",
            "void from_intermediate(::geo::Pose &, wire::Pose::Reader)",
        ]


class TestTransferPolicy:
    """Opaque types that do not need a copy get the ownership transfer functions."""

    def test_declarations(self, component, buffer_definition):
        intermediate = component.find_type("BufferIntermediate")
        declarations = Writer(component.name, component.registry, component.resolver).emit(
            buffer_definition, intermediate, ConversionPolicy.TRANSFER
        )

        assert [declaration.prototype for declaration in declarations] == [
            "BufferIntermediate const& to_intermediate(Buffer const&)",
            "bool from_intermediate(Buffer&, BufferIntermediate*)",
            "void release(Buffer&)",
        ]

    def test_pointer_uses_cxx_name(self):
        real = cxx_descriptor("Buffer")
        intermediate = TypeDescriptor(
            name="/base/Blob",
            reference_spelling="::base::Blob&",
            argument_spelling="::base::Blob const&",
            cxx_name="::base::Blob",
        )
        definition = OpaqueTypeDefinition(real_type=real, intermediate_type_name="/base/Blob", needs_copy=False)
        writer = Writer("Base", OpaqueTypeRegistry([definition]), TypeResolver([intermediate]))

        declarations = writer.emit(definition, intermediate, ConversionPolicy.TRANSFER)

        assert declarations[1].prototype == "bool from_intermediate(Buffer&, ::base::Blob*)"

    def test_ownership_contract_is_documented(self, component):
        header = generate_marshalling_header(component)

        assert "\\c intermediate is owned by \\c" in header
        assert "Returns false if the store is rejected" in header
        assert "passes back to the" in header
        assert "must be synchronized by the caller" in header


class TestGenerateAll:
    """Test generation over the whole registry."""

    def test_blocks_follow_registry_order_and_filter(self, component):
        writer = _writer(component)

        assert [block.definition.real_type.name for block in writer.blocks] == ["Pose", "Buffer"]
        assert [block.policy for block in writer.blocks] == [ConversionPolicy.COPY, ConversionPolicy.TRANSFER]
        assert [block.function_names for block in writer.blocks] == [
            ["to_intermediate", "from_intermediate"],
            ["to_intermediate", "from_intermediate", "release"],
        ]

    def test_uses_templated_definitions_of_the_registry(self, resolver, pose_definition, buffer_definition):
        class BufferOnlyRegistry(OpaqueTypeRegistry):
            def templated_definitions(self):
                definitions = super().templated_definitions()
                return [definition for definition in definitions if definition.real_type.name == "Buffer"]

        component = Component("MyComponent", resolver, BufferOnlyRegistry([pose_definition, buffer_definition]))
        writer = _writer(component)

        assert [block.definition.real_type.name for block in writer.blocks] == ["Buffer"]
        assert "Pose" not in writer.dumps_hpp()

    def test_disabled_definitions_are_not_emitted(self, component):
        header = generate_marshalling_header(component)

        assert "Camera" not in header
        assert "FrameIntermediate" not in header

    def test_disabled_definitions_are_not_resolved(self, resolver):
        """Only definitions that code is generated for must have a known intermediate type."""
        hidden = OpaqueTypeDefinition(
            real_type=cxx_descriptor("Camera"), intermediate_type_name="Unknown", generate_code=False
        )
        component = Component("MyComponent", resolver, OpaqueTypeRegistry([hidden]))

        assert _writer(component).blocks == []

    def test_unknown_intermediate_aborts(self, resolver, pose_definition):
        broken = OpaqueTypeDefinition(real_type=cxx_descriptor("Broken"), intermediate_type_name="Missing")
        writer = Writer("MyComponent", OpaqueTypeRegistry([pose_definition, broken]), resolver)

        with pytest.raises(UnknownTypeError, match="'Missing'"):
            writer.generate_all()

        assert writer.blocks == []

    def test_malformed_real_type_aborts(self, resolver):
        malformed = OpaqueTypeDefinition(
            real_type=TypeDescriptor(name="Pose", argument_spelling="Pose const&"),
            intermediate_type_name="PoseIntermediate",
        )
        writer = Writer("MyComponent", OpaqueTypeRegistry([malformed]), resolver)

        with pytest.raises(MalformedDefinitionError, match="reference_spelling"):
            writer.generate_all()

    def test_malformed_intermediate_aborts(self, pose_definition):
        resolver = TypeResolver([TypeDescriptor(name="PoseIntermediate", reference_spelling="PoseIntermediate&")])
        writer = Writer("MyComponent", OpaqueTypeRegistry([pose_definition]), resolver)

        with pytest.raises(MalformedDefinitionError, match="'PoseIntermediate'"):
            writer.generate_all()

    @pytest.mark.parametrize("name", ["", "1Component", "my-component", "namespace"])
    def test_invalid_component_name(self, name, registry, resolver):
        with pytest.raises(MalformedDefinitionError):
            Writer(name, registry, resolver)


class TestDumpsHpp:
    """Test the layout of the generated header."""

    def test_header_layout(self, component):
        lines = generate_marshalling_header(component).splitlines()

        assert lines[0].startswith("// This file is automatically generated for component `MyComponent`")
        assert lines[1] == "#ifndef MyComponent_USER_MARSHALLING_HH"
        assert lines[2] == "#define MyComponent_USER_MARSHALLING_HH"
        assert "#include <MyComponentToolkitTypes.hpp>" in lines
        assert lines[-1] == "#endif"

    def test_single_namespace(self, component):
        lines = generate_marshalling_header(component).splitlines()

        assert lines.count("namespace MyComponent") == 1
        namespace_index = lines.index("namespace MyComponent")
        assert lines[namespace_index + 1] == "{"
        assert lines[-3] == "}"

        body = lines[namespace_index + 2 : -3]
        assert body
        assert all(line == "" or line.startswith("    ") for line in body)

    def test_declaration_order(self, component):
        header = generate_marshalling_header(component)

        pose = header.index("void to_intermediate(PoseIntermediate& intermediate")
        buffer = header.index("BufferIntermediate const& to_intermediate(Buffer const& real_type)")
        release = header.index("void release(Buffer& real_type);")
        assert pose < buffer < release

    def test_output_is_reproducible(self, component):
        writer = _writer(component)

        assert writer.dumps_hpp() == writer.dumps_hpp()
        assert generate_marshalling_header(component) == generate_marshalling_header(component)

    def test_empty_registry(self, resolver):
        header = generate_marshalling_header(Component("Empty", resolver, OpaqueTypeRegistry()))

        assert "namespace Empty\n{\n}\n" in header

    def test_guards_of_components_differing_by_case(self, resolver):
        first = generate_marshalling_header(Component("Robot", resolver, OpaqueTypeRegistry()))
        second = generate_marshalling_header(Component("robot", resolver, OpaqueTypeRegistry()))

        assert "#ifndef Robot_USER_MARSHALLING_HH" in first
        assert "#ifndef robot_USER_MARSHALLING_HH" in second


class TestExampleScenarios:
    """The Pose and Buffer examples from the documentation."""

    def test_pose(self):
        component = Component(
            "MyComponent",
            TypeResolver([cxx_descriptor("PoseIntermediate")]),
            OpaqueTypeRegistry(
                [OpaqueTypeDefinition(real_type=cxx_descriptor("Pose"), intermediate_type_name="PoseIntermediate")]
            ),
        )
        writer = _writer(component)

        assert [f"{declaration.prototype};" for declaration in writer.blocks[0].declarations] == [
            "void to_intermediate(PoseIntermediate&, Pose const&);",
            "void from_intermediate(Pose&, PoseIntermediate const&);",
        ]
        assert "namespace MyComponent" in writer.dumps_hpp()

    def test_buffer(self):
        component = Component(
            "MyComponent",
            TypeResolver([cxx_descriptor("BufferIntermediate")]),
            OpaqueTypeRegistry(
                [
                    OpaqueTypeDefinition(
                        real_type=cxx_descriptor("Buffer"),
                        intermediate_type_name="BufferIntermediate",
                        needs_copy=False,
                    )
                ]
            ),
        )
        declarations = _writer(component).blocks[0].declarations

        assert [declaration.name for declaration in declarations] == ["to_intermediate", "from_intermediate", "release"]
        assert declarations[1].return_type == "bool"
        assert declarations[2].parameters[0].type_spelling == "Buffer&"
