"""Pytest configuration and fixtures for marshalling stub generator tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from marshalling_stub_generator.description import Component
from marshalling_stub_generator.opaque_types import OpaqueTypeDefinition, TypeDescriptor
from marshalling_stub_generator.registry import OpaqueTypeRegistry
from marshalling_stub_generator.resolver import TypeResolver

# Test directory structure
TESTS_DIR = Path(__file__).parent
SCHEMAS_DIR = TESTS_DIR / "schemas"

INTERMEDIATES_SCHEMA = SCHEMAS_DIR / "intermediates.capnp"
ROBOT_DESCRIPTION = SCHEMAS_DIR / "robot.typekit.toml"


def cxx_descriptor(name: str) -> TypeDescriptor:
    """Descriptor with the usual reference and const reference spellings of a C++ class."""
    return TypeDescriptor(name=name, reference_spelling=f"{name}&", argument_spelling=f"{name} const&")


@pytest.fixture
def pose_definition() -> OpaqueTypeDefinition:
    """An opaque type that is copied to and from its intermediate."""
    return OpaqueTypeDefinition(real_type=cxx_descriptor("Pose"), intermediate_type_name="PoseIntermediate")


@pytest.fixture
def buffer_definition() -> OpaqueTypeDefinition:
    """An opaque type that takes ownership of its intermediate."""
    return OpaqueTypeDefinition(
        real_type=cxx_descriptor("Buffer"),
        intermediate_type_name="BufferIntermediate",
        needs_copy=False,
    )


@pytest.fixture
def hidden_definition() -> OpaqueTypeDefinition:
    """An opaque type whose conversion functions are written by hand."""
    return OpaqueTypeDefinition(
        real_type=cxx_descriptor("Camera"),
        intermediate_type_name="FrameIntermediate",
        generate_code=False,
    )


@pytest.fixture
def resolver() -> TypeResolver:
    """The type catalog of the test component."""
    return TypeResolver(
        [
            cxx_descriptor("PoseIntermediate"),
            cxx_descriptor("BufferIntermediate"),
            cxx_descriptor("FrameIntermediate"),
        ]
    )


@pytest.fixture
def registry(pose_definition, buffer_definition, hidden_definition) -> OpaqueTypeRegistry:
    """The opaque types of the test component, in declaration order."""
    return OpaqueTypeRegistry([pose_definition, hidden_definition, buffer_definition])


@pytest.fixture
def component(resolver, registry) -> Component:
    """The test component."""
    return Component(name="MyComponent", resolver=resolver, registry=registry)


def write_description(directory: Path, content: str, name: str = "test.typekit.toml") -> Path:
    """Write a component description file.

    Args:
        directory: Directory to write the description to
        content: TOML content of the description
        name: File name of the description

    Returns:
        Path to the written description
    """
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return path
