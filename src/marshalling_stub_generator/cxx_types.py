"""Constants of the generated C++ units and of the schemas they are derived from."""

from __future__ import annotations

USER_HEADER_SUFFIX = "ToolkitUser.hpp"
TYPES_HEADER_SUFFIX = "ToolkitTypes.hpp"
INCLUDE_GUARD_SUFFIX = "_USER_MARSHALLING_HH"

DESCRIPTION_SUFFIX = ".typekit.toml"

CXX_KEYWORDS = frozenset(
    {
        "alignas",
        "alignof",
        "and",
        "and_eq",
        "asm",
        "auto",
        "bitand",
        "bitor",
        "bool",
        "break",
        "case",
        "catch",
        "char",
        "class",
        "compl",
        "const",
        "constexpr",
        "const_cast",
        "continue",
        "decltype",
        "default",
        "delete",
        "do",
        "double",
        "dynamic_cast",
        "else",
        "enum",
        "explicit",
        "export",
        "extern",
        "false",
        "float",
        "for",
        "friend",
        "goto",
        "if",
        "inline",
        "int",
        "long",
        "mutable",
        "namespace",
        "new",
        "noexcept",
        "not",
        "not_eq",
        "nullptr",
        "operator",
        "or",
        "or_eq",
        "private",
        "protected",
        "public",
        "register",
        "reinterpret_cast",
        "return",
        "short",
        "signed",
        "sizeof",
        "static",
        "static_assert",
        "static_cast",
        "struct",
        "switch",
        "template",
        "this",
        "throw",
        "true",
        "try",
        "typedef",
        "typeid",
        "typename",
        "union",
        "unsigned",
        "using",
        "virtual",
        "void",
        "volatile",
        "wchar_t",
        "while",
        "xor",
        "xor_eq",
    }
)


class CapnpElementType:
    """Kinds of capnproto schema nodes that are imported into a type catalog."""

    STRUCT = "struct"
    ENUM = "enum"
