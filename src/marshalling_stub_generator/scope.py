"""Scopes of the generated C++ unit."""

from __future__ import annotations

from dataclasses import dataclass, field

INDENT = "    "


@dataclass
class Scope:
    """A block of generated lines, e.g. the root of a header or a namespace.

    Lines added to a scope are indented once per enclosing non-root scope.
    """

    name: str
    parent: Scope | None = None
    lines: list[str] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        """Whether this is the outermost scope of the unit."""
        return self.parent is None

    @property
    def trace(self) -> list[Scope]:
        """All scopes from the root down to this one."""
        scopes: list[Scope] = []
        scope: Scope | None = self
        while scope is not None:
            scopes.append(scope)
            scope = scope.parent
        return list(reversed(scopes))

    @property
    def depth(self) -> int:
        """Number of enclosing non-root scopes, including this one."""
        return len(self.trace) - 1

    def add(self, line: str) -> None:
        """Add a line, indented to the depth of this scope. Empty lines stay empty."""
        self.lines.append(f"{INDENT * self.depth}{line}" if line else "")

    def extend(self, lines: list[str]) -> None:
        """Add several lines, see `add`."""
        for line in lines:
            self.add(line)
