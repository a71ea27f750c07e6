"""Lexical scopes and name bindings collected while converting a module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dclint.core.nodes import ClassDef, Expr, FunctionDef


@dataclass(frozen=True, slots=True)
class Binding:
    """One way a name got bound.

    ``kind`` is one of ``class``, ``function``, ``import``, ``module``,
    ``value``, ``annotation``, ``self``, ``cls`` or ``unknown``.
    """

    kind: str
    node: Expr | ClassDef | FunctionDef | None = None
    qualified_name: str = ""
    owner: Scope | None = None
    """Class scope for ``self``/``cls`` bindings."""


@dataclass(eq=False)
class Scope:
    kind: str  # "module" | "class" | "function"
    parent: Scope | None = None
    bindings: dict[str, list[Binding]] = field(default_factory=dict)
    node: ClassDef | None = None
    """The class this scope defines; set once the class node exists."""

    def bind(self, name: str, binding: Binding) -> None:
        self.bindings.setdefault(name, []).append(binding)

    def lookup(self, name: str) -> list[Binding]:
        """Bindings visible for *name*, following Python's LEGB rule.

        Enclosing class scopes are skipped, like the interpreter does for
        names used inside methods.
        """
        scope: Scope | None = self
        while scope is not None:
            if scope is self or scope.kind != "class":
                found = scope.bindings.get(name)
                if found:
                    return found
            scope = scope.parent
        return []
