"""Source node model consumed by the validators.

Nodes are immutable and compared by identity: two ``ClassDef`` values are
the same class only if they are the same object.  Frontends build these
from their own syntax trees; validators never see anything else.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dclint.core.diagnostic import Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Module:
    path: str
    body: tuple[Node, ...]
    span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class ClassDef:
    name: str
    qualified_name: str
    body: tuple[Node, ...] = ()
    decorators: tuple[Expr, ...] = ()
    bases: tuple[Expr, ...] = ()
    keywords: tuple[Keyword, ...] = ()
    span: Span
    name_span: Span

    @property
    def fields(self) -> tuple[FieldDecl, ...]:
        """Class-level declarations in declaration order."""
        return tuple(n for n in self.body if isinstance(n, FieldDecl))

    def find_method(self, name: str) -> FunctionDef | None:
        """Return the first method named *name* declared in this class body."""
        for n in self.body:
            if isinstance(n, FunctionDef) and n.name == name:
                return n
        return None


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class FieldDecl:
    """A class-level declaration: ``name: annotation = value``."""

    name: str
    annotation: Expr | None = None
    value: Expr | None = None
    span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Parameter:
    name: str
    kind: str = "positional"
    """One of ``positional_only``, ``positional``, ``var_positional``,
    ``keyword_only``, ``var_keyword``."""
    annotation: Expr | None = None
    default: Expr | None = None
    span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class FunctionDef:
    name: str
    parameters: tuple[Parameter, ...] = ()
    decorators: tuple[Expr, ...] = ()
    returns: Expr | None = None
    body: tuple[Node, ...] = ()
    span: Span
    name_span: Span
    parameters_span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Name:
    id: str
    span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Attribute:
    """Qualified reference ``value.attr``; ``is_store`` marks assignment targets."""

    value: Expr
    attr: str
    is_store: bool = False
    span: Span
    attr_span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class BinaryExpr:
    """One ``left <op> right`` comparison; ``op`` is the dunder name."""

    op: str
    left: Expr
    right: Expr
    span: Span
    operator_span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Compare:
    """A (possibly chained) comparison.  Operands are walked once."""

    operands: tuple[Expr, ...]
    comparisons: tuple[BinaryExpr, ...]
    span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Keyword:
    arg: str | None
    value: Expr
    span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Starred:
    value: Expr
    span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Call:
    func: Expr
    args: tuple[Expr, ...] = ()
    keywords: tuple[Keyword, ...] = ()
    span: Span
    args_span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Literal:
    """Literal or display: ``kind`` is the builtin type name (``list``, ``int``, ...)."""

    kind: str
    value: Any = None
    elements: tuple[Expr, ...] = ()
    span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Subscript:
    value: Expr
    index: Expr
    span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Operation:
    """Any non-comparison operator expression (``a | b``, ``not a``, ``a + b``)."""

    op: str
    operands: tuple[Expr, ...]
    span: Span


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Opaque:
    """Any other statement or expression; only its children matter."""

    kind: str
    children: tuple[Node, ...] = ()
    span: Span


type Expr = (
    Name
    | Attribute
    | Compare
    | BinaryExpr
    | Call
    | Starred
    | Literal
    | Subscript
    | Operation
    | Opaque
)
type Node = Module | ClassDef | FieldDecl | FunctionDef | Parameter | Keyword | Expr
