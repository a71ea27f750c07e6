"""Resolved types and the collaborator interfaces validators query.

Validators never resolve anything themselves.  They receive a
:class:`ResolutionContext` and ask it three kinds of question: the type
of an expression, the dataclass parameters of a class, and the callee of
a call.  Implementations must be total and conservative: when a fact
cannot be determined they answer :class:`UnknownType` / ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from dclint.core.nodes import Call, ClassDef, Expr, FieldDecl


@dataclass(frozen=True, slots=True)
class ClassType:
    """Instance of ``cls`` or, with ``is_definition``, the class object itself."""

    cls: ClassDef
    is_definition: bool = False

    def to_instance(self) -> ClassType:
        return ClassType(self.cls, is_definition=False)


@dataclass(frozen=True, slots=True)
class UnionType:
    members: tuple[Type, ...]


@dataclass(frozen=True, slots=True)
class StructuralType:
    """Shape-based type inferred from attribute usage."""

    attributes: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class UnknownType:
    pass


@dataclass(frozen=True, slots=True)
class OtherType:
    """Known, but not a class type (modules, functions, ...)."""

    name: str


type Type = ClassType | UnionType | StructuralType | UnknownType | OtherType

UNKNOWN = UnknownType()


def union_of(members: list[Type]) -> Type:
    """Build a flattened union, collapsing duplicates and single members."""
    flat: list[Type] = []
    for m in members:
        for t in m.members if isinstance(m, UnionType) else (m,):
            if t not in flat:
                flat.append(t)
    if len(flat) == 1:
        return flat[0]
    return UnionType(tuple(flat))


@dataclass(frozen=True, slots=True)
class DataclassParameters:
    """Flags of the class-level ``@dataclass(...)`` marker."""

    init: bool = True
    eq: bool = True
    order: bool = False
    frozen: bool = False
    eq_argument: Expr | None = None
    """Node supplying ``eq=...``, for precise diagnostic placement."""


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Structured form of a ``field(...)`` call assigned to a declaration."""

    call: Call
    has_default: bool = False
    has_default_factory: bool = False


@dataclass(frozen=True, slots=True)
class ResolvedCall:
    qualified_name: str
    parameters: tuple[str, ...]
    mapping: tuple[tuple[Expr, str], ...]
    """``(argument, parameter name)`` pairs in argument order."""

    def argument_for(self, parameter: str) -> Expr | None:
        for arg, name in self.mapping:
            if name == parameter:
                return arg
        return None


class TypeResolver(Protocol):
    def resolve_type(self, node: Expr | FieldDecl) -> Type: ...

    def is_class_var(self, field: FieldDecl) -> bool: ...


class ParameterExtractor(Protocol):
    def dataclass_parameters(self, cls: ClassDef) -> DataclassParameters | None: ...

    def field_spec(self, field: FieldDecl) -> FieldSpec | None: ...


class CallResolver(Protocol):
    def resolve_callee(self, call: Call) -> ResolvedCall | None: ...


@dataclass(frozen=True, slots=True)
class ResolutionContext:
    """Collaborators for one analysis pass, passed explicitly to every check."""

    types: TypeResolver
    parameters: ParameterExtractor
    calls: CallResolver
