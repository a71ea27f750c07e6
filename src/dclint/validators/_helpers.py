from __future__ import annotations

from typing import TYPE_CHECKING

from dclint.core._types import INITVAR_TYPE
from dclint.core.types import ClassType

if TYPE_CHECKING:
    from dclint.core.context import AnalysisContext
    from dclint.core.nodes import ClassDef, Expr, FieldDecl
    from dclint.core.types import DataclassParameters, Type


def instance_class(ctx: AnalysisContext, expr: Expr | None) -> ClassDef | None:
    """Return the class of *expr* when it resolves to an instance (not a type object)."""
    if expr is None:
        return None
    t = ctx.types.resolve_type(expr)
    if isinstance(t, ClassType) and not t.is_definition:
        return t.cls
    return None


def dataclass_parameters(ctx: AnalysisContext, cls: ClassDef | None) -> DataclassParameters | None:
    if cls is None:
        return None
    return ctx.parameters.dataclass_parameters(cls)


def is_initvar(t: Type) -> bool:
    return isinstance(t, ClassType) and t.cls.qualified_name == INITVAR_TYPE


def is_initvar_field(ctx: AnalysisContext, field: FieldDecl) -> bool:
    return is_initvar(ctx.types.resolve_type(field))
