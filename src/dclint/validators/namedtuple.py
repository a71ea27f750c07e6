from __future__ import annotations

from typing import TYPE_CHECKING

from dclint.core._types import NAMEDTUPLE_TYPE
from dclint.core.types import ClassType
from dclint.rules.namedtuple import NT_001
from dclint.validators._field_order import FIELD_ORDER_MESSAGE, find_misordered_fields
from dclint.validators.base import BaseValidator

if TYPE_CHECKING:
    from dclint.core.context import AnalysisContext
    from dclint.core.nodes import ClassDef, Expr, FieldDecl


class NamedTupleValidator(BaseValidator):
    """Field ordering for ``class X(typing.NamedTuple)`` declarations."""

    def validate_class(self, ctx: AnalysisContext, node: ClassDef) -> None:
        if not any(self._is_namedtuple_base(ctx, b) for b in node.bases):
            return

        def is_class_var(decl: FieldDecl) -> bool:
            return decl.annotation is None or ctx.types.is_class_var(decl)

        def has_default(decl: FieldDecl) -> bool:
            return decl.value is not None

        for decl in find_misordered_fields(node.fields, has_default, is_class_var):
            ctx.report(NT_001, decl, FIELD_ORDER_MESSAGE)

    def _is_namedtuple_base(self, ctx: AnalysisContext, base: Expr) -> bool:
        t = ctx.types.resolve_type(base)
        return (
            isinstance(t, ClassType)
            and t.is_definition
            and t.cls.qualified_name == NAMEDTUPLE_TYPE
        )
