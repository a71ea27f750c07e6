from __future__ import annotations

from typing import TYPE_CHECKING

from dclint.core._types import ORDER_OPERATORS
from dclint.rules.access import DC_301, DC_302, DC_303, DC_304
from dclint.validators._helpers import dataclass_parameters, instance_class, is_initvar_field
from dclint.validators.base import BaseValidator

if TYPE_CHECKING:
    from dclint.core.context import AnalysisContext
    from dclint.core.nodes import Attribute, BinaryExpr

_ORDER_METHODS = frozenset(ORDER_OPERATORS.values())


class AccessValidator(BaseValidator):
    """Validates how dataclass instances are used: writes, reads and ordering."""

    def validate_target(self, ctx: AnalysisContext, node: Attribute) -> None:
        cls = instance_class(ctx, node.value)
        params = dataclass_parameters(ctx, cls)
        if cls is None or params is None or not params.frozen:
            return
        ctx.report(DC_301, node, f"'{cls.name}' object attribute '{node.attr}' is read-only")

    def validate_reference(self, ctx: AnalysisContext, node: Attribute) -> None:
        cls = instance_class(ctx, node.value)
        if cls is None or dataclass_parameters(ctx, cls) is None:
            return

        for decl in cls.fields:
            if decl.name == node.attr and is_initvar_field(ctx, decl):
                ctx.report(
                    DC_302,
                    node.attr_span,
                    f"'{cls.name}' object could have no attribute '{decl.name}' "
                    "because it is declared as init-only",
                )
                return

    def validate_binary(self, ctx: AnalysisContext, node: BinaryExpr) -> None:
        if node.op not in _ORDER_METHODS:
            return

        left = instance_class(ctx, node.left)
        right = instance_class(ctx, node.right)
        if left is None or right is None:
            return

        left_params = dataclass_parameters(ctx, left)
        if left_params is None:
            return

        if left is not right:
            if dataclass_parameters(ctx, right) is not None:
                ctx.report(
                    DC_303,
                    node.operator_span,
                    f"'{node.op}' not supported between instances of "
                    f"'{left.name}' and '{right.name}'",
                )
        elif not left_params.order:
            ctx.report(
                DC_304,
                node.operator_span,
                f"'{node.op}' not supported between instances of '{left.name}'",
            )
