from __future__ import annotations

from typing import TYPE_CHECKING

from dclint.core._types import DUNDER_POST_INIT
from dclint.rules.class_ import DC_101, DC_102, DC_103, DC_104
from dclint.validators._field_order import FIELD_ORDER_MESSAGE, find_misordered_fields
from dclint.validators.base import BaseValidator
from dclint.validators.field import FieldDescriptor, FieldValidator

if TYPE_CHECKING:
    from dclint.core.context import AnalysisContext
    from dclint.core.nodes import ClassDef, FunctionDef
    from dclint.core.types import DataclassParameters


def _has_any_default(field: FieldDescriptor) -> bool:
    return field.has_default or field.has_default_factory


def _is_excluded(field: FieldDescriptor) -> bool:
    # Unannotated class attributes never become dataclass fields.
    return field.is_class_var or field.decl.annotation is None


class ClassValidator(BaseValidator):
    """Validates dataclass declarations: decorator flags, fields and ``__post_init__``."""

    def __init__(self, field_validator: FieldValidator | None = None) -> None:
        self._fields = field_validator or FieldValidator()

    def validate_class(self, ctx: AnalysisContext, node: ClassDef) -> None:
        params = ctx.parameters.dataclass_parameters(node)
        if params is None:
            return

        self._check_comparison_flags(ctx, node, params)

        post_init = node.find_method(DUNDER_POST_INIT)
        fields = [self._fields.describe(ctx, decl) for decl in node.fields]
        for f in fields:
            self._fields.validate_field(ctx, f, post_init)

        if post_init is not None:
            init_vars = [f for f in fields if f.is_init_var]
            self._check_post_init(ctx, post_init, params, init_vars)

        for f in find_misordered_fields(fields, _has_any_default, _is_excluded):
            ctx.report(DC_102, f.decl, FIELD_ORDER_MESSAGE)

    def _check_comparison_flags(
        self, ctx: AnalysisContext, node: ClassDef, params: DataclassParameters
    ) -> None:
        if params.order and not params.eq:
            ctx.report(DC_101, params.eq_argument or node.name_span)

    def _check_post_init(
        self,
        ctx: AnalysisContext,
        post_init: FunctionDef,
        params: DataclassParameters,
        init_vars: list[FieldDescriptor],
    ) -> None:
        if not params.init:
            ctx.report(DC_104, post_init.name_span)

        # Drop the implicit receiver.
        names = [p.name for p in post_init.parameters[1:]]
        expected = [f.name for f in init_vars]
        if names != expected:
            ctx.report(DC_103, post_init.parameters_span)
