from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dclint.core._types import DUNDER_POST_INIT, MUTABLE_BUILTINS
from dclint.rules.field import DC_201, DC_202, DC_203
from dclint.validators._helpers import instance_class, is_initvar_field

if TYPE_CHECKING:
    from dclint.core.context import AnalysisContext
    from dclint.core.nodes import FieldDecl, FunctionDef


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """What the dataclass machinery sees in one class-level declaration.

    Built fresh for every class visit and dropped afterwards.
    """

    decl: FieldDecl
    is_class_var: bool = False
    has_default: bool = False
    has_default_factory: bool = False
    is_init_var: bool = False

    @property
    def name(self) -> str:
        return self.decl.name


class FieldValidator:
    """Per-field checks, driven by :class:`~dclint.validators.class_.ClassValidator`."""

    def describe(self, ctx: AnalysisContext, decl: FieldDecl) -> FieldDescriptor:
        is_class_var = ctx.types.is_class_var(decl)
        spec = ctx.parameters.field_spec(decl)
        if spec is not None:
            has_default = spec.has_default
            has_default_factory = spec.has_default_factory
        else:
            has_default = decl.value is not None
            has_default_factory = False

        return FieldDescriptor(
            decl=decl,
            is_class_var=is_class_var,
            has_default=has_default,
            has_default_factory=has_default_factory,
            is_init_var=not is_class_var and is_initvar_field(ctx, decl),
        )

    def validate_field(
        self,
        ctx: AnalysisContext,
        field: FieldDescriptor,
        post_init: FunctionDef | None,
    ) -> None:
        if field.is_class_var:
            return

        self._check_mutable_default(ctx, field.decl)

        if field.is_init_var and post_init is None:
            ctx.report(
                DC_203,
                field.decl,
                f"Attribute '{field.name}' is useless until '{DUNDER_POST_INIT}' is declared",
            )

        self._check_field_call(ctx, field.decl)

    def _check_mutable_default(self, ctx: AnalysisContext, decl: FieldDecl) -> None:
        cls = instance_class(ctx, decl.value)
        if cls is None or cls.qualified_name not in MUTABLE_BUILTINS:
            return
        assert decl.value is not None
        ctx.report(DC_201, decl.value, f"Mutable default '{cls.name}' is not allowed")

    def _check_field_call(self, ctx: AnalysisContext, decl: FieldDecl) -> None:
        spec = ctx.parameters.field_spec(decl)
        if spec is not None and spec.has_default and spec.has_default_factory:
            ctx.report(DC_202, spec.call.args_span)
