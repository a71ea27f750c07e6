from __future__ import annotations

from typing import TYPE_CHECKING

from dclint.core._types import DEFINITION_HELPERS, HELPER_FUNCTIONS
from dclint.core.types import ClassType, StructuralType, UnionType, UnknownType
from dclint.rules.call import DC_401
from dclint.validators.base import BaseValidator

if TYPE_CHECKING:
    from dclint.core.context import AnalysisContext
    from dclint.core.nodes import Call
    from dclint.core.types import Type


class CallSiteValidator(BaseValidator):
    """Validates the subject argument of ``dataclasses`` helper functions."""

    def validate_call(self, ctx: AnalysisContext, node: Call) -> None:
        callee = ctx.calls.resolve_callee(node)
        if callee is None or callee.qualified_name not in HELPER_FUNCTIONS:
            return
        if not callee.parameters:
            return

        argument = callee.argument_for(callee.parameters[0])
        if argument is None:
            return

        allow_definition = callee.qualified_name in DEFINITION_HELPERS
        if self._is_not_dataclass(ctx, ctx.types.resolve_type(argument), allow_definition):
            suffix = " or types" if allow_definition else ""
            ctx.report(
                DC_401,
                argument,
                f"'{callee.qualified_name}' method should be called on dataclass instances{suffix}",
            )

    def _is_not_dataclass(self, ctx: AnalysisContext, t: Type, allow_definition: bool) -> bool:
        """Return ``True`` only when *t* is certainly not an acceptable dataclass reference.

        Unknown and structural types are never reported.  A union is reported
        only if every member would be.
        """
        match t:
            case UnknownType() | StructuralType():
                return False
            case UnionType(members=members):
                return all(self._is_not_dataclass(ctx, m, allow_definition) for m in members)
            case ClassType(cls=cls, is_definition=is_definition):
                if is_definition and not allow_definition:
                    return True
                return ctx.parameters.dataclass_parameters(cls) is None
            case _:
                return True
