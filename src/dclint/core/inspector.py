import dataclasses
import logging
from collections.abc import Callable, Iterable

from dclint.core.config import DclintConfig
from dclint.core.context import AnalysisContext, DiagnosticCallback
from dclint.core.diagnostic import DataclassLintError, Diagnostic
from dclint.core.nodes import (
    Attribute,
    BinaryExpr,
    Call,
    ClassDef,
    Compare,
    FieldDecl,
    FunctionDef,
    Keyword,
    Literal,
    Module,
    Name,
    Node,
    Opaque,
    Operation,
    Parameter,
    Starred,
    Subscript,
)
from dclint.core.types import ResolutionContext
from dclint.validators.base import BaseValidator, ValidatorRegistry, create_default_registry

logger = logging.getLogger("dclint")


def inspect_module(
    module: Module,
    resolution: ResolutionContext,
    *,
    config: DclintConfig | None = None,
    strict: bool = False,
    on_diagnostic: DiagnosticCallback | None = None,
    exclude_rules: set[str] | None = None,
    registry: ValidatorRegistry | None = None,
) -> list[Diagnostic]:
    """Run every registered validator over *module*.

    Args:
        module: Parsed module to analyse.
        resolution: Type, parameter and call collaborators for this module.
        config: Rule filter settings. Defaults to ``DclintConfig()``.
        strict: If True, raise DataclassLintError when anything is reported.
        on_diagnostic: Optional callback for each diagnostic as it is emitted.
        exclude_rules: Extra rule IDs to suppress on top of
                       ``config.exclude_rules``.
        registry: Custom validator registry. Uses defaults if None.

    Returns:
        Diagnostics in emission order (pre-order, source order).

    Example::

        from dclint.frontend import parse_source

        parsed = parse_source(source, "models.py")
        diagnostics = inspect_module(parsed.module, parsed.resolution)

    """
    _config = config or DclintConfig()

    if exclude_rules:
        _config = dataclasses.replace(
            _config, exclude_rules=_config.exclude_rules | frozenset(exclude_rules)
        )

    if registry is None:
        registry = create_default_registry()

    ctx = AnalysisContext(
        resolution,
        path=module.path,
        _rule_allowed=_config.allows,
        _on_diagnostic=on_diagnostic,
    )
    _Walker(ctx, registry.get_validators()).walk(module)

    for d in ctx.diagnostics:
        logger.debug("[%s] %s %s:%s: %s", d.rule_id, d.severity, d.path, d.span, d.message)

    if strict and ctx.diagnostics:
        raise DataclassLintError(ctx.diagnostics)

    return ctx.diagnostics


class _Walker:
    """Pre-order depth-first traversal dispatching to validators."""

    def __init__(self, ctx: AnalysisContext, validators: list[BaseValidator]) -> None:
        self._ctx = ctx
        self._validators = validators

    def walk(self, node: Node | None) -> None:
        if node is None:
            return

        match node:
            case Module(body=body):
                self._walk_all(body)
            case ClassDef():
                self._dispatch("validate_class", node)
                self._walk_all(node.decorators)
                self._walk_all(node.bases)
                self._walk_all(node.keywords)
                self._walk_all(node.body)
            case FieldDecl(annotation=annotation, value=value):
                self.walk(annotation)
                self.walk(value)
            case FunctionDef():
                self._walk_all(node.decorators)
                self._walk_all(node.parameters)
                self.walk(node.returns)
                self._walk_all(node.body)
            case Parameter(annotation=annotation, default=default):
                self.walk(annotation)
                self.walk(default)
            case Attribute(is_store=True):
                self._dispatch("validate_target", node)
                self.walk(node.value)
            case Attribute():
                self._dispatch("validate_reference", node)
                self.walk(node.value)
            case Compare(operands=operands, comparisons=comparisons):
                for c in comparisons:
                    self._dispatch("validate_binary", c)
                self._walk_all(operands)
            case BinaryExpr(left=left, right=right):
                self._dispatch("validate_binary", node)
                self.walk(left)
                self.walk(right)
            case Call(func=func, args=args, keywords=keywords):
                self._dispatch("validate_call", node)
                self.walk(func)
                self._walk_all(args)
                self._walk_all(keywords)
            case Keyword(value=value) | Starred(value=value):
                self.walk(value)
            case Subscript(value=value, index=index):
                self.walk(value)
                self.walk(index)
            case Literal(elements=elements):
                self._walk_all(elements)
            case Operation(operands=operands):
                self._walk_all(operands)
            case Opaque(children=children):
                self._walk_all(children)
            case Name():
                pass

    def _walk_all(self, nodes: Iterable[Node]) -> None:
        for n in nodes:
            self.walk(n)

    def _dispatch(self, method: str, node: Node) -> None:
        for v in self._validators:
            check: Callable[[AnalysisContext, Node], None] = getattr(v, method)
            try:
                check(self._ctx, node)
            except Exception:
                logger.exception("Validator %s.%s() raised", type(v).__name__, method)
