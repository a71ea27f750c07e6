from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from dclint.core.diagnostic import Diagnostic, Span
from dclint.core.nodes import Node
from dclint.core.rule import Rule
from dclint.core.types import (
    CallResolver,
    ParameterExtractor,
    ResolutionContext,
    TypeResolver,
)

type DiagnosticCallback = Callable[[Diagnostic], Any]
type RuleFilter = Callable[[Rule], bool]


@dataclass
class AnalysisContext:
    """Per-file analysis state shared by all validators.

    Holds the resolution collaborators for the file and accumulates
    diagnostics in emission order.  Validators only append to it.
    """

    resolution: ResolutionContext
    path: str = ""

    diagnostics: list[Diagnostic] = field(default_factory=list)

    _rule_allowed: RuleFilter | None = None
    _on_diagnostic: DiagnosticCallback | None = None

    def report(
        self,
        rule: Rule,
        at: Node | Span,
        detail: str = "",
        *,
        hint: str = "",
    ) -> None:
        """Record a diagnostic.

        Args:
            rule: The Rule that was violated.
            at: Node (or explicit sub-span) the diagnostic is attached to.
            detail: Concrete message. Falls back to ``rule.summary`` when empty.
            hint: Override the rule's default hint.

        """
        if self._rule_allowed is not None and not self._rule_allowed(rule):
            return

        d = Diagnostic(
            rule_id=rule.id,
            severity=rule.severity,
            message=detail or rule.summary,
            span=at if isinstance(at, Span) else at.span,
            hint=hint or rule.hint,
            path=self.path,
        )
        self.diagnostics.append(d)

        if self._on_diagnostic is not None:
            self._on_diagnostic(d)

    @property
    def types(self) -> TypeResolver:
        return self.resolution.types

    @property
    def parameters(self) -> ParameterExtractor:
        return self.resolution.parameters

    @property
    def calls(self) -> CallResolver:
        return self.resolution.calls
