from dataclasses import dataclass

from dclint.core._types import Severity


@dataclass(frozen=True, slots=True)
class Span:
    """Source range: 1-based lines, 0-based columns, end exclusive."""

    line: int
    column: int
    end_line: int
    end_column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column + 1}"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single rule violation found in analysed source."""

    rule_id: str
    severity: Severity
    message: str
    span: Span
    hint: str = ""
    path: str = ""


class DataclassLintError(Exception):
    """Raised in strict mode when dataclass rule violations are found."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        count = len(diagnostics)
        errors = sum(1 for d in diagnostics if d.severity == Severity.ERROR)
        super().__init__(f"Dataclass rule violations: {errors} errors in {count} diagnostics")
