from dataclasses import dataclass

from dclint.core._types import Severity


@dataclass(frozen=True, slots=True)
class Rule:
    """Metadata for a single dataclass rule.

    Rule instances are pure data - they describe *what* a rule checks,
    not *how* to check it.  Validators reference Rule objects by import.

    Example::

        DC_201 = Rule(
            id="DC-201",
            severity=Severity.ERROR,
            summary="Mutable default value",
            hint="Use field(default_factory=...) instead",
            layer="field",
        )
    """

    id: str
    severity: Severity
    summary: str
    hint: str = ""
    layer: str = ""

    def __str__(self) -> str:
        return f"[{self.id}] {self.summary}"
