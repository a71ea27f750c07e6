from dclint.core._types import Severity
from dclint.core.rule import Rule

_LAYER = "field"

DC_201 = Rule(
    "DC-201",
    Severity.ERROR,
    "Mutable default is not allowed",
    hint="The default would be shared by every instance; use field(default_factory=...)",
    layer=_LAYER,
)
DC_202 = Rule(
    "DC-202",
    Severity.ERROR,
    "Cannot specify both 'default' and 'default_factory'",
    layer=_LAYER,
)
DC_203 = Rule(
    "DC-203",
    Severity.WEAK_WARNING,
    "Init-only attribute is useless until '__post_init__' is declared",
    hint="InitVar values are passed to __post_init__ and never stored on the instance",
    layer=_LAYER,
)
