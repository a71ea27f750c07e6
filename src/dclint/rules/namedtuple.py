from dclint.core._types import Severity
from dclint.core.rule import Rule

_LAYER = "namedtuple"

NT_001 = Rule(
    "NT-001",
    Severity.ERROR,
    "Fields with a default value must come after any fields without a default.",
    hint="The generated __new__ would have a non-default argument after a default one",
    layer=_LAYER,
)
