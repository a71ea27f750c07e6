from dclint.core._types import Severity
from dclint.core.rule import Rule

_LAYER = "call"

DC_401 = Rule(
    "DC-401",
    Severity.ERROR,
    "Dataclass helper called on a non-dataclass argument",
    layer=_LAYER,
)
