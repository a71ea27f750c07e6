from dclint.core._types import Severity
from dclint.core.rule import Rule

_LAYER = "access"

DC_301 = Rule(
    "DC-301",
    Severity.ERROR,
    "Assignment to attribute of frozen dataclass instance",
    hint="Frozen dataclasses raise FrozenInstanceError on assignment; use dataclasses.replace()",
    layer=_LAYER,
)
DC_302 = Rule(
    "DC-302",
    Severity.ERROR_OR_WARNING,
    "Read of init-only attribute",
    hint="InitVar fields are not stored as instance attributes",
    layer=_LAYER,
)
DC_303 = Rule(
    "DC-303",
    Severity.ERROR,
    "Ordering comparison between instances of different dataclasses",
    layer=_LAYER,
)
DC_304 = Rule(
    "DC-304",
    Severity.ERROR,
    "Ordering comparison on dataclass declared without order=True",
    hint="Pass order=True to the dataclass decorator",
    layer=_LAYER,
)
