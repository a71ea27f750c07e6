from dclint.core._types import Severity
from dclint.core.rule import Rule

_LAYER = "class"

DC_101 = Rule(
    "DC-101",
    Severity.ERROR,
    "'eq' must be true if 'order' is true",
    hint="Ordering methods are generated on top of equality; drop eq=False",
    layer=_LAYER,
)
DC_102 = Rule(
    "DC-102",
    Severity.ERROR,
    "Fields with a default value must come after any fields without a default.",
    hint="The generated __init__ would have a non-default argument after a default one",
    layer=_LAYER,
)
DC_103 = Rule(
    "DC-103",
    Severity.ERROR,
    "'__post_init__' should take all init-only variables in the same order as they are defined",
    layer=_LAYER,
)
DC_104 = Rule(
    "DC-104",
    Severity.WEAK_WARNING,
    "'__post_init__' would not be called until 'init' parameter is set to True",
    hint="__post_init__ is only invoked by the generated __init__",
    layer=_LAYER,
)
