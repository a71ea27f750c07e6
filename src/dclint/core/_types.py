from enum import StrEnum


class Severity(StrEnum):
    """Diagnostic severity levels (ordered lowest → highest)."""

    WEAK_WARNING = "weak_warning"
    ERROR_OR_WARNING = "error_or_warning"
    ERROR = "error"


SEVERITY_LEVEL: dict[Severity, int] = {
    Severity.WEAK_WARNING: 0,
    Severity.ERROR_OR_WARNING: 1,
    Severity.ERROR: 2,
}


# Comparison operator symbol -> dunder method name
ORDER_OPERATORS: dict[str, str] = {
    "<": "__lt__",
    "<=": "__le__",
    ">": "__gt__",
    ">=": "__ge__",
}

DUNDER_POST_INIT = "__post_init__"

INITVAR_TYPE = "dataclasses.InitVar"
CLASSVAR_TYPE = "typing.ClassVar"
NAMEDTUPLE_TYPE = "typing.NamedTuple"

DATACLASS_DECORATOR = "dataclasses.dataclass"
FIELD_FUNCTION = "dataclasses.field"

# Helpers whose first parameter must be a dataclass instance (or type).
HELPER_FUNCTIONS = frozenset(
    {
        "dataclasses.fields",
        "dataclasses.asdict",
        "dataclasses.astuple",
        "dataclasses.replace",
    }
)
DEFINITION_HELPERS = frozenset({"dataclasses.fields"})

MUTABLE_BUILTINS = frozenset({"builtins.list", "builtins.set", "builtins.tuple"})
