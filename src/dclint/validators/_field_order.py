"""Constructor-argument ordering shared by dataclass and NamedTuple checks."""

from collections.abc import Callable, Sequence

FIELD_ORDER_MESSAGE = "Fields with a default value must come after any fields without a default."


def find_misordered_fields[T](
    fields: Sequence[T],
    has_default: Callable[[T], bool],
    is_class_var: Callable[[T], bool],
) -> list[T]:
    """Return fields with a default declared before a field without one.

    Class variables are ignored.  Each returned field precedes the last
    field lacking a default, so a positional constructor built from
    *fields* would be illegal.  Order of *fields* is preserved.
    """
    candidates = [f for f in fields if not is_class_var(f)]

    last_required = -1
    for i, f in enumerate(candidates):
        if not has_default(f):
            last_required = i

    return [f for f in candidates[:last_required] if has_default(f)]
