from dclint.core.rule import Rule
from dclint.rules import access, call, class_, field, namedtuple


def _collect_rules(*modules: object) -> dict[str, Rule]:
    """Collect all Rule instances from the given modules."""
    rules: dict[str, Rule] = {}
    for module in modules:
        for name in dir(module):
            obj = getattr(module, name)
            if isinstance(obj, Rule):
                if obj.id in rules:
                    msg = f"Duplicate rule ID: {obj.id}"
                    raise ValueError(msg)
                rules[obj.id] = obj
    return rules


RULES: dict[str, Rule] = _collect_rules(class_, field, access, call, namedtuple)
ALL_RULES: list[Rule] = sorted(RULES.values(), key=lambda r: r.id)

__all__ = ["ALL_RULES", "RULES"]
