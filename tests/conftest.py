import textwrap

from dclint.core.diagnostic import Diagnostic
from dclint.frontend import check_source


def check(code: str, **kwargs: object) -> list[Diagnostic]:
    return check_source(textwrap.dedent(code), "example.py", **kwargs)  # type: ignore[arg-type]


def assert_violation(diagnostics: list[Diagnostic], rule_id: str) -> Diagnostic:
    matching = [d for d in diagnostics if d.rule_id == rule_id]
    assert matching, (
        f"Expected violation {rule_id}, got: {[d.rule_id for d in diagnostics] or 'none'}"
    )
    return matching[0]


def assert_violations(diagnostics: list[Diagnostic], *rule_ids: str) -> list[Diagnostic]:
    found_ids = {d.rule_id for d in diagnostics}
    expected = set(rule_ids)
    missing = expected - found_ids
    assert not missing, f"Missing violations: {missing}. Got: {found_ids}"
    return [d for d in diagnostics if d.rule_id in expected]


def assert_no_violations(diagnostics: list[Diagnostic], rule_id: str | None = None) -> None:
    relevant = [d for d in diagnostics if rule_id is None or d.rule_id == rule_id]
    assert relevant == [], (
        f"Expected no violations, got: {[(d.rule_id, d.message) for d in relevant]}"
    )


def only(diagnostics: list[Diagnostic], rule_id: str) -> list[Diagnostic]:
    return [d for d in diagnostics if d.rule_id == rule_id]
