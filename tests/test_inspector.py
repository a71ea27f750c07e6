import logging
import textwrap

import pytest

from dclint import DataclassLintError, DclintConfig, inspect_module, parse_source
from dclint.core._types import Severity
from dclint.core.context import AnalysisContext
from dclint.core.nodes import ClassDef
from dclint.rules import ALL_RULES, RULES
from dclint.validators.base import BaseValidator, ValidatorRegistry
from dclint.validators.class_ import ClassValidator
from tests.conftest import assert_no_violations, assert_violations, check

_SOURCE = textwrap.dedent(
    """
    from dataclasses import InitVar, dataclass

    @dataclass(frozen=True)
    class P:
        x: int = 0
        y: int
        seed: InitVar[int]
        tags: list = []

    p = P(1, 2)
    p.x = 3
    """
)


class _Exploding(BaseValidator):
    def validate_class(self, ctx: AnalysisContext, node: ClassDef) -> None:
        raise RuntimeError("boom")


def test_reports_in_source_order() -> None:
    diagnostics = check(_SOURCE)
    assert [d.rule_id for d in diagnostics] == ["DC-203", "DC-201", "DC-102", "DC-301"]
    assert all(d.path == "example.py" for d in diagnostics)


def test_repeated_runs_are_identical() -> None:
    parsed = parse_source(_SOURCE, "example.py")
    first = inspect_module(parsed.module, parsed.resolution)
    second = inspect_module(parsed.module, parsed.resolution)
    assert first == second


def test_failing_validator_is_isolated(caplog: pytest.LogCaptureFixture) -> None:
    registry = ValidatorRegistry()
    registry.register(_Exploding())
    registry.register(ClassValidator())
    parsed = parse_source(_SOURCE, "example.py")

    with caplog.at_level(logging.ERROR, logger="dclint"):
        diagnostics = inspect_module(parsed.module, parsed.resolution, registry=registry)

    assert_violations(diagnostics, "DC-102", "DC-201")
    assert "_Exploding.validate_class() raised" in caplog.text


def test_diagnostics_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="dclint"):
        check(_SOURCE)
    assert "[DC-301]" in caplog.text


def test_strict_raises() -> None:
    with pytest.raises(DataclassLintError) as exc_info:
        check(_SOURCE, strict=True)
    assert len(exc_info.value.diagnostics) == 4
    assert "3 errors in 4 diagnostics" in str(exc_info.value)


def test_strict_clean_module() -> None:
    assert check("x = 1\n", strict=True) == []


def test_exclude_rules() -> None:
    diagnostics = check(_SOURCE, exclude_rules={"DC-201", "DC-301"})
    assert [d.rule_id for d in diagnostics] == ["DC-203", "DC-102"]


def test_config_min_severity() -> None:
    config = DclintConfig(min_severity=Severity.ERROR)
    diagnostics = check(_SOURCE, config=config)
    assert_no_violations(diagnostics, "DC-203")
    assert len(diagnostics) == 3


def test_config_categories() -> None:
    config = DclintConfig(categories=frozenset({"access"}))
    diagnostics = check(_SOURCE, config=config)
    assert [d.rule_id for d in diagnostics] == ["DC-301"]


def test_on_diagnostic_callback() -> None:
    seen: list[str] = []
    diagnostics = check(_SOURCE, on_diagnostic=lambda d: seen.append(d.rule_id))
    assert seen == [d.rule_id for d in diagnostics]


def test_rule_ids_unique_and_sorted() -> None:
    ids = [r.id for r in ALL_RULES]
    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)
    assert set(RULES) == set(ids)


def test_rule_layers_known() -> None:
    assert {r.layer for r in ALL_RULES} == {"class", "field", "access", "call", "namedtuple"}


def test_rule_summaries_present() -> None:
    for rule in ALL_RULES:
        assert rule.summary, rule.id
        assert rule.id in str(rule)
