from tests.conftest import assert_no_violations, assert_violation, check, only


def test_default_before_required() -> None:
    diagnostics = check(
        """
        from typing import NamedTuple

        class Row(NamedTuple):
            a: int = 0
            b: str
        """
    )
    d = assert_violation(diagnostics, "NT-001")
    assert d.span.line == 5
    assert d.message == "Fields with a default value must come after any fields without a default."


def test_module_qualified_base() -> None:
    diagnostics = check(
        """
        import typing

        class Row(typing.NamedTuple):
            a: int = 0
            b: str
        """
    )
    assert_violation(diagnostics, "NT-001")


def test_typing_extensions_base() -> None:
    diagnostics = check(
        """
        from typing_extensions import NamedTuple

        class Row(NamedTuple):
            a: int = 0
            b: str
        """
    )
    assert_violation(diagnostics, "NT-001")


def test_valid_order() -> None:
    diagnostics = check(
        """
        from typing import NamedTuple

        class Row(NamedTuple):
            a: int
            b: str = ""
            c: list = []
        """
    )
    # NamedTuple defaults are not dataclass fields, so no DC-201 either.
    assert_no_violations(diagnostics)


def test_unannotated_and_class_variables_ignored() -> None:
    diagnostics = check(
        """
        from typing import ClassVar, NamedTuple

        class Row(NamedTuple):
            VERSION = 2
            kind: ClassVar[str] = "row"
            a: int
        """
    )
    assert_no_violations(diagnostics)


def test_each_misordered_field_reported() -> None:
    diagnostics = check(
        """
        from typing import NamedTuple

        class Row(NamedTuple):
            a: int = 0
            b: int = 1
            c: int
            d: int = 2
        """
    )
    assert [d.span.line for d in only(diagnostics, "NT-001")] == [5, 6]


def test_same_message_as_dataclass_ordering() -> None:
    diagnostics = check(
        """
        from dataclasses import dataclass
        from typing import NamedTuple

        class Row(NamedTuple):
            a: int = 0
            b: str

        @dataclass
        class Record:
            a: int = 0
            b: str
        """
    )
    nt = assert_violation(diagnostics, "NT-001")
    dc = assert_violation(diagnostics, "DC-102")
    assert nt.message == dc.message


def test_other_bases_ignored() -> None:
    diagnostics = check(
        """
        from collections import namedtuple

        class Base:
            pass

        class Row(Base):
            a: int = 0
            b: str
        """
    )
    assert_no_violations(diagnostics)
