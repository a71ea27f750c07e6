import textwrap
from pathlib import Path

import pytest

from dclint.core.nodes import Attribute, Call, ClassDef, Expr, FunctionDef, Module, Opaque
from dclint.core.types import UNKNOWN, ClassType, OtherType, UnionType
from dclint.frontend import ParsedModule, parse_file, parse_source


def _parse(code: str) -> ParsedModule:
    return parse_source(textwrap.dedent(code), "models.py")


def _class(module: Module, name: str) -> ClassDef:
    for node in module.body:
        if isinstance(node, ClassDef) and node.name == name:
            return node
    raise AssertionError(f"class {name} not found")


def _assigned(module: Module, name: str) -> Expr:
    """Value of the last module-level ``name = ...`` statement."""
    found = None
    for node in module.body:
        if isinstance(node, Opaque) and node.kind == "Assign":
            *targets, value = node.children
            if any(getattr(t, "id", None) == name for t in targets):
                found = value
    assert found is not None, f"{name} is never assigned"
    return found  # type: ignore[return-value]


def _type_name(parsed: ParsedModule, expr: Expr) -> str:
    t = parsed.resolution.types.resolve_type(expr)
    assert isinstance(t, ClassType), t
    suffix = " (type)" if t.is_definition else ""
    return t.cls.qualified_name + suffix


# --- Declarations ---


def test_class_qualified_names() -> None:
    parsed = _parse(
        """
        class Outer:
            class Inner:
                pass
        """
    )
    outer = _class(parsed.module, "Outer")
    inner = outer.body[0]
    assert outer.qualified_name == "models.Outer"
    assert isinstance(inner, ClassDef)
    assert inner.qualified_name == "models.Outer.Inner"


def test_string_source_module_name() -> None:
    parsed = parse_source("class A:\n    pass\n")
    assert _class(parsed.module, "A").qualified_name == "__main__.A"


def test_fields_and_methods() -> None:
    parsed = _parse(
        """
        class A:
            x: int
            y = 1
            z: str = "z"

            def __post_init__(self):
                pass

            def __post_init__(self, other):
                pass
        """
    )
    cls = _class(parsed.module, "A")
    assert [f.name for f in cls.fields] == ["x", "y", "z"]
    assert cls.fields[0].value is None
    assert cls.fields[1].annotation is None
    method = cls.find_method("__post_init__")
    assert isinstance(method, FunctionDef)
    assert [p.name for p in method.parameters] == ["self"]
    assert cls.find_method("missing") is None


def test_name_and_parameter_spans() -> None:
    parsed = _parse(
        """
        class Point:
            def method(self, a, b=1):
                pass
        """
    )
    cls = _class(parsed.module, "Point")
    assert (cls.name_span.line, cls.name_span.column, cls.name_span.end_column) == (2, 6, 11)
    method = cls.find_method("method")
    assert method is not None
    assert (method.name_span.column, method.name_span.end_column) == (8, 14)
    assert (method.parameters_span.column, method.parameters_span.end_column) == (15, 25)


def test_syntax_error_propagates() -> None:
    with pytest.raises(SyntaxError):
        parse_source("class :\n")


def test_parse_file(tmp_path: Path) -> None:
    path = tmp_path / "shapes.py"
    path.write_text("class Shape:\n    pass\n", encoding="utf-8")
    parsed = parse_file(path)
    assert parsed.module.path == str(path)
    assert _class(parsed.module, "Shape").qualified_name == "shapes.Shape"


# --- Type resolution ---


@pytest.mark.parametrize(
    ("expr", "expected"),
    [
        ("1", "builtins.int"),
        ("'s'", "builtins.str"),
        ("f'{1}'", "builtins.str"),
        ("None", "builtins.NoneType"),
        ("[1, 2]", "builtins.list"),
        ("{'a': 1}", "builtins.dict"),
        ("(1,)", "builtins.tuple"),
        ("{x for x in 'ab'}", "builtins.set"),
        ("1 < 2", "builtins.bool"),
        ("not 1", "builtins.bool"),
        ("list()", "builtins.list"),
        ("int", "builtins.int (type)"),
    ],
)
def test_builtin_types(expr: str, expected: str) -> None:
    parsed = _parse(f"value = {expr}\n")
    assert _type_name(parsed, _assigned(parsed.module, "value")) == expected


def test_constructor_call_and_class_reference() -> None:
    parsed = _parse(
        """
        class A:
            pass

        instance = A()
        kind = A
        """
    )
    assert _type_name(parsed, _assigned(parsed.module, "instance")) == "models.A"
    assert _type_name(parsed, _assigned(parsed.module, "kind")) == "models.A (type)"


def test_name_flows_through_assignments() -> None:
    parsed = _parse(
        """
        class A:
            pass

        first = A()
        second = first
        """
    )
    assert _type_name(parsed, _assigned(parsed.module, "second")) == "models.A"


def test_conflicting_bindings_are_unknown() -> None:
    parsed = _parse(
        """
        class A:
            pass

        a = A()
        a = 1
        copy = a
        """
    )
    assert parsed.resolution.types.resolve_type(_assigned(parsed.module, "copy")) == UNKNOWN


def test_cyclic_assignment_terminates() -> None:
    parsed = _parse(
        """
        a = b
        b = a
        """
    )
    assert parsed.resolution.types.resolve_type(_assigned(parsed.module, "a")) == UNKNOWN


def test_imports_outside_known_modules_are_unknown() -> None:
    parsed = _parse(
        """
        from elsewhere import Thing
        from . import sibling

        made = Thing()
        other = sibling
        """
    )
    types = parsed.resolution.types
    assert types.resolve_type(_assigned(parsed.module, "made")) == UNKNOWN
    assert types.resolve_type(_assigned(parsed.module, "other")) == UNKNOWN


def test_module_and_function_bindings() -> None:
    parsed = _parse(
        """
        import os

        def helper():
            pass

        mod = os
        fn = helper
        """
    )
    types = parsed.resolution.types
    assert types.resolve_type(_assigned(parsed.module, "mod")) == OtherType("module os")
    assert types.resolve_type(_assigned(parsed.module, "fn")) == OtherType("function")


def test_function_return_annotation() -> None:
    parsed = _parse(
        """
        class A:
            pass

        def make() -> A:
            return A()

        made = make()
        """
    )
    assert _type_name(parsed, _assigned(parsed.module, "made")) == "models.A"


def test_field_attribute_type() -> None:
    parsed = _parse(
        """
        class Inner:
            pass

        class Outer:
            inner: Inner

        value = Outer().inner
        """
    )
    assert _type_name(parsed, _assigned(parsed.module, "value")) == "models.Inner"


def test_annotation_forms() -> None:
    parsed = _parse(
        """
        from typing import ClassVar, Optional, Union
        from dataclasses import InitVar

        class A:
            pass

        class Holder:
            union: A | int
            optional: Optional[A]
            legacy: Union[A, str]
            cls_var: ClassVar[A]
            init_only: InitVar[A]
            kind: type[A]
            forward: "A"
            generic: list[A]
        """
    )
    types = parsed.resolution.types
    fields = {f.name: f for f in _class(parsed.module, "Holder").fields}

    union = types.resolve_type(fields["union"])
    assert isinstance(union, UnionType)
    assert [m.cls.name for m in union.members] == ["A", "int"]  # type: ignore[union-attr]

    optional = types.resolve_type(fields["optional"])
    assert isinstance(optional, UnionType)
    assert [m.cls.name for m in optional.members] == ["A", "NoneType"]  # type: ignore[union-attr]

    assert isinstance(types.resolve_type(fields["legacy"]), UnionType)

    cls_var = types.resolve_type(fields["cls_var"])
    assert isinstance(cls_var, ClassType)
    assert cls_var.cls.name == "A"
    assert types.is_class_var(fields["cls_var"])
    assert not types.is_class_var(fields["union"])

    init_only = types.resolve_type(fields["init_only"])
    assert isinstance(init_only, ClassType)
    assert init_only.cls.qualified_name == "dataclasses.InitVar"

    kind = types.resolve_type(fields["kind"])
    assert isinstance(kind, ClassType)
    assert kind.is_definition

    assert types.resolve_type(fields["forward"]) == UNKNOWN

    generic = types.resolve_type(fields["generic"])
    assert isinstance(generic, ClassType)
    assert generic.cls.qualified_name == "builtins.list"


def test_self_in_methods() -> None:
    parsed = _parse(
        """
        class A:
            def method(self):
                self.attr = 1

            @classmethod
            def build(cls):
                cls.attr = 1

            @staticmethod
            def helper(self):
                self.attr = 1
        """
    )
    cls = _class(parsed.module, "A")
    types = parsed.resolution.types

    def receiver(method: str) -> Expr:
        func = cls.find_method(method)
        assert func is not None
        stmt = func.body[0]
        assert isinstance(stmt, Opaque)
        target = stmt.children[0]
        assert isinstance(target, Attribute)
        return target.value

    assert types.resolve_type(receiver("method")) == ClassType(cls)
    assert types.resolve_type(receiver("build")) == ClassType(cls, is_definition=True)
    assert types.resolve_type(receiver("helper")) == UNKNOWN


# --- Dataclass parameters and field() ---


def test_dataclass_parameters() -> None:
    parsed = _parse(
        """
        import dataclasses
        from dataclasses import dataclass

        FLAG = True

        @dataclass
        class Bare:
            pass

        @dataclass(order=True, frozen=True, init=False, eq=FLAG)
        class Flags:
            pass

        @dataclasses.dataclass()
        class Qualified:
            pass

        class Plain:
            pass
        """
    )
    extract = parsed.resolution.parameters.dataclass_parameters
    bare = extract(_class(parsed.module, "Bare"))
    assert bare is not None
    assert (bare.init, bare.eq, bare.order, bare.frozen) == (True, True, False, False)
    assert bare.eq_argument is None

    flags = extract(_class(parsed.module, "Flags"))
    assert flags is not None
    assert (flags.init, flags.eq, flags.order, flags.frozen) == (False, True, True, True)
    assert flags.eq_argument is not None

    assert extract(_class(parsed.module, "Qualified")) is not None
    assert extract(_class(parsed.module, "Plain")) is None


def test_field_spec() -> None:
    parsed = _parse(
        """
        from dataclasses import field

        class A:
            both: int = field(default=1, default_factory=int)
            factory: list = field(default_factory=list)
            bare: int = field()
            plain: int = 1
        """
    )
    spec = parsed.resolution.parameters.field_spec
    fields = {f.name: f for f in _class(parsed.module, "A").fields}

    both = spec(fields["both"])
    assert both is not None
    assert (both.has_default, both.has_default_factory) == (True, True)
    factory = spec(fields["factory"])
    assert factory is not None
    assert (factory.has_default, factory.has_default_factory) == (False, True)
    bare = spec(fields["bare"])
    assert bare is not None
    assert (bare.has_default, bare.has_default_factory) == (False, False)
    assert spec(fields["plain"]) is None


# --- Callee resolution ---


def _call(parsed: ParsedModule, name: str) -> Call:
    value = _assigned(parsed.module, name)
    assert isinstance(value, Call)
    return value


def test_helper_argument_mapping() -> None:
    parsed = _parse(
        """
        import dataclasses as dc
        from dataclasses import asdict

        positional = asdict(1, dict_factory=dict)
        keyword = dc.astuple(tuple_factory=list, obj=2)
        """
    )
    calls = parsed.resolution.calls

    positional = calls.resolve_callee(_call(parsed, "positional"))
    assert positional is not None
    assert positional.qualified_name == "dataclasses.asdict"
    assert positional.parameters == ("obj", "dict_factory")
    assert [p for _, p in positional.mapping] == ["obj", "dict_factory"]

    keyword = calls.resolve_callee(_call(parsed, "keyword"))
    assert keyword is not None
    assert keyword.qualified_name == "dataclasses.astuple"
    obj = keyword.argument_for("obj")
    assert obj is not None
    assert getattr(obj, "value", None) == 2


def test_local_function_mapping() -> None:
    parsed = _parse(
        """
        def combine(a, b, *, c=0):
            pass

        result = combine(1, c=3, b=2)
        """
    )
    resolved = parsed.resolution.calls.resolve_callee(_call(parsed, "result"))
    assert resolved is not None
    assert resolved.qualified_name == "combine"
    assert resolved.parameters == ("a", "b", "c")
    assert sorted(p for _, p in resolved.mapping) == ["a", "b", "c"]


def test_unresolvable_callee() -> None:
    parsed = _parse(
        """
        from elsewhere import thing

        result = thing(1)
        """
    )
    assert parsed.resolution.calls.resolve_callee(_call(parsed, "result")) is None
