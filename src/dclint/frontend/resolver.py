"""Conservative type, parameter and callee resolution for one Python module.

This is a deliberately small, flow-insensitive inference: a name is
typed from every binding it has in its scope, and if those bindings
disagree the answer is unknown.  Anything imported from outside the
standard ``dataclasses``/``typing`` names is unknown as well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dclint.core._types import (
    CLASSVAR_TYPE,
    DATACLASS_DECORATOR,
    FIELD_FUNCTION,
    INITVAR_TYPE,
    NAMEDTUPLE_TYPE,
)
from dclint.core.diagnostic import Span
from dclint.core.nodes import (
    Attribute,
    Call,
    ClassDef,
    Compare,
    Expr,
    FieldDecl,
    FunctionDef,
    Literal,
    Name,
    Node,
    Operation,
    Starred,
    Subscript,
)
from dclint.core.types import (
    UNKNOWN,
    ClassType,
    DataclassParameters,
    FieldSpec,
    OtherType,
    ResolvedCall,
    Type,
    union_of,
)
from dclint.frontend._scope import Binding, Scope

log = logging.getLogger(__name__)

_BUILTIN_CLASSES = (
    "object",
    "type",
    "bool",
    "int",
    "float",
    "complex",
    "str",
    "bytes",
    "bytearray",
    "list",
    "set",
    "frozenset",
    "tuple",
    "dict",
    "NoneType",
    "ellipsis",
)

_TYPING_ALIASES: dict[str, str] = {
    "typing.List": "builtins.list",
    "typing.Set": "builtins.set",
    "typing.FrozenSet": "builtins.frozenset",
    "typing.Tuple": "builtins.tuple",
    "typing.Dict": "builtins.dict",
    "typing.Type": "builtins.type",
}

_KNOWN_CLASSES = (
    *(f"builtins.{name}" for name in _BUILTIN_CLASSES),
    INITVAR_TYPE,
    NAMEDTUPLE_TYPE,
)

_UNWRAPPING_FORMS = frozenset({CLASSVAR_TYPE, "typing.Final", "typing.Annotated"})

_ZERO = Span(0, 0, 0, 0)


@dataclass(frozen=True, slots=True)
class _Signature:
    parameters: tuple[str, ...]
    positional: tuple[str, ...]
    keyword: frozenset[str]


_HELPER_SIGNATURES: dict[str, _Signature] = {
    "dataclasses.fields": _Signature(
        ("class_or_instance",), ("class_or_instance",), frozenset({"class_or_instance"})
    ),
    "dataclasses.asdict": _Signature(
        ("obj", "dict_factory"), ("obj",), frozenset({"obj", "dict_factory"})
    ),
    "dataclasses.astuple": _Signature(
        ("obj", "tuple_factory"), ("obj",), frozenset({"obj", "tuple_factory"})
    ),
    # replace(obj, /, **changes)
    "dataclasses.replace": _Signature(("obj",), ("obj",), frozenset()),
}


class SourceResolver:
    """Answers the analysis queries for a single converted module.

    Implements the ``TypeResolver``, ``ParameterExtractor`` and
    ``CallResolver`` protocols.  Results are memoised per instance, so the
    same node always resolves to the same answer within one pass.
    """

    def __init__(self, module_scope: Scope, scope_of: dict[Node, Scope]) -> None:
        self._module_scope = module_scope
        self._scope_of = scope_of
        self._types: dict[Node, Type] = {}
        self._parameters: dict[ClassDef, DataclassParameters | None] = {}
        self._stubs: dict[str, ClassDef] = {}

    # --- TypeResolver ---

    def resolve_type(self, node: Expr | FieldDecl) -> Type:
        cached = self._types.get(node)
        if cached is not None:
            return cached
        # Placeholder breaks cycles such as ``a = b; b = a``.
        self._types[node] = UNKNOWN
        result = self._infer(node)
        self._types[node] = result
        return result

    def is_class_var(self, field: FieldDecl) -> bool:
        annotation = field.annotation
        if isinstance(annotation, Subscript):
            annotation = annotation.value
        return annotation is not None and self._qualified_name(annotation) == CLASSVAR_TYPE

    # --- ParameterExtractor ---

    def dataclass_parameters(self, cls: ClassDef) -> DataclassParameters | None:
        if cls not in self._parameters:
            self._parameters[cls] = self._extract_parameters(cls)
        return self._parameters[cls]

    def field_spec(self, field: FieldDecl) -> FieldSpec | None:
        value = field.value
        if not isinstance(value, Call) or self._qualified_name(value.func) != FIELD_FUNCTION:
            return None
        names = {k.arg for k in value.keywords}
        return FieldSpec(
            call=value,
            has_default="default" in names,
            has_default_factory="default_factory" in names,
        )

    # --- CallResolver ---

    def resolve_callee(self, call: Call) -> ResolvedCall | None:
        qn = self._qualified_name(call.func)
        if qn is None:
            return None

        signature = _HELPER_SIGNATURES.get(qn)
        if signature is None:
            func = self._function_of(call.func)
            if func is None:
                return None
            signature = _signature_of(func)

        mapping: list[tuple[Expr, str]] = []
        for param, arg in zip(signature.positional, call.args, strict=False):
            if isinstance(arg, Starred):
                break
            mapping.append((arg, param))
        for kw in call.keywords:
            if kw.arg is not None and kw.arg in signature.keyword:
                mapping.append((kw.value, kw.arg))

        return ResolvedCall(
            qualified_name=qn, parameters=signature.parameters, mapping=tuple(mapping)
        )

    # --- Inference ---

    def _infer(self, node: Expr | FieldDecl) -> Type:
        match node:
            case FieldDecl(annotation=annotation, value=value):
                if annotation is not None:
                    return self._annotation_type(annotation)
                if value is not None:
                    return self.resolve_type(value)
                return UNKNOWN
            case Literal(kind=kind):
                stub = self._stub(f"builtins.{kind}")
                return ClassType(stub) if stub is not None else UNKNOWN
            case Name(id=name):
                return self._name_type(node, name)
            case Attribute():
                return self._attribute_type(node)
            case Call(func=func):
                return self._call_type(func)
            case Compare():
                return ClassType(self._builtin("bool"))
            case Operation(op="not"):
                return ClassType(self._builtin("bool"))
            case _:
                return UNKNOWN

    def _name_type(self, node: Name, name: str) -> Type:
        scope = self._scope_of.get(node, self._module_scope)
        bindings = scope.lookup(name)
        if not bindings:
            stub = self._stub(f"builtins.{name}")
            return ClassType(stub, is_definition=True) if stub is not None else UNKNOWN

        types = [self._binding_type(b) for b in bindings]
        first = types[0]
        if all(t == first for t in types[1:]):
            return first
        log.debug("Conflicting bindings for %r: %s", name, types)
        return UNKNOWN

    def _binding_type(self, binding: Binding) -> Type:
        match binding.kind:
            case "class":
                assert isinstance(binding.node, ClassDef)
                return ClassType(binding.node, is_definition=True)
            case "function":
                return OtherType("function")
            case "module":
                return OtherType(f"module {binding.qualified_name}")
            case "import":
                return self._qualified_type(binding.qualified_name)
            case "value":
                assert binding.node is not None
                return self.resolve_type(binding.node)  # type: ignore[arg-type]
            case "annotation":
                assert binding.node is not None
                return self._annotation_type(binding.node)  # type: ignore[arg-type]
            case "self" | "cls":
                owner = binding.owner.node if binding.owner is not None else None
                if owner is None:
                    return UNKNOWN
                return ClassType(owner, is_definition=binding.kind == "cls")
            case _:
                return UNKNOWN

    def _attribute_type(self, node: Attribute) -> Type:
        qn = self._qualified_name(node)
        if qn is not None and self._is_imported(node):
            return self._qualified_type(qn)

        owner = self.resolve_type(node.value)
        if not isinstance(owner, ClassType) or owner.is_definition:
            return UNKNOWN
        declared = [f for f in owner.cls.fields if f.name == node.attr]
        if not declared:
            return UNKNOWN
        return self.resolve_type(declared[-1])

    def _call_type(self, func: Expr) -> Type:
        t = self.resolve_type(func)
        if isinstance(t, ClassType) and t.is_definition:
            if t.cls.qualified_name == "builtins.type":
                return UNKNOWN
            return t.to_instance()

        target = self._function_of(func)
        if target is not None and target.returns is not None:
            return self._annotation_type(target.returns)
        return UNKNOWN

    def _annotation_type(self, annotation: Expr) -> Type:
        match annotation:
            case Literal(kind="NoneType"):
                return ClassType(self._builtin("NoneType"))
            case Operation(op="|", operands=operands):
                return union_of([self._annotation_type(o) for o in operands])
            case Subscript(value=head, index=index):
                return self._generic_annotation(head, index)
            case Name() | Attribute():
                qn = self._qualified_name(annotation)
                if qn == INITVAR_TYPE:
                    return ClassType(self._known(INITVAR_TYPE))
                t = self.resolve_type(annotation)
                if isinstance(t, ClassType) and t.is_definition:
                    return t.to_instance()
                return UNKNOWN
            case _:
                # String annotations (forward references) and anything exotic.
                return UNKNOWN

    def _generic_annotation(self, head: Expr, index: Expr) -> Type:
        qn = self._qualified_name(head)
        args = index.elements if isinstance(index, Literal) and index.kind == "tuple" else (index,)

        if qn == INITVAR_TYPE:
            return ClassType(self._known(INITVAR_TYPE))
        if qn == "typing.Optional":
            return union_of([self._annotation_type(args[0]), ClassType(self._builtin("NoneType"))])
        if qn == "typing.Union":
            return union_of([self._annotation_type(a) for a in args])
        if qn in _UNWRAPPING_FORMS:
            return self._annotation_type(args[0])
        if qn in ("builtins.type", "typing.Type"):
            inner = self._annotation_type(args[0])
            if isinstance(inner, ClassType):
                return ClassType(inner.cls, is_definition=True)
            return UNKNOWN

        t = self.resolve_type(head)
        if isinstance(t, ClassType) and t.is_definition:
            return t.to_instance()
        return UNKNOWN

    # --- Dataclass parameters ---

    def _extract_parameters(self, cls: ClassDef) -> DataclassParameters | None:
        for decorator in cls.decorators:
            if isinstance(decorator, Call):
                if self._qualified_name(decorator.func) != DATACLASS_DECORATOR:
                    continue
                flags: dict[str, bool] = {}
                eq_argument: Expr | None = None
                for kw in decorator.keywords:
                    if kw.arg not in ("init", "eq", "order", "frozen"):
                        continue
                    if kw.arg == "eq":
                        eq_argument = kw.value
                    if isinstance(kw.value, Literal) and kw.value.kind == "bool":
                        flags[kw.arg] = kw.value.value
                return DataclassParameters(**flags, eq_argument=eq_argument)
            if self._qualified_name(decorator) == DATACLASS_DECORATOR:
                return DataclassParameters()
        return None

    # --- Names ---

    def _qualified_name(self, expr: Expr) -> str | None:
        """Dotted name of *expr* if it is a (possibly imported) class, function or module."""
        match expr:
            case Name(id=name):
                scope = self._scope_of.get(expr, self._module_scope)
                bindings = scope.lookup(name)
                if not bindings:
                    return f"builtins.{name}" if name in _BUILTIN_CLASSES else None
                b = bindings[-1]
                if b.kind in ("import", "module"):
                    return b.qualified_name
                if b.kind == "class":
                    assert isinstance(b.node, ClassDef)
                    return b.node.qualified_name
                if b.kind == "function":
                    assert isinstance(b.node, FunctionDef)
                    return b.node.name
                return None
            case Attribute(value=value, attr=attr):
                base = self._qualified_name(value)
                return f"{base}.{attr}" if base is not None else None
            case _:
                return None

    def _is_imported(self, expr: Expr) -> bool:
        """True when the leftmost name of a dotted chain is an import."""
        while isinstance(expr, Attribute):
            expr = expr.value
        if not isinstance(expr, Name):
            return False
        scope = self._scope_of.get(expr, self._module_scope)
        bindings = scope.lookup(expr.id)
        return bool(bindings) and bindings[-1].kind in ("import", "module")

    def _qualified_type(self, qn: str) -> Type:
        stub = self._stub(_TYPING_ALIASES.get(qn, qn))
        if stub is not None:
            return ClassType(stub, is_definition=True)
        return UNKNOWN

    def _function_of(self, expr: Expr) -> FunctionDef | None:
        if not isinstance(expr, Name):
            return None
        scope = self._scope_of.get(expr, self._module_scope)
        bindings = scope.lookup(expr.id)
        if len(bindings) == 1 and bindings[0].kind == "function":
            node = bindings[0].node
            return node if isinstance(node, FunctionDef) else None
        return None

    # --- Stub classes for builtins and well-known markers ---

    def _stub(self, qn: str) -> ClassDef | None:
        if qn not in _KNOWN_CLASSES:
            return None
        return self._known(qn)

    def _known(self, qn: str) -> ClassDef:
        stub = self._stubs.get(qn)
        if stub is None:
            name = qn.rpartition(".")[2]
            stub = ClassDef(name=name, qualified_name=qn, span=_ZERO, name_span=_ZERO)
            self._stubs[qn] = stub
        return stub

    def _builtin(self, name: str) -> ClassDef:
        return self._known(f"builtins.{name}")


def _signature_of(func: FunctionDef) -> _Signature:
    positional = tuple(
        p.name for p in func.parameters if p.kind in ("positional_only", "positional")
    )
    keyword = frozenset(
        p.name for p in func.parameters if p.kind in ("positional", "keyword_only")
    )
    return _Signature(tuple(p.name for p in func.parameters), positional, keyword)
