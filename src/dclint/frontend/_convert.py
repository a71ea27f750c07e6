"""Convert a Python ``ast`` tree into :mod:`dclint.core.nodes`.

Besides building nodes, conversion records every name binding it sees
into :class:`~dclint.frontend._scope.Scope` objects and remembers which
scope each ``Name`` was read in, so the resolver can answer type queries
without walking the tree again.
"""

from __future__ import annotations

import ast
import re

from dclint.core._types import ORDER_OPERATORS
from dclint.core.diagnostic import Span
from dclint.core.nodes import (
    Attribute,
    BinaryExpr,
    Call,
    ClassDef,
    Compare,
    Expr,
    FieldDecl,
    FunctionDef,
    Keyword,
    Literal,
    Module,
    Name,
    Node,
    Opaque,
    Operation,
    Parameter,
    Starred,
    Subscript,
)
from dclint.frontend._scope import Binding, Scope

_COMPARE_OPS: dict[type[ast.cmpop], str] = {
    ast.Lt: ORDER_OPERATORS["<"],
    ast.LtE: ORDER_OPERATORS["<="],
    ast.Gt: ORDER_OPERATORS[">"],
    ast.GtE: ORDER_OPERATORS[">="],
    ast.Eq: "__eq__",
    ast.NotEq: "__ne__",
    ast.In: "__contains__",
    ast.NotIn: "not in",
    ast.Is: "is",
    ast.IsNot: "is not",
}

_BIN_OPS: dict[type[ast.operator], str] = {
    ast.Add: "+",
    ast.Sub: "-",
    ast.Mult: "*",
    ast.MatMult: "@",
    ast.Div: "/",
    ast.Mod: "%",
    ast.Pow: "**",
    ast.LShift: "<<",
    ast.RShift: ">>",
    ast.BitOr: "|",
    ast.BitXor: "^",
    ast.BitAnd: "&",
    ast.FloorDiv: "//",
}

_UNARY_OPS: dict[type[ast.unaryop], str] = {
    ast.Invert: "~",
    ast.Not: "not",
    ast.UAdd: "+",
    ast.USub: "-",
}

_DISPLAYS: dict[type[ast.expr], str] = {
    ast.List: "list",
    ast.ListComp: "list",
    ast.Set: "set",
    ast.SetComp: "set",
    ast.Tuple: "tuple",
    ast.Dict: "dict",
    ast.DictComp: "dict",
    ast.JoinedStr: "str",
}

_TYPING_MODULES = {"typing_extensions": "typing"}


def _span(node: ast.AST, default: Span | None = None) -> Span:
    lineno = getattr(node, "lineno", None)
    if lineno is None:
        assert default is not None
        return default
    return Span(
        lineno,
        node.col_offset,  # type: ignore[attr-defined]
        node.end_lineno or lineno,  # type: ignore[attr-defined]
        node.end_col_offset or 0,  # type: ignore[attr-defined]
    )


def _between(start: Span, end: Span) -> Span:
    return Span(start.line, start.column, end.end_line, end.end_column)


def _normalize_module(module: str) -> str:
    root, _, rest = module.partition(".")
    root = _TYPING_MODULES.get(root, root)
    return f"{root}.{rest}" if rest else root


class Converter:
    """Single-use converter for one module."""

    def __init__(self, source: str, path: str, module_name: str) -> None:
        self.path = path
        self.module_name = module_name
        self.module_scope = Scope("module")
        self.scope_of: dict[Node, Scope] = {}
        self._lines = source.splitlines()
        self._scope = self.module_scope
        self._qualname: list[str] = [module_name]

    # --- Module / statements ---

    def convert(self, tree: ast.Module) -> Module:
        body = self._stmts(tree.body)
        end = len(self._lines) or 1
        return Module(path=self.path, body=body, span=Span(1, 0, end, 0))

    def _stmts(self, stmts: list[ast.stmt]) -> tuple[Node, ...]:
        return tuple(self._stmt(s) for s in stmts)

    def _stmt(self, node: ast.stmt) -> Node:
        match node:
            case ast.ClassDef():
                return self._class(node)
            case ast.FunctionDef() | ast.AsyncFunctionDef():
                return self._function(node)
            case ast.Assign():
                return self._assign(node)
            case ast.AnnAssign():
                return self._ann_assign(node)
            case ast.Import() | ast.ImportFrom():
                self._import(node)
                return Opaque(kind=type(node).__name__, span=_span(node))
            case _:
                return self._generic(node)

    def _class(self, node: ast.ClassDef) -> ClassDef:
        span = _span(node)
        decorators = tuple(self._expr(d) for d in node.decorator_list)
        bases = tuple(self._expr(b) for b in node.bases)
        keywords = tuple(self._keyword(k, span) for k in node.keywords)

        outer = self._scope
        class_scope = Scope("class", parent=outer)
        self._scope = class_scope
        self._qualname.append(node.name)
        try:
            body: list[Node] = []
            for stmt in node.body:
                body.extend(self._class_stmt(stmt))
        finally:
            self._qualname.pop()
            self._scope = outer

        cls = ClassDef(
            name=node.name,
            qualified_name=".".join([*self._qualname, node.name]),
            body=tuple(body),
            decorators=decorators,
            bases=bases,
            keywords=keywords,
            span=span,
            name_span=self._name_span(node, node.name),
        )
        class_scope.node = cls
        outer.bind(node.name, Binding("class", cls))
        return cls

    def _class_stmt(self, node: ast.stmt) -> list[Node]:
        """Class body statements; simple assignments become field declarations."""
        if isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
            annotation = self._expr(node.annotation)
            value = self._expr(node.value) if node.value is not None else None
            name = node.target.id
            self._scope.bind(name, Binding("annotation", annotation))
            return [FieldDecl(name=name, annotation=annotation, value=value, span=_span(node))]

        if isinstance(node, ast.Assign) and all(isinstance(t, ast.Name) for t in node.targets):
            value = self._expr(node.value)
            fields: list[Node] = []
            for target in node.targets:
                assert isinstance(target, ast.Name)
                self._scope.bind(target.id, Binding("value", value))
                fields.append(FieldDecl(name=target.id, value=value, span=_span(target)))
            return fields

        return [self._stmt(node)]

    def _function(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> FunctionDef:
        span = _span(node)
        decorators = tuple(self._expr(d) for d in node.decorator_list)
        decorator_names = {
            d.id if isinstance(d, ast.Name) else d.attr
            for d in node.decorator_list
            if isinstance(d, ast.Name | ast.Attribute)
        }
        returns = self._expr(node.returns) if node.returns is not None else None

        outer = self._scope
        func_scope = Scope("function", parent=outer)
        parameters = self._parameters(node.args, func_scope, span)

        if outer.kind == "class" and parameters and "staticmethod" not in decorator_names:
            receiver = parameters[0]
            if receiver.kind in ("positional_only", "positional"):
                kind = "cls" if "classmethod" in decorator_names else "self"
                func_scope.bindings[receiver.name] = [Binding(kind, owner=outer)]

        self._scope = func_scope
        self._qualname.append(node.name)
        try:
            body = self._stmts(node.body)
        finally:
            self._qualname.pop()
            self._scope = outer

        if parameters:
            parameters_span = _between(parameters[0].span, parameters[-1].span)
        else:
            parameters_span = self._name_span(node, node.name)

        func = FunctionDef(
            name=node.name,
            parameters=parameters,
            decorators=decorators,
            returns=returns,
            body=body,
            span=span,
            name_span=self._name_span(node, node.name),
            parameters_span=parameters_span,
        )
        outer.bind(node.name, Binding("function", func))
        return func

    def _parameters(
        self, args: ast.arguments, scope: Scope, default: Span
    ) -> tuple[Parameter, ...]:
        """Convert parameters; annotations and defaults belong to the enclosing scope."""
        positional = [*args.posonlyargs, *args.args]
        defaults: list[ast.expr | None] = [None] * (len(positional) - len(args.defaults))
        defaults.extend(args.defaults)

        spec: list[tuple[ast.arg, str, ast.expr | None]] = []
        for i, a in enumerate(positional):
            kind = "positional_only" if i < len(args.posonlyargs) else "positional"
            spec.append((a, kind, defaults[i]))
        if args.vararg is not None:
            spec.append((args.vararg, "var_positional", None))
        spec.extend(zip(args.kwonlyargs, ["keyword_only"] * len(args.kwonlyargs), args.kw_defaults))
        if args.kwarg is not None:
            spec.append((args.kwarg, "var_keyword", None))

        params: list[Parameter] = []
        for a, kind, default_value in spec:
            annotation = self._expr(a.annotation) if a.annotation is not None else None
            param_default = self._expr(default_value) if default_value is not None else None
            if annotation is not None and kind in ("positional_only", "positional", "keyword_only"):
                scope.bind(a.arg, Binding("annotation", annotation))
            else:
                scope.bind(a.arg, Binding("unknown"))
            params.append(
                Parameter(
                    name=a.arg,
                    kind=kind,
                    annotation=annotation,
                    default=param_default,
                    span=_span(a, default),
                )
            )
        return tuple(params)

    def _assign(self, node: ast.Assign) -> Node:
        value = self._expr(node.value)
        targets: list[Node] = []
        for t in node.targets:
            if isinstance(t, ast.Name):
                self._scope.bind(t.id, Binding("value", value))
                targets.append(Name(id=t.id, span=_span(t)))
            else:
                targets.append(self._expr(t))
        return Opaque(kind="Assign", children=(*targets, value), span=_span(node))

    def _ann_assign(self, node: ast.AnnAssign) -> Node:
        annotation = self._expr(node.annotation)
        value = self._expr(node.value) if node.value is not None else None
        if isinstance(node.target, ast.Name):
            self._scope.bind(node.target.id, Binding("annotation", annotation))
            target: Node = Name(id=node.target.id, span=_span(node.target))
        else:
            target = self._expr(node.target)
        children = (target, annotation) if value is None else (target, annotation, value)
        return Opaque(kind="AnnAssign", children=children, span=_span(node))

    def _import(self, node: ast.Import | ast.ImportFrom) -> None:
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname:
                    qn = _normalize_module(alias.name)
                    self._scope.bind(alias.asname, Binding("module", qualified_name=qn))
                else:
                    root = alias.name.split(".")[0]
                    qn = _normalize_module(root)
                    self._scope.bind(root, Binding("module", qualified_name=qn))
            return

        if node.level or not node.module:
            for alias in node.names:
                self._scope.bind(alias.asname or alias.name, Binding("unknown"))
            return

        module = _normalize_module(node.module)
        for alias in node.names:
            if alias.name == "*":
                continue
            local = alias.asname or alias.name
            self._scope.bind(local, Binding("import", qualified_name=f"{module}.{alias.name}"))

    def _generic(self, node: ast.AST, default: Span | None = None) -> Opaque:
        span = _span(node, default)
        children: list[Node] = []
        for child in ast.iter_child_nodes(node):
            if isinstance(child, ast.expr):
                children.append(self._expr(child))
            elif isinstance(child, ast.stmt):
                children.append(self._stmt(child))
            elif isinstance(child, ast.ExceptHandler) and child.name:
                self._scope.bind(child.name, Binding("unknown"))
                children.append(self._generic(child, span))
            elif isinstance(child, ast.expr_context | ast.operator | ast.cmpop | ast.unaryop):
                continue
            elif isinstance(child, ast.boolop):
                continue
            else:
                children.append(self._generic(child, span))
        return Opaque(kind=type(node).__name__, children=tuple(children), span=span)

    # --- Expressions ---

    def _expr(self, node: ast.expr) -> Expr:
        span = _span(node)
        match node:
            case ast.Name(id=name, ctx=ctx):
                if isinstance(ctx, ast.Store | ast.Del):
                    self._scope.bind(name, Binding("unknown"))
                result = Name(id=name, span=span)
                self.scope_of[result] = self._scope
                return result
            case ast.Attribute(value=value, attr=attr, ctx=ctx):
                return Attribute(
                    value=self._expr(value),
                    attr=attr,
                    is_store=isinstance(ctx, ast.Store | ast.Del),
                    span=span,
                    attr_span=Span(
                        span.end_line, span.end_column - len(attr), span.end_line, span.end_column
                    ),
                )
            case ast.Compare():
                return self._compare(node, span)
            case ast.Call(func=func, args=args, keywords=keywords):
                converted = self._expr(func)
                return Call(
                    func=converted,
                    args=tuple(self._expr(a) for a in args),
                    keywords=tuple(self._keyword(k, span) for k in keywords),
                    span=span,
                    args_span=Span(
                        converted.span.end_line,
                        converted.span.end_column,
                        span.end_line,
                        span.end_column,
                    ),
                )
            case ast.Constant(value=value):
                return Literal(kind=type(value).__name__, value=value, span=span)
            case ast.Dict(keys=keys, values=values):
                elements = [self._expr(k) for k in keys if k is not None]
                elements.extend(self._expr(v) for v in values)
                return Literal(kind="dict", elements=tuple(elements), span=span)
            case ast.List() | ast.Set() | ast.Tuple() | ast.JoinedStr():
                return Literal(
                    kind=_DISPLAYS[type(node)],
                    elements=tuple(
                        self._expr(e) for e in ast.iter_child_nodes(node) if isinstance(e, ast.expr)
                    ),
                    span=span,
                )
            case ast.ListComp() | ast.SetComp() | ast.DictComp():
                return Literal(
                    kind=_DISPLAYS[type(node)], elements=(self._comprehension(node),), span=span
                )
            case ast.Subscript(value=value, slice=index):
                return Subscript(value=self._expr(value), index=self._expr(index), span=span)
            case ast.Starred(value=value):
                return Starred(value=self._expr(value), span=span)
            case ast.BinOp(left=left, op=op, right=right):
                operands = (self._expr(left), self._expr(right))
                return Operation(op=_BIN_OPS[type(op)], operands=operands, span=span)
            case ast.UnaryOp(op=op, operand=operand):
                return Operation(
                    op=_UNARY_OPS[type(op)], operands=(self._expr(operand),), span=span
                )
            case ast.BoolOp(op=op, values=values):
                return Operation(
                    op="and" if isinstance(op, ast.And) else "or",
                    operands=tuple(self._expr(v) for v in values),
                    span=span,
                )
            case ast.NamedExpr(target=target, value=value):
                converted_value = self._expr(value)
                self._scope.bind(target.id, Binding("value", converted_value))
                return Opaque(kind="NamedExpr", children=(converted_value,), span=span)
            case ast.Lambda() | ast.GeneratorExp():
                return self._comprehension(node)
            case _:
                return self._generic(node)

    def _comprehension(self, node: ast.expr) -> Opaque:
        """Comprehensions and lambdas bind names in a scope of their own."""
        outer = self._scope
        self._scope = Scope("function", parent=outer)
        try:
            if isinstance(node, ast.Lambda):
                self._parameters(node.args, self._scope, _span(node))
                return Opaque(kind="Lambda", children=(self._expr(node.body),), span=_span(node))
            return self._generic(node)
        finally:
            self._scope = outer

    def _compare(self, node: ast.Compare, span: Span) -> Compare:
        operands = (self._expr(node.left), *(self._expr(c) for c in node.comparators))
        comparisons: list[BinaryExpr] = []
        for i, op in enumerate(node.ops):
            left, right = operands[i], operands[i + 1]
            comparisons.append(
                BinaryExpr(
                    op=_COMPARE_OPS[type(op)],
                    left=left,
                    right=right,
                    span=_between(left.span, right.span),
                    operator_span=self._operator_span(left.span, right.span),
                )
            )
        return Compare(operands=operands, comparisons=tuple(comparisons), span=span)

    def _keyword(self, node: ast.keyword, default: Span) -> Keyword:
        return Keyword(arg=node.arg, value=self._expr(node.value), span=_span(node, default))

    # --- Source positions ---

    def _name_span(self, node: ast.stmt, name: str) -> Span:
        """Locate the identifier after ``class``/``def`` on the declaration line."""
        line = self._lines[node.lineno - 1] if node.lineno <= len(self._lines) else ""
        match = re.compile(rf"\b{re.escape(name)}\b").search(line, node.col_offset)
        if match is None:
            return _span(node)
        return Span(node.lineno, match.start(), node.lineno, match.end())

    def _operator_span(self, left: Span, right: Span) -> Span:
        """Narrow the gap between two operands down to the operator token."""
        if left.end_line == right.line and left.end_line <= len(self._lines):
            gap = self._lines[left.end_line - 1][left.end_column : right.column]
            stripped = gap.strip()
            if stripped:
                start = left.end_column + gap.index(stripped)
                return Span(left.end_line, start, left.end_line, start + len(stripped))
        return Span(left.end_line, left.end_column, right.line, right.column)
