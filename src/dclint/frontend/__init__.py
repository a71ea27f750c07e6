"""Python source frontend: ``ast`` parsing plus the resolution collaborators."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dclint.core.inspector import inspect_module
from dclint.core.types import ResolutionContext
from dclint.frontend._convert import Converter
from dclint.frontend.resolver import SourceResolver

if TYPE_CHECKING:
    from dclint.core.diagnostic import Diagnostic
    from dclint.core.nodes import Module


@dataclass(frozen=True, slots=True)
class ParsedModule:
    module: Module
    resolution: ResolutionContext


def parse_source(source: str, path: str = "<string>") -> ParsedModule:
    """Parse *source* and build the collaborators that answer queries about it.

    Raises:
        SyntaxError: If *source* is not valid Python.

    """
    tree = ast.parse(source, filename=path)
    module_name = Path(path).stem if path != "<string>" else "__main__"
    converter = Converter(source, path, module_name)
    module = converter.convert(tree)
    resolver = SourceResolver(converter.module_scope, converter.scope_of)
    return ParsedModule(module, ResolutionContext(resolver, resolver, resolver))


def parse_file(path: Path | str) -> ParsedModule:
    p = Path(path)
    return parse_source(p.read_text(encoding="utf-8"), str(p))


def check_source(source: str, path: str = "<string>", **kwargs: Any) -> list[Diagnostic]:
    """Parse and analyse *source*; keyword arguments go to :func:`inspect_module`."""
    parsed = parse_source(source, path)
    return inspect_module(parsed.module, parsed.resolution, **kwargs)


__all__ = ["ParsedModule", "check_source", "parse_file", "parse_source"]
