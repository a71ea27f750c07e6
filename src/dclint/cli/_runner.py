from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from dclint.core._types import SEVERITY_LEVEL, Severity
from dclint.core.inspector import inspect_module
from dclint.frontend import parse_source

if TYPE_CHECKING:
    from dclint.core.config import DclintConfig
    from dclint.core.diagnostic import Diagnostic

logger = logging.getLogger("dclint")


@dataclass
class FileResult:
    path: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: str | None = None


@dataclass
class CheckReport:
    paths: tuple[str, ...] = ()
    results: list[FileResult] = field(default_factory=list)

    @property
    def all_diagnostics(self) -> list[Diagnostic]:
        dd: list[Diagnostic] = []
        for r in self.results:
            dd.extend(r.diagnostics)
        return dd

    def filtered(self, min_severity: Severity) -> list[Diagnostic]:
        level = SEVERITY_LEVEL[min_severity]
        return [d for d in self.all_diagnostics if SEVERITY_LEVEL[d.severity] >= level]


def discover_files(paths: tuple[str, ...], config: DclintConfig | None = None) -> list[Path]:
    """Expand *paths* into a sorted, de-duplicated list of ``.py`` files."""
    found: set[Path] = set()
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            found.update(f for f in p.rglob("*.py") if f.is_file())
        elif p.suffix == ".py" or p.is_file():
            found.add(p)
    files = sorted(found)
    if config is not None:
        files = [f for f in files if not config.excludes_path(f)]
    return files


def check_file(
    path: Path,
    *,
    config: DclintConfig | None = None,
    exclude_rules: set[str] | None = None,
) -> FileResult:
    result = FileResult(path=str(path))
    try:
        source = path.read_text(encoding="utf-8")
        parsed = parse_source(source, str(path))
    except (OSError, UnicodeDecodeError) as exc:
        result.error = f"cannot read file: {exc}"
        logger.debug("Skipping %s: %s", path, exc)
        return result
    except SyntaxError as exc:
        result.error = f"syntax error: {exc.msg} (line {exc.lineno})"
        logger.debug("Skipping %s: %s", path, exc)
        return result

    result.diagnostics = inspect_module(
        parsed.module,
        parsed.resolution,
        config=config,
        exclude_rules=exclude_rules,
    )
    return result


def run_check(
    paths: tuple[str, ...],
    *,
    config: DclintConfig | None = None,
    exclude_rules: set[str] | None = None,
) -> CheckReport:
    """Analyse every Python file under *paths* and return a report."""
    report = CheckReport(paths=paths)
    for f in discover_files(paths, config):
        report.results.append(check_file(f, config=config, exclude_rules=exclude_rules))
    return report
