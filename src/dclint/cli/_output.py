from __future__ import annotations

import json
import os
from collections import Counter
from typing import TYPE_CHECKING, Any

from dclint import __version__
from dclint.core._types import SEVERITY_LEVEL, Severity

if TYPE_CHECKING:
    from dclint.cli._runner import CheckReport, FileResult
    from dclint.core.diagnostic import Diagnostic, Span
    from dclint.core.rule import Rule

_SEVERITY_COLORS: dict[Severity, str] = {
    Severity.ERROR: "\033[31m",  # red
    Severity.ERROR_OR_WARNING: "\033[33m",  # yellow
    Severity.WEAK_WARNING: "\033[2m",  # dim
}
_RED = _SEVERITY_COLORS[Severity.ERROR]
_GREEN = "\033[32m"
_BOLD = "\033[1m"
_RESET = "\033[0m"

# Most severe first.
_SEVERITY_ORDER = sorted(Severity, key=SEVERITY_LEVEL.__getitem__, reverse=True)

_LAYER_TITLES: dict[str, str] = {
    "class": "Class declarations",
    "field": "Fields",
    "access": "Use sites",
    "call": "Helper calls",
    "namedtuple": "NamedTuple",
}


def _use_color(no_color_flag: bool) -> bool:
    if no_color_flag:
        return False
    return not os.environ.get("NO_COLOR", "")


def _c(text: str, code: str, *, color: bool) -> str:
    if not color:
        return text
    return f"{code}{text}{_RESET}"


def _visible(result: FileResult, min_severity: Severity) -> list[Diagnostic]:
    level = SEVERITY_LEVEL[min_severity]
    return [d for d in result.diagnostics if SEVERITY_LEVEL[d.severity] >= level]


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def format_text(
    report: CheckReport,
    *,
    min_severity: Severity = Severity.WEAK_WARNING,
    no_color: bool = False,
) -> str:
    """Render *report* grouped by file, one problem per line.

    Files without visible problems are omitted; the last line always
    summarises the whole run.
    """
    color = _use_color(no_color)
    lines: list[str] = []
    shown: list[Diagnostic] = []

    for result in report.results:
        if result.error:
            lines.append(_c(result.path, _BOLD, color=color))
            lines.append(f"  {_c('not checked', _RED, color=color)}: {result.error}")
            lines.append("")
            continue

        visible = _visible(result, min_severity)
        if not visible:
            continue
        shown.extend(visible)

        lines.append(_c(result.path, _BOLD, color=color))
        pos_w = max(len(str(d.span)) for d in visible)
        for d in visible:
            sev = _c(d.severity, _SEVERITY_COLORS[d.severity], color=color)
            lines.append(f"  {str(d.span).ljust(pos_w)}  {d.rule_id}  {sev}  {d.message}")
            if d.hint:
                lines.append(f"  {'':{pos_w}}  hint: {d.hint}")
        lines.append("")

    unchecked = sum(1 for r in report.results if r.error)
    lines.append(_footer(len(report.results), unchecked, shown, color=color))
    return "\n".join(lines)


def _footer(files: int, unchecked: int, diagnostics: list[Diagnostic], *, color: bool) -> str:
    head = f"Checked {_plural(files, 'file')}"
    if unchecked:
        head += f" ({unchecked} not checked)"
    if not diagnostics:
        return f"{head}: " + _c("no dataclass problems.", _GREEN, color=color)

    counts = Counter(d.severity for d in diagnostics)
    parts = ", ".join(
        _c(f"{counts[s]} {s}", _SEVERITY_COLORS[s], color=color)
        for s in _SEVERITY_ORDER
        if counts[s]
    )
    return f"{head}: {_plural(len(diagnostics), 'problem')} ({parts})."


def _position(span: Span) -> dict[str, Any]:
    # 1-based columns, like editors show them.
    return {
        "start": {"line": span.line, "column": span.column + 1},
        "end": {"line": span.end_line, "column": span.end_column + 1},
    }


def format_json(
    report: CheckReport,
    *,
    min_severity: Severity = Severity.WEAK_WARNING,
) -> str:
    files: list[dict[str, Any]] = []
    counts: Counter[Severity] = Counter()

    for result in report.results:
        visible = _visible(result, min_severity)
        counts.update(d.severity for d in visible)
        files.append(
            {
                "path": result.path,
                "error": result.error,
                "problems": [
                    {
                        "rule": d.rule_id,
                        "severity": str(d.severity),
                        "message": d.message,
                        "hint": d.hint,
                        **_position(d.span),
                    }
                    for d in visible
                ],
            }
        )

    data = {
        "dclint": __version__,
        "min_severity": str(min_severity),
        "files": files,
        "summary": {
            "files": len(report.results),
            "not_checked": sum(1 for r in report.results if r.error),
            "problems": sum(counts.values()),
            "by_severity": {str(s): counts[s] for s in _SEVERITY_ORDER},
        },
    }
    return json.dumps(data, indent=2)


def format_rules_text(
    rules: list[Rule],
    *,
    no_color: bool = False,
    total: int | None = None,
) -> str:
    """List *rules* under their layer titles, in catalogue order."""
    color = _use_color(no_color)
    id_w = max((len(r.id) for r in rules), default=0)
    sev_w = max((len(r.severity) for r in rules), default=0)

    header = f"{_plural(len(rules), 'dataclass rule')}"
    if total is not None and total != len(rules):
        header += f" (filtered from {total})"
    lines = [header]

    for layer, title in _LAYER_TITLES.items():
        group = [r for r in rules if r.layer == layer]
        if not group:
            continue
        lines.append("")
        lines.append(_c(title, _BOLD, color=color))
        for r in group:
            severity = _c(r.severity.ljust(sev_w), _SEVERITY_COLORS[r.severity], color=color)
            lines.append(f"  {r.id.ljust(id_w)}  {severity}  {r.summary}")

    return "\n".join(lines)


def format_rules_json(rules: list[Rule]) -> str:
    data = {
        "dclint": __version__,
        "rules": [
            {
                "id": r.id,
                "layer": r.layer,
                "severity": str(r.severity),
                "summary": r.summary,
                "hint": r.hint,
            }
            for r in rules
        ],
    }
    return json.dumps(data, indent=2)
