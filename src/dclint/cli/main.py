"""Click commands: ``dclint check`` and ``dclint rules``."""

from __future__ import annotations

import dataclasses
import sys
from collections.abc import Callable
from typing import Any

import click

from dclint import __version__
from dclint.cli._output import (
    format_json,
    format_rules_json,
    format_rules_text,
    format_text,
)
from dclint.cli._runner import run_check
from dclint.core._types import Severity
from dclint.core.config import BUILTIN_PROFILES, ConfigError, DclintConfig, load_config
from dclint.rules import ALL_RULES

_SEVERITY_CHOICES = [str(s) for s in Severity]
_LAYER_CHOICES = sorted({r.layer for r in ALL_RULES})

type _Decorator = Callable[[Callable[..., Any]], Callable[..., Any]]

_format_option: _Decorator = click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
_no_color_option: _Decorator = click.option(
    "--no-color", is_flag=True, envvar="NO_COLOR", help="Disable ANSI colors."
)


def _split_rule_ids(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> set[str] | None:
    ids = {part.strip() for part in (value or "").split(",")}
    ids.discard("")
    return ids or None


def _effective_config(config_path: str | None, profile: str | None) -> DclintConfig:
    """Config file settings, with ``--profile`` replacing its severity and rule filters.

    Rule exclusions and path excludes from the file survive a profile.
    """
    config = load_config(config_path)
    if profile is None:
        return config
    base = BUILTIN_PROFILES[profile]
    return dataclasses.replace(
        config,
        min_severity=base.min_severity,
        include_rules=base.include_rules,
        categories=base.categories,
        exclude_rules=base.exclude_rules | config.exclude_rules,
    )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", message="dclint %(version)s")
def cli() -> None:
    """Find dataclass declarations and uses that break at runtime."""


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--strict", is_flag=True, help="Exit 1 if any problem is reported.")
@_format_option
@click.option(
    "--exclude-rules",
    callback=_split_rule_ids,
    help="Comma-separated rule IDs or globs to skip, e.g. 'DC-203,NT-*'.",
)
@click.option(
    "--min-severity",
    type=click.Choice(_SEVERITY_CHOICES),
    default=str(Severity.WEAK_WARNING),
    help="Hide problems below this severity.",
)
@_no_color_option
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Read settings from this .dclint.toml or pyproject.toml.",
)
@click.option(
    "--profile",
    type=click.Choice(list(BUILTIN_PROFILES)),
    help="Severity profile; overrides the config file's profile.",
)
def check(
    paths: tuple[str, ...],
    strict: bool,
    fmt: str,
    exclude_rules: set[str] | None,
    min_severity: str,
    no_color: bool,
    config_path: str | None,
    profile: str | None,
) -> None:
    """Check Python files, or every *.py file under the given directories."""
    try:
        config = _effective_config(config_path, profile)
    except ConfigError as exc:
        click.echo(f"Error: invalid config: {exc}", err=True)
        sys.exit(2)

    severity = Severity(min_severity)
    report = run_check(paths, config=config, exclude_rules=exclude_rules)

    if fmt == "json":
        click.echo(format_json(report, min_severity=severity))
    else:
        click.echo(format_text(report, min_severity=severity, no_color=no_color))

    if strict and report.filtered(severity):
        sys.exit(1)


@cli.command()
@_format_option
@_no_color_option
@click.option("--layer", type=click.Choice(_LAYER_CHOICES), help="Only rules of this layer.")
@click.option(
    "--severity",
    "sev",
    type=click.Choice(_SEVERITY_CHOICES),
    help="Only rules of this severity.",
)
def rules(fmt: str, no_color: bool, layer: str | None, sev: str | None) -> None:
    """Show the rule catalogue."""
    selected = [
        r
        for r in ALL_RULES
        if (layer is None or r.layer == layer) and (sev is None or r.severity == sev)
    ]

    if fmt == "json":
        click.echo(format_rules_json(selected))
    else:
        total = len(ALL_RULES) if len(selected) != len(ALL_RULES) else None
        click.echo(format_rules_text(selected, no_color=no_color, total=total))
