from __future__ import annotations

import dataclasses
import fnmatch
import functools
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dclint.core._types import SEVERITY_LEVEL, Severity

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dclint.core.rule import Rule

CONFIG_FILENAME = ".dclint.toml"
PYPROJECT_FILENAME = "pyproject.toml"


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


@dataclass(frozen=True, slots=True)
class _RulePatterns:
    """Rule IDs (``"DC-201"``) and globs (``"DC-2*"``) compiled for matching."""

    exact: frozenset[str] = frozenset()
    globs: tuple[re.Pattern[str], ...] = ()

    @classmethod
    def compile(cls, patterns: Iterable[str]) -> _RulePatterns:
        exact: set[str] = set()
        globs: list[re.Pattern[str]] = []
        for p in patterns:
            if any(c in p for c in "*?["):
                globs.append(re.compile(fnmatch.translate(p)))
            else:
                exact.add(p)
        return cls(frozenset(exact), tuple(globs))

    def __bool__(self) -> bool:
        return bool(self.exact or self.globs)

    def matches(self, rule_id: str) -> bool:
        return rule_id in self.exact or any(g.match(rule_id) for g in self.globs)


@dataclass(frozen=True)
class DclintConfig:
    """Which rules run and which files are skipped.

    Loaded by :func:`load_config` from ``.dclint.toml`` or from the
    ``[tool.dclint]`` table of ``pyproject.toml``::

        [tool.dclint]
        profile = "recommended"
        exclude_rules = ["DC-203"]
        categories = ["class", "field"]
        exclude = ["tests/fixtures/*"]

    """

    min_severity: Severity = Severity.WEAK_WARNING
    """Rules below this severity never report."""

    include_rules: frozenset[str] = field(default_factory=frozenset)
    """If non-empty, only these rule IDs or globs run."""

    exclude_rules: frozenset[str] = field(default_factory=frozenset)
    """Rule IDs or globs that never run; wins over ``include_rules``."""

    categories: frozenset[str] = field(default_factory=frozenset)
    """Rule layers to keep (``class``, ``field``, ``access``, ``call``,
    ``namedtuple``). Empty keeps every layer."""

    exclude: tuple[str, ...] = ()
    """Glob patterns of files the ``check`` command skips."""

    _include: _RulePatterns = field(init=False, compare=False, repr=False)
    _exclude: _RulePatterns = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_include", _RulePatterns.compile(self.include_rules))
        object.__setattr__(self, "_exclude", _RulePatterns.compile(self.exclude_rules))

    # One config lives for a whole run, so the cache stays small.
    @functools.cache  # noqa: B019
    def allows(self, rule: Rule) -> bool:
        """Return ``True`` if *rule* should report under this config.

        Checked in order: severity, layer, ``include_rules``,
        ``exclude_rules``.
        """
        if SEVERITY_LEVEL[rule.severity] < SEVERITY_LEVEL[self.min_severity]:
            return False
        if self.categories and rule.layer not in self.categories:
            return False
        if self._include and not self._include.matches(rule.id):
            return False
        return not self._exclude.matches(rule.id)

    def excludes_path(self, path: Path | str) -> bool:
        """Return ``True`` if *path* matches one of the ``exclude`` globs."""
        posix = Path(path).as_posix()
        return any(fnmatch.fnmatch(posix, p) for p in self.exclude)


BUILTIN_PROFILES: dict[str, DclintConfig] = {
    "strict": DclintConfig(),
    "recommended": DclintConfig(min_severity=Severity.ERROR_OR_WARNING),
    "minimal": DclintConfig(min_severity=Severity.ERROR),
}


def load_config(path: Path | str | None = None) -> DclintConfig:
    """Build a :class:`DclintConfig` from a TOML file.

    With no *path*, the nearest ``.dclint.toml`` or ``pyproject.toml`` at
    or above the current directory is used.  A ``pyproject.toml`` without
    a ``[tool.dclint]`` table still ends the search.  A missing explicit
    *path* gives the defaults.

    Raises:
        :class:`ConfigError`: On invalid TOML, an unknown profile or an
            unknown severity.

    """
    if path is None:
        found = _find_config_file(Path.cwd())
        data = _read_settings(found) if found is not None else {}
    else:
        p = Path(path)
        data = _read_settings(p) if p.exists() else {}
    return _parse_config(data)


def _find_config_file(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        for name in (CONFIG_FILENAME, PYPROJECT_FILENAME):
            candidate = directory / name
            if candidate.exists():
                return candidate
    return None


def _read_settings(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            raw: dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    if path.name == PYPROJECT_FILENAME:
        section: dict[str, Any] = raw.get("tool", {}).get("dclint", {})
        return section
    return raw


def _string_list(data: dict[str, Any], key: str) -> list[str] | None:
    value = data.get(key)
    return [str(v) for v in value] if isinstance(value, list) else None


def _parse_config(data: dict[str, Any]) -> DclintConfig:
    """Turn the settings table into a config.

    ``profile`` picks the starting point from :data:`BUILTIN_PROFILES`;
    any other key overrides it.  Non-list values for list settings are
    ignored.
    """
    profile = data.get("profile")
    base = DclintConfig() if profile is None else BUILTIN_PROFILES.get(str(profile))
    if base is None:
        known = ", ".join(f'"{p}"' for p in BUILTIN_PROFILES)
        raise ConfigError(f"Unknown profile {profile!r}. Known profiles: {known}")

    overrides: dict[str, Any] = {}
    if (severity := data.get("min_severity")) is not None:
        try:
            overrides["min_severity"] = Severity(severity)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    for key in ("include_rules", "exclude_rules", "categories"):
        if (values := _string_list(data, key)) is not None:
            overrides[key] = frozenset(values)
    if (globs := _string_list(data, "exclude")) is not None:
        overrides["exclude"] = tuple(globs)

    return dataclasses.replace(base, **overrides)
