from importlib.metadata import version

from dclint.core._types import Severity
from dclint.core.config import BUILTIN_PROFILES, ConfigError, DclintConfig
from dclint.core.context import AnalysisContext
from dclint.core.diagnostic import DataclassLintError, Diagnostic, Span
from dclint.core.inspector import inspect_module
from dclint.core.rule import Rule
from dclint.frontend import check_source, parse_file, parse_source
from dclint.validators.base import BaseValidator, ValidatorRegistry

__version__ = version("dclint")


__all__ = [
    "BUILTIN_PROFILES",
    "AnalysisContext",
    "BaseValidator",
    "ConfigError",
    "DataclassLintError",
    "DclintConfig",
    "Diagnostic",
    "Rule",
    "Severity",
    "Span",
    "ValidatorRegistry",
    "__version__",
    "check_source",
    "inspect_module",
    "parse_file",
    "parse_source",
]
