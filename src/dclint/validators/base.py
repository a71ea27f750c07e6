"""Base validator interface and registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dclint.core.context import AnalysisContext
    from dclint.core.nodes import Attribute, BinaryExpr, Call, ClassDef


class BaseValidator:
    """Base class for all dataclass validators.

    Subclasses override one or more methods to check the node shapes they
    care about.  Each method receives the AnalysisContext which answers
    type queries and collects diagnostics.
    """

    def validate_class(self, ctx: AnalysisContext, node: ClassDef) -> None:
        """Validate a class declaration. Called once per class."""

    def validate_target(self, ctx: AnalysisContext, node: Attribute) -> None:
        """Validate an attribute assignment target (``obj.attr = ...``)."""

    def validate_reference(self, ctx: AnalysisContext, node: Attribute) -> None:
        """Validate a qualified attribute read (``obj.attr``)."""

    def validate_binary(self, ctx: AnalysisContext, node: BinaryExpr) -> None:
        """Validate a single comparison ``left <op> right``."""

    def validate_call(self, ctx: AnalysisContext, node: Call) -> None:
        """Validate a call expression."""


class ValidatorRegistry:
    """Ordered collection of validators applied to every visited node."""

    def __init__(self) -> None:
        self._validators: list[BaseValidator] = []

    def register(self, validator: BaseValidator) -> None:
        self._validators.append(validator)

    def get_validators(self) -> list[BaseValidator]:
        return list(self._validators)


def create_default_registry() -> ValidatorRegistry:
    """Create a registry with all built-in validators."""
    from dclint.validators.access import AccessValidator
    from dclint.validators.call_site import CallSiteValidator
    from dclint.validators.class_ import ClassValidator
    from dclint.validators.namedtuple import NamedTupleValidator

    registry = ValidatorRegistry()

    # Declarations
    registry.register(ClassValidator())
    registry.register(NamedTupleValidator())

    # Use sites
    registry.register(AccessValidator())
    registry.register(CallSiteValidator())

    return registry
