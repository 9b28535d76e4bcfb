"""
Wiring errors raised while building registries, rule sets and bindings.

Validation failures are never raised; they are returned as data in a
ValidationResult.
"""


class FormGuardError(Exception):
    """Base class for all formguard wiring errors."""


class MalformedRule(FormGuardError):
    """Raised when a rule set entry cannot be turned into a usable Rule."""

    def __init__(self, message: str, rule_set: str | None = None, field_name: str | None = None):
        self.rule_set = rule_set
        self.field_name = field_name
        self.message = message
        prefix = f"[{rule_set}] " if rule_set else ""
        super().__init__(f"{prefix}{message}")


class UnknownPredicate(MalformedRule):
    """Raised when a predicate name is not known to the registry."""

    def __init__(self, name: str, rule_set: str | None = None):
        self.name = name
        super().__init__(f"Unknown predicate: {name}", rule_set=rule_set)


class UnsupportedPredicate(FormGuardError):
    """Raised when an environment-bound predicate has no local implementation."""

    def __init__(self, name: str, environment: str | None = None):
        self.name = name
        self.environment = environment
        where = f" in environment '{environment}'" if environment else ""
        super().__init__(f"Predicate '{name}' is environment-bound and not supported{where}")


class RegistryFrozen(FormGuardError):
    """Raised when registering into a registry after initialization finished."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot register '{name}': registry is frozen")


class PredicateError(FormGuardError):
    """Raised when a predicate raises instead of returning a boolean."""

    def __init__(self, rule_name: str, field_name: str, cause: Exception):
        self.rule_name = rule_name
        self.field_name = field_name
        self.cause = cause
        super().__init__(f"[{rule_name}] {field_name}: predicate raised {type(cause).__name__}: {cause}")
