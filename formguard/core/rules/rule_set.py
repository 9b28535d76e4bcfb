"""
Rule set construction.

A rule set is authored as an ordered list of entries::

    (field_or_fields, predicate_name_or_callable, message, options)

``options`` is optional and may contain ``message`` (override), ``params``
(factory configuration, values may be Param placeholders), ``name`` and
``enabled``. A list of fields fans out into one Rule per field sharing the
message template; ``{field}`` in the template is replaced by the field key.

Construction checks every entry against a registry and fails fast, so typos
surface at startup rather than on the first request.
"""

import logging
from typing import Any, Callable, Iterable, NamedTuple, Sequence

from pydantic import BaseModel, Field

from formguard.core.errors import MalformedRule, UnknownPredicate
from formguard.core.models import Param, Rule
from formguard.core.predicates import Predicate, PredicateRegistry
from formguard.utils.validation import NameValidationError, validate_field_key, validate_identifier

logger = logging.getLogger(__name__)

OPTION_KEYS = {"message", "params", "name", "enabled"}


class RuleSet(BaseModel):
    """
    Ordered, immutable collection of rules bound to a stable name.

    The same RuleSet value is shared unmodified between environments.
    """

    name: str = Field(..., min_length=1)
    rules: tuple[Rule, ...] = ()

    class Config:
        frozen = True

    @property
    def field_names(self) -> list[str]:
        """Distinct field names in first-appearance order."""
        return list(dict.fromkeys(rule.field_name for rule in self.rules))

    @property
    def placeholders(self) -> set[str]:
        """Every Param name the rule set needs at bind time."""
        names: set[str] = set()
        for rule in self.rules:
            names |= rule.placeholders
        return names

    def predicate_names(self) -> set[str]:
        return {rule.predicate_name for rule in self.rules if rule.predicate_name}

    def __len__(self) -> int:
        return len(self.rules)


class BoundRule(NamedTuple):
    """A rule with its predicate resolved for one environment."""

    rule_name: str
    field_name: str
    predicate: Predicate
    message: str


class ResolvedRuleSet(NamedTuple):
    """A rule set ready for evaluation in one environment."""

    name: str
    rules: tuple[BoundRule, ...]
    environment: str | None = None


class RuleSetBuilder:
    """
    Programmatically build a rule set against a registry.

    Example:
        rule_set = RuleSetBuilder("user_credentials", registry) \\
            .add("email", "present", "Email can't be empty") \\
            .add("email", "email", "Invalid email format") \\
            .build()
    """

    def __init__(self, name: str, registry: PredicateRegistry):
        """
        Initialize an empty builder.

        Args:
            name: Rule set name
            registry: Registry used to check predicate names

        Raises:
            MalformedRule: If the name is not a valid identifier
        """
        try:
            self.name = validate_identifier(name, field_name="rule set name")
        except NameValidationError as e:
            raise MalformedRule(str(e)) from e
        self.registry = registry
        self.rules: list[Rule] = []

    def add(
        self,
        fields: str | Sequence[str],
        predicate: str | Callable[[Any], bool],
        message: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> "RuleSetBuilder":
        """
        Add one authoring entry (fanning out over several fields if given a list).

        Raises:
            MalformedRule: If a field key, message, option or inline predicate is invalid
            UnknownPredicate: If a predicate name is not known to the registry
        """
        options = dict(options or {})
        unknown_options = set(options) - OPTION_KEYS
        if unknown_options:
            raise MalformedRule(f"Unknown rule options: {sorted(unknown_options)}", rule_set=self.name)

        message = options.get("message", message)
        if not isinstance(message, str) or not message.strip():
            raise MalformedRule("Rule message must be a non-empty string", rule_set=self.name)

        params = options.get("params") or {}
        if not isinstance(params, dict):
            raise MalformedRule(f"Rule params must be a mapping, got {type(params).__name__}", rule_set=self.name)

        enabled = options.get("enabled", True)
        if not isinstance(enabled, bool):
            raise MalformedRule(f"Rule 'enabled' must be true or false, got {enabled!r}", rule_set=self.name)

        name = options.get("name")
        if name is not None:
            try:
                name = validate_identifier(name, field_name="rule name")
            except NameValidationError as e:
                raise MalformedRule(str(e), rule_set=self.name) from e

        field_list = self._field_list(fields)
        self._check_predicate(predicate, params)

        if not enabled:
            logger.debug("Skipping disabled rule", extra={"rule_set": self.name, "predicate": str(predicate)})
            return self

        for field_name in field_list:
            if name:
                rule_name = name if len(field_list) == 1 else f"{name}_{field_name}"
            else:
                rule_name = f"{field_name}_{self._predicate_label(predicate)}_{len(self.rules)}"
            self.rules.append(Rule(
                rule_name=rule_name,
                field_name=field_name,
                predicate=predicate,
                params=params,
                message=message.replace("{field}", field_name),
            ))
        return self

    def extend(self, entries: Iterable[Sequence[Any]]) -> "RuleSetBuilder":
        """Add many authoring entries in order."""
        for entry in entries:
            if not isinstance(entry, (tuple, list)) or not 2 <= len(entry) <= 4:
                raise MalformedRule(
                    f"Rule entry must be (fields, predicate, message[, options]), got {entry!r}",
                    rule_set=self.name,
                )
            self.add(*entry)
        return self

    def _field_list(self, fields: Any) -> list[str]:
        if isinstance(fields, str) or fields is None:
            fields = [fields]
        fields = list(fields)
        if not fields:
            raise MalformedRule("Rule must name at least one field", rule_set=self.name)

        checked = []
        for field_name in fields:
            try:
                checked.append(validate_field_key(field_name))
            except NameValidationError as e:
                raise MalformedRule(str(e), rule_set=self.name, field_name=field_name) from e
        return checked

    def _check_predicate(self, predicate: Any, params: dict[str, Any]) -> None:
        if callable(predicate):
            if params:
                raise MalformedRule("Inline predicates take no params", rule_set=self.name)
            return

        if not isinstance(predicate, str) or not predicate:
            raise MalformedRule(
                f"Predicate must be a registered name or a callable, got {type(predicate).__name__}",
                rule_set=self.name,
            )

        if not self.registry.is_known(predicate):
            raise UnknownPredicate(predicate, rule_set=self.name)

        # Portable predicates with fully literal params can be checked now
        if self.registry.scope_of(predicate) == "portable":
            if any(isinstance(value, Param) for value in params.values()):
                if not self.registry.is_factory(predicate):
                    raise MalformedRule(f"Predicate '{predicate}' takes no parameters", rule_set=self.name)
                return
            try:
                self.registry.resolve(predicate, params)
            except MalformedRule as e:
                raise MalformedRule(e.message, rule_set=self.name) from e

    @staticmethod
    def _predicate_label(predicate: Any) -> str:
        if isinstance(predicate, str):
            return predicate
        return getattr(predicate, "__name__", "inline").strip("<>") or "inline"

    def build(self) -> RuleSet:
        """Build and return the immutable rule set."""
        rule_set = RuleSet(name=self.name, rules=tuple(self.rules))
        logger.debug("Built rule set", extra={"rule_set": self.name, "rules": len(rule_set)})
        return rule_set


def build_rule_set(
    name: str,
    entries: Iterable[Sequence[Any]],
    registry: PredicateRegistry,
) -> RuleSet:
    """
    Build a rule set from authoring entries.

    Args:
        name: Rule set name
        entries: Ordered (fields, predicate, message[, options]) entries
        registry: Registry used to check predicate names

    Returns:
        The immutable RuleSet

    Raises:
        MalformedRule: If any entry is malformed
        UnknownPredicate: If any predicate name is unknown
    """
    return RuleSetBuilder(name, registry).extend(entries).build()
