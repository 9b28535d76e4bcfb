"""
Environment adapter interface.

An adapter is the only place environment-specific code lives. It registers
the environment-bound predicates its runtime can provide, supplies the
environment-sourced rule parameters, and binds shared rule sets into
resolved rule sets the engine can evaluate.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping

from formguard.core.errors import MalformedRule, UnknownPredicate
from formguard.core.models import Param, Rule
from formguard.core.predicates import (
    Predicate,
    PredicateFactory,
    PredicateRegistry,
    build_portable_registry,
)
from formguard.core.rules import BoundRule, ResolvedRuleSet, RuleSet
from formguard.observability.logger import log_operation

logger = logging.getLogger(__name__)


class EnvironmentAdapter(ABC):
    """
    Abstract base class for environment adapters.

    Subclasses provide ``environment`` and ``parameters()``. Environment-bound
    predicates are passed in by the host application because their
    implementations depend on platform-only capabilities.
    """

    environment: str = "unknown"

    def __init__(
        self,
        environment_predicates: Mapping[str, Predicate] | None = None,
        environment_factories: Mapping[str, PredicateFactory] | None = None,
    ):
        """
        Initialize adapter.

        Args:
            environment_predicates: Name -> predicate this environment implements
            environment_factories: Name -> predicate factory this environment implements
        """
        self.environment_predicates = dict(environment_predicates or {})
        self.environment_factories = dict(environment_factories or {})
        self._registry: PredicateRegistry | None = None

    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        """
        Return the environment-sourced rule parameters.

        Returns:
            Param name -> value
        """
        pass

    @property
    def registry(self) -> PredicateRegistry:
        """The installed registry, installing a portable one on first use."""
        if self._registry is None:
            self.install()
        return self._registry

    def install(self, registry: PredicateRegistry | None = None) -> PredicateRegistry:
        """
        Register environment-bound predicates and freeze the registry.

        This is the initialization barrier: it must complete before any
        rule set bound by this adapter is validated.

        Args:
            registry: Registry holding the portable predicates (a fresh one if None)

        Returns:
            The frozen registry
        """
        registry = registry or build_portable_registry(self.environment)

        for name, predicate in self.environment_predicates.items():
            registry.register(name, predicate, scope="environment")
        for name, factory in self.environment_factories.items():
            registry.register_factory(name, factory, scope="environment")

        registry.freeze()
        self._registry = registry

        logger.info(
            "Installed predicate registry",
            extra={
                "environment": self.environment,
                "portable": len(registry.portable_names()),
                "environment_bound": sorted(self.environment_predicates) + sorted(self.environment_factories),
            },
        )
        return registry

    def bind(self, rule_set: RuleSet) -> ResolvedRuleSet:
        """
        Substitute environment parameters and resolve every predicate.

        Args:
            rule_set: Shared rule set

        Returns:
            ResolvedRuleSet for this environment

        Raises:
            MalformedRule: If a Param placeholder has no value here
            UnsupportedPredicate: If an environment-bound predicate is not implemented here
        """
        with log_operation("Binding rule set", logger=logger, rule_set=rule_set.name, environment=self.environment):
            parameters = self.parameters()
            missing = rule_set.placeholders - set(parameters)
            if missing:
                raise MalformedRule(
                    f"Environment '{self.environment}' provides no value for parameters {sorted(missing)}",
                    rule_set=rule_set.name,
                )

            bound = tuple(self._bind_rule(rule_set.name, rule, parameters) for rule in rule_set.rules)
            return ResolvedRuleSet(name=rule_set.name, rules=bound, environment=self.environment)

    def _bind_rule(self, rule_set_name: str, rule: Rule, parameters: dict[str, Any]) -> BoundRule:
        if callable(rule.predicate):
            predicate = rule.predicate
        else:
            params = {
                key: parameters[value.name] if isinstance(value, Param) else value
                for key, value in rule.params.items()
            }
            try:
                predicate = self.registry.resolve(rule.predicate, params)
            except UnknownPredicate:
                raise
            except MalformedRule as e:
                raise MalformedRule(e.message, rule_set=rule_set_name, field_name=rule.field_name) from e

        return BoundRule(
            rule_name=rule.rule_name,
            field_name=rule.field_name,
            predicate=predicate,
            message=rule.message,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(environment={self.environment})"
