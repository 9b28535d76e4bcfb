"""
Predicate registry.

Maps predicate names to plain predicates (value -> bool) and predicate
factories (**config -> predicate). Entries are either portable, meaning every
environment registers them identically, or environment-bound, meaning each
environment's adapter supplies its own implementation.

A registry is populated once during startup and then frozen. After
``freeze()`` it is read-only and may be shared across threads without
locking.
"""

import logging
import threading
from typing import Any, Callable, Literal

from pydantic import BaseModel

from formguard.core.errors import (
    MalformedRule,
    RegistryFrozen,
    UnknownPredicate,
    UnsupportedPredicate,
)
from formguard.utils.validation import NameValidationError, validate_identifier

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]
PredicateFactory = Callable[..., Predicate]
PredicateScope = Literal["portable", "environment"]


class PredicateEntry(BaseModel):
    """
    A single registry entry.

    Attributes:
        name: Registered predicate name
        target: The predicate or factory callable
        scope: "portable" or "environment"
        is_factory: Whether target must be called with config to get a predicate
    """

    name: str
    target: Callable[..., Any]
    scope: PredicateScope = "portable"
    is_factory: bool = False

    class Config:
        frozen = True
        arbitrary_types_allowed = True


class PredicateRegistry:
    """
    Named predicates and predicate factories for one environment.

    Example:
        registry = PredicateRegistry(environment="server")
        registry.register("present", lambda v: bool(str(v).strip()))
        registry.freeze()
        registry.resolve("present")("x")  # True
    """

    def __init__(self, environment: str | None = None):
        """
        Initialize an empty registry.

        Args:
            environment: Label of the runtime that owns this registry (for errors and logs)
        """
        self.environment = environment
        self._entries: dict[str, PredicateEntry] = {}
        self._declared: set[str] = set()
        self._frozen = False
        self._lock = threading.Lock()

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, name: str, predicate: Predicate, scope: PredicateScope = "portable") -> None:
        """Register a plain predicate under ``name``."""
        self._add(name, predicate, scope, is_factory=False)

    def register_factory(
        self,
        name: str,
        factory: PredicateFactory,
        scope: PredicateScope = "portable",
    ) -> None:
        """Register a predicate factory under ``name``."""
        self._add(name, factory, scope, is_factory=True)

    def declare_environment_bound(self, name: str) -> None:
        """
        Declare a name whose implementation each environment supplies.

        Rule sets may reference a declared name even in an environment that
        never registers it; resolving it there raises UnsupportedPredicate.
        """
        name = self._check_name(name)
        with self._lock:
            if self._frozen:
                raise RegistryFrozen(name)
            self._declared.add(name)

    def _add(self, name: str, target: Callable[..., Any], scope: PredicateScope, is_factory: bool) -> None:
        name = self._check_name(name)
        if not callable(target):
            raise TypeError(f"Predicate '{name}' must be callable, got {type(target).__name__}")
        if scope not in ("portable", "environment"):
            raise ValueError(f"Invalid scope '{scope}' for predicate '{name}'. Must be 'portable' or 'environment'")

        with self._lock:
            if self._frozen:
                raise RegistryFrozen(name)
            if name in self._entries:
                raise ValueError(f"Predicate '{name}' is already registered")
            if scope == "portable" and name in self._declared:
                raise ValueError(f"Predicate '{name}' is declared environment-bound and cannot be portable")

            self._entries[name] = PredicateEntry(name=name, target=target, scope=scope, is_factory=is_factory)
            if scope == "environment":
                self._declared.add(name)

        logger.debug(
            "Registered predicate",
            extra={"predicate": name, "scope": scope, "is_factory": is_factory, "environment": self.environment},
        )

    @staticmethod
    def _check_name(name: str) -> str:
        try:
            return validate_identifier(name, field_name="predicate name")
        except NameValidationError as e:
            raise ValueError(str(e)) from e

    def freeze(self) -> None:
        """End the initialization phase; further registration raises RegistryFrozen."""
        with self._lock:
            self._frozen = True
        logger.debug("Registry frozen", extra={"environment": self.environment, "predicates": len(self._entries)})

    def is_known(self, name: str) -> bool:
        """Whether ``name`` is registered or declared environment-bound."""
        return name in self._entries or name in self._declared

    def is_factory(self, name: str) -> bool:
        entry = self._entries.get(name)
        return bool(entry and entry.is_factory)

    def scope_of(self, name: str) -> PredicateScope:
        """
        Return the scope of a known name.

        Raises:
            UnknownPredicate: If the name is neither registered nor declared
        """
        entry = self._entries.get(name)
        if entry is not None:
            return entry.scope
        if name in self._declared:
            return "environment"
        raise UnknownPredicate(name)

    def resolve(self, name: str, params: dict[str, Any] | None = None) -> Predicate:
        """
        Resolve a name to a ready-to-call predicate.

        Args:
            name: Registered predicate name
            params: Factory configuration (factories only)

        Returns:
            A callable taking one value and returning bool

        Raises:
            UnknownPredicate: If the name is unknown
            UnsupportedPredicate: If the name is environment-bound and not implemented here
            MalformedRule: If params are given to a plain predicate or rejected by a factory
        """
        entry = self._entries.get(name)
        if entry is None:
            if name in self._declared:
                raise UnsupportedPredicate(name, self.environment)
            raise UnknownPredicate(name)

        if not entry.is_factory:
            if params:
                raise MalformedRule(f"Predicate '{name}' takes no parameters, got {sorted(params)}")
            return entry.target

        try:
            return entry.target(**(params or {}))
        except (TypeError, ValueError) as e:
            raise MalformedRule(f"Invalid parameters for predicate factory '{name}': {e}") from e

    def portable_names(self) -> set[str]:
        return {name for name, entry in self._entries.items() if entry.scope == "portable"}

    def describe(self) -> list[dict[str, Any]]:
        """
        Describe every known name.

        Returns:
            List of {"name", "scope", "kind", "available"} dicts sorted by name
        """
        rows = []
        for name in sorted(set(self._entries) | self._declared):
            entry = self._entries.get(name)
            rows.append({
                "name": name,
                "scope": entry.scope if entry else "environment",
                "kind": "factory" if entry and entry.is_factory else "predicate",
                "available": entry is not None,
            })
        return rows

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_known(name)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(environment={self.environment}, "
            f"predicates={len(self._entries)}, frozen={self._frozen})"
        )
