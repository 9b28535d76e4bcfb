"""
Predicate registry and built-in portable predicates.
"""

from .builtin import (
    ENVIRONMENT_BOUND_PREDICATES,
    build_portable_registry,
    register_portable_predicates,
)
from .registry import Predicate, PredicateEntry, PredicateFactory, PredicateRegistry

__all__ = [
    "Predicate",
    "PredicateFactory",
    "PredicateEntry",
    "PredicateRegistry",
    "ENVIRONMENT_BOUND_PREDICATES",
    "build_portable_registry",
    "register_portable_predicates",
]
