"""
Built-in portable predicates.

Every environment builds its registry with ``build_portable_registry()`` so
the portable entries are registered identically everywhere. Predicates accept
any value and never raise; the engine passes ``""`` for absent fields.
"""

import re
from decimal import Decimal, InvalidOperation
from re import Pattern
from typing import Any, Iterable

from .registry import Predicate, PredicateRegistry

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# Names every environment knows about but implements itself
ENVIRONMENT_BOUND_PREDICATES = (
    "email_domain_resolves",
)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _as_number(value: Any) -> Decimal | None:
    # bool is an int subclass but never a form number
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = Decimal(_as_text(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def present(value: Any) -> bool:
    """True when the value is not None and not a blank string."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def numeric(value: Any) -> bool:
    """True when the value is a finite number or a string that parses as one."""
    return _as_number(value) is not None


def integer(value: Any) -> bool:
    """True when the value is a whole number or a string that parses as one."""
    number = _as_number(value)
    return number is not None and number == number.to_integral_value()


def matches(pattern: str | Pattern, flags: int = 0) -> Predicate:
    """
    Build a predicate that full-matches a regular expression.

    Full-match semantics mirror the HTML ``pattern`` attribute, so the same
    pattern string behaves the same on the server and in the browser.

    Args:
        pattern: Regular expression (string or compiled Pattern)
        flags: Optional regex flags for string patterns

    Raises:
        ValueError: If the pattern is empty or does not compile
    """
    if isinstance(pattern, Pattern):
        compiled = pattern
    elif isinstance(pattern, str) and pattern:
        try:
            compiled = re.compile(pattern, flags)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}")
    else:
        raise ValueError(f"Pattern must be a non-empty string or compiled Pattern, got {type(pattern).__name__}")

    def predicate(value: Any) -> bool:
        return compiled.fullmatch(_as_text(value)) is not None

    predicate.pattern = compiled.pattern
    return predicate


def email(value: Any) -> bool:
    """True when the value looks like ``local@domain.tld``."""
    return _EMAIL(value)


def length(min: int | None = None, max: int | None = None) -> Predicate:
    """
    Build a predicate bounding the length of the text form of a value.

    Raises:
        ValueError: If neither bound is given, a bound is not an integer or the
            bounds are inverted
    """
    if min is None and max is None:
        raise ValueError("length requires at least one of: min, max")
    for bound in (min, max):
        if bound is not None and (isinstance(bound, bool) or not isinstance(bound, int)):
            raise ValueError(f"length bounds must be integers, got {bound!r}")
    if min is not None and max is not None and min > max:
        raise ValueError(f"length min {min} is greater than max {max}")

    def predicate(value: Any) -> bool:
        size = len(_as_text(value))
        if min is not None and size < min:
            return False
        if max is not None and size > max:
            return False
        return True

    return predicate


def between(min: float | None = None, max: float | None = None) -> Predicate:
    """
    Build a predicate checking a numeric value lies within inclusive bounds.

    Non-numeric values fail.

    Raises:
        ValueError: If neither bound is given or the bounds are inverted
    """
    if min is None and max is None:
        raise ValueError("between requires at least one of: min, max")
    low = _as_number(min) if min is not None else None
    high = _as_number(max) if max is not None else None
    if (min is not None and low is None) or (max is not None and high is None):
        raise ValueError(f"between bounds must be numeric, got min={min!r} max={max!r}")
    if low is not None and high is not None and low > high:
        raise ValueError(f"between min {min} is greater than max {max}")

    def predicate(value: Any) -> bool:
        number = _as_number(value)
        if number is None:
            return False
        if low is not None and number < low:
            return False
        if high is not None and number > high:
            return False
        return True

    return predicate


def one_of(choices: Iterable[Any]) -> Predicate:
    """
    Build a predicate accepting only the given choices (compared as text).

    Raises:
        ValueError: If choices is empty or a bare string
    """
    if isinstance(choices, str):
        raise ValueError("one_of choices must be a list, not a string")
    allowed = frozenset(_as_text(choice) for choice in choices)
    if not allowed:
        raise ValueError("one_of requires at least one choice")

    def predicate(value: Any) -> bool:
        return _as_text(value) in allowed

    return predicate


_EMAIL = matches(EMAIL_PATTERN)

PORTABLE_PREDICATES: dict[str, Predicate] = {
    "present": present,
    "email": email,
    "numeric": numeric,
    "integer": integer,
}

PORTABLE_FACTORIES = {
    "matches": matches,
    "length": length,
    "between": between,
    "one_of": one_of,
}


def register_portable_predicates(registry: PredicateRegistry) -> PredicateRegistry:
    """Register every built-in portable predicate and environment-bound declaration."""
    for name, predicate in PORTABLE_PREDICATES.items():
        registry.register(name, predicate)
    for name, factory in PORTABLE_FACTORIES.items():
        registry.register_factory(name, factory)
    for name in ENVIRONMENT_BOUND_PREDICATES:
        registry.declare_environment_bound(name)
    return registry


def build_portable_registry(environment: str | None = None) -> PredicateRegistry:
    """
    Create a registry holding the portable predicates.

    The registry is not frozen; the environment adapter adds its own
    environment-bound predicates and freezes it.
    """
    return register_portable_predicates(PredicateRegistry(environment=environment))
