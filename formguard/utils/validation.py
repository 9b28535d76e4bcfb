"""
Name validation utilities for registries and rule sets.

Predicate names and rule set names end up in YAML files, log records and
CLI arguments, so they are restricted to a small identifier alphabet.
Field keys are looser: any non-blank string is accepted.
"""

import re
from typing import Any


class NameValidationError(ValueError):
    """Raised when a name or key fails validation."""
    pass


_IDENTIFIER = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_\-\.]*$')


def validate_identifier(name: Any, field_name: str = "name", max_length: int = 128) -> str:
    """
    Validate a predicate or rule set identifier.

    Identifiers must start with a letter or underscore and contain only
    alphanumeric characters, underscores, hyphens and dots.

    Args:
        name: The identifier to validate
        field_name: Name of the argument (for error messages)
        max_length: Maximum allowed length

    Returns:
        The validated identifier (stripped of whitespace)

    Raises:
        NameValidationError: If validation fails

    Examples:
        >>> validate_identifier("present")
        'present'
        >>> validate_identifier("user_credentials")
        'user_credentials'
        >>> validate_identifier("bad name!")  # doctest: +SKIP
        NameValidationError: name contains invalid characters
    """
    if not name or not isinstance(name, str):
        raise NameValidationError(f"{field_name} must be a non-empty string")

    name = name.strip()

    if not name:
        raise NameValidationError(f"{field_name} cannot be empty or whitespace-only")

    if not _IDENTIFIER.match(name):
        raise NameValidationError(
            f"{field_name} '{name}' contains invalid characters. "
            "Identifiers must start with a letter or underscore and contain only "
            "alphanumeric characters, underscores, hyphens and dots."
        )

    if len(name) > max_length:
        raise NameValidationError(f"{field_name} exceeds maximum length of {max_length} characters")

    return name


def validate_field_key(field_key: Any, field_name: str = "field") -> str:
    """
    Validate a record field key.

    Args:
        field_key: The field key to validate
        field_name: Name of the argument (for error messages)

    Returns:
        The field key, unchanged

    Raises:
        NameValidationError: If the key is missing, not a string or blank

    Examples:
        >>> validate_field_key("email")
        'email'
        >>> validate_field_key("")  # doctest: +SKIP
        NameValidationError: field must be a non-empty string
    """
    if not isinstance(field_key, str) or not field_key:
        raise NameValidationError(f"{field_name} must be a non-empty string")

    if not field_key.strip():
        raise NameValidationError(f"{field_name} cannot be whitespace-only")

    return field_key
