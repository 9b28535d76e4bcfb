"""
Core models for the validation engine.

Models use Pydantic for runtime validation and type safety.
"""

from .rule import Param, Rule
from .validation_result import ValidationResult

__all__ = [
    "Param",
    "Rule",
    "ValidationResult",
]
