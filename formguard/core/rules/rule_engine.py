"""
Validation engine.

Evaluates a resolved rule set against an input record and collects the
failure messages per field. Evaluation is pure: the record and the rule set
are only read, and no state is kept between calls, so one engine may serve
any number of threads.
"""

import logging
from typing import Any, Mapping

from formguard.core.errors import PredicateError
from formguard.core.models import ValidationResult

from .rule_set import ResolvedRuleSet

logger = logging.getLogger(__name__)

# Value handed to predicates for absent (or None) fields
EMPTY = ""


def validate(rule_set: ResolvedRuleSet, record: Mapping[str, Any]) -> ValidationResult:
    """
    Validate a record against every rule of a resolved rule set.

    Every rule runs, in declared order; a failing rule never skips later
    rules for the same or other fields. Each failing rule appends its message
    to its field's list.

    Args:
        rule_set: Rule set bound by an environment adapter
        record: Field name -> raw value

    Returns:
        ValidationResult whose ``errors`` is empty when the record is valid

    Raises:
        PredicateError: If a predicate raises instead of returning a boolean
        TypeError: If given an unbound RuleSet instead of a ResolvedRuleSet
    """
    if not isinstance(rule_set, ResolvedRuleSet):
        raise TypeError(
            f"validate() needs a ResolvedRuleSet, got {type(rule_set).__name__}; "
            "bind the rule set with an EnvironmentAdapter first"
        )

    errors: dict[str, list[str]] = {}

    for rule_name, field_name, predicate, message in rule_set.rules:
        value = record.get(field_name)
        if value is None:
            value = EMPTY

        try:
            ok = predicate(value)
        except Exception as e:
            raise PredicateError(rule_name, field_name, e) from e

        if not ok:
            errors.setdefault(field_name, []).append(message)

    return ValidationResult(rule_set=rule_set.name, errors=errors)


class ValidationEngine:
    """
    Applies one resolved rule set to records.

    Thin stateless wrapper over ``validate`` that adds batch validation,
    logging and a rule summary.
    """

    def __init__(self, rule_set: ResolvedRuleSet):
        """
        Initialize the engine.

        Args:
            rule_set: Rule set bound by an environment adapter
        """
        self.rule_set = rule_set

    def validate_record(self, record: Mapping[str, Any]) -> ValidationResult:
        """
        Validate a single record.

        Args:
            record: Field name -> raw value

        Returns:
            ValidationResult for the record
        """
        result = validate(self.rule_set, record)

        if not result.passed:
            logger.debug(
                "Record failed validation",
                extra={
                    "rule_set": self.rule_set.name,
                    "environment": self.rule_set.environment,
                    "failed_fields": result.failed_fields,
                },
            )

        return result

    def validate_batch(self, records: list[Mapping[str, Any]]) -> list[ValidationResult]:
        """
        Validate a batch of records.

        Args:
            records: List of input records

        Returns:
            List of ValidationResult objects, one per record
        """
        return [self.validate_record(record) for record in records]

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of the bound rules.

        Returns:
            Dictionary with rule counts per field
        """
        return {
            "rule_set": self.rule_set.name,
            "environment": self.rule_set.environment,
            "total_rules": len(self.rule_set.rules),
            "rules_by_field": self._count_by_field(),
        }

    def _count_by_field(self) -> dict[str, int]:
        """Count rules by field."""
        counts: dict[str, int] = {}
        for rule in self.rule_set.rules:
            counts[rule.field_name] = counts.get(rule.field_name, 0) + 1
        return counts
