"""
Cross-environment conformance checks.

A shared rule set must produce identical results in every environment.
These checks bind the rule set in each adapter, validate the same records
everywhere, and report every record on which the environments disagree.
"""

import logging
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, Field

from formguard.core.predicates import PredicateRegistry
from formguard.core.rules import RuleSet, ValidationEngine

from .base_adapter import EnvironmentAdapter

logger = logging.getLogger(__name__)


class Divergence(BaseModel):
    """
    One record on which environments produced different results.

    Attributes:
        record_index: Position of the record in the checked batch
        record: The input record
        errors_by_environment: Environment -> errors mapping it produced
    """

    record_index: int
    record: dict[str, Any]
    errors_by_environment: dict[str, dict[str, list[str]]]


class ConformanceReport(BaseModel):
    """
    Outcome of a conformance check.

    Attributes:
        rule_set: Name of the checked rule set
        environments: Environments compared
        records_checked: Number of records validated in each environment
        divergences: Records with differing results
    """

    rule_set: str
    environments: list[str]
    records_checked: int = 0
    divergences: list[Divergence] = Field(default_factory=list)

    @property
    def conformant(self) -> bool:
        return not self.divergences


def check_conformance(
    rule_set: RuleSet,
    adapters: Sequence[EnvironmentAdapter],
    records: Sequence[Mapping[str, Any]],
) -> ConformanceReport:
    """
    Validate every record in every environment and compare the results.

    Args:
        rule_set: Shared rule set
        adapters: At least two environment adapters
        records: Input records

    Returns:
        ConformanceReport listing every divergent record

    Raises:
        ValueError: If fewer than two adapters are given
    """
    if len(adapters) < 2:
        raise ValueError("check_conformance requires at least two adapters")

    engines = [(adapter.environment, ValidationEngine(adapter.bind(rule_set))) for adapter in adapters]
    report = ConformanceReport(
        rule_set=rule_set.name,
        environments=[environment for environment, _ in engines],
        records_checked=len(records),
    )

    for idx, record in enumerate(records):
        errors = {environment: engine.validate_record(record).errors for environment, engine in engines}
        first = next(iter(errors.values()))
        if any(other != first for other in errors.values()):
            report.divergences.append(Divergence(
                record_index=idx,
                record=dict(record),
                errors_by_environment=errors,
            ))

    if report.divergences:
        logger.warning(
            "Environments disagree on rule set results",
            extra={
                "rule_set": rule_set.name,
                "environments": report.environments,
                "divergent_records": len(report.divergences),
            },
        )
    else:
        logger.info(
            "Environments agree on rule set results",
            extra={"rule_set": rule_set.name, "environments": report.environments, "records": len(records)},
        )

    return report


def compare_portable_registries(first: PredicateRegistry, second: PredicateRegistry) -> dict[str, list[str]]:
    """
    Compare the portable predicate names of two registries.

    Returns:
        {"missing_in_first": [...], "missing_in_second": [...]}; both empty when aligned
    """
    first_names = first.portable_names()
    second_names = second.portable_names()
    return {
        "missing_in_first": sorted(second_names - first_names),
        "missing_in_second": sorted(first_names - second_names),
    }
