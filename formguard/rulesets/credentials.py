"""
User credential validator.

Imported unchanged by every environment; the password pattern is a Param
placeholder filled in by each environment's adapter.
"""

from formguard.core.models import Param
from formguard.core.predicates import PredicateRegistry
from formguard.core.rules import RuleSet, build_rule_set

USER_CREDENTIALS = "user_credentials"

USER_CREDENTIAL_RULES = [
    ("email", "present", "Email can't be empty"),
    ("email", "email", "Invalid email format"),
    ("password", "present", "Password can't be empty"),
    ("password", "matches", "Invalid password format", {"params": {"pattern": Param("password_pattern")}}),
]


def user_credentials_rule_set(registry: PredicateRegistry) -> RuleSet:
    """Build the user credential rule set against a registry."""
    return build_rule_set(USER_CREDENTIALS, USER_CREDENTIAL_RULES, registry)
