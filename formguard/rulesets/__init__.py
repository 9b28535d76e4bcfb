"""
Rule sets shared between environments.
"""

from .credentials import USER_CREDENTIAL_RULES, USER_CREDENTIALS, user_credentials_rule_set

__all__ = [
    "USER_CREDENTIALS",
    "USER_CREDENTIAL_RULES",
    "user_credentials_rule_set",
]
