"""
Rule model: one field + predicate + message.
"""

from typing import Any, Callable

from pydantic import BaseModel, Field


class Param:
    """
    Placeholder for a rule parameter supplied by the environment adapter.

    Example:
        ("password", "matches", "Invalid password format",
         {"params": {"pattern": Param("password_pattern")}})
    """

    __slots__ = ("name",)

    def __init__(self, name: str):
        if not name or not isinstance(name, str):
            raise ValueError("Param name must be a non-empty string")
        self.name = name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Param) and other.name == self.name

    def __hash__(self) -> int:
        return hash((Param, self.name))

    def __repr__(self) -> str:
        return f"Param({self.name!r})"


class Rule(BaseModel):
    """
    A single declarative validation rule.

    Attributes:
        rule_name: Human-readable name ("email_present_0")
        field_name: Which field of the input record this rule inspects
        predicate: Registered predicate name, or an inline callable
        params: Factory configuration; values may be Param placeholders
        message: Message emitted when the predicate returns False
        enabled: Whether the rule is active
    """

    rule_name: str = Field(..., min_length=1)
    field_name: str = Field(..., min_length=1)
    predicate: str | Callable[[Any], bool]
    params: dict[str, Any] = Field(default_factory=dict)
    message: str = Field(..., min_length=1)
    enabled: bool = True

    class Config:
        frozen = True
        arbitrary_types_allowed = True
        json_schema_extra = {
            "example": {
                "rule_name": "password_matches_3",
                "field_name": "password",
                "predicate": "matches",
                "params": {"pattern": "^(?=.*\\d).{4,8}$"},
                "message": "Invalid password format",
                "enabled": True,
            }
        }

    @property
    def predicate_name(self) -> str | None:
        """Registered name, or None for inline predicates."""
        return self.predicate if isinstance(self.predicate, str) else None

    @property
    def placeholders(self) -> set[str]:
        """Names of Param placeholders this rule needs at bind time."""
        return {value.name for value in self.params.values() if isinstance(value, Param)}
