"""
ValidationResult model representing the outcome of validating one record.
"""

from pydantic import BaseModel, Field, field_validator


class ValidationResult(BaseModel):
    """
    Per-field failure messages for one input record.

    Only fields that failed at least one rule appear in ``errors``, each with
    a non-empty list of messages in rule order. An empty ``errors`` mapping is
    the one and only "valid" signal.

    Attributes:
        rule_set: Name of the rule set that produced this result
        errors: Field name -> ordered failure messages
    """

    rule_set: str
    errors: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("errors")
    @classmethod
    def check_non_empty_messages(cls, v):
        """Validate that every listed field carries at least one message."""
        for field_name, messages in v.items():
            if not messages:
                raise ValueError(f"field '{field_name}' is listed without messages")
        return v

    @property
    def passed(self) -> bool:
        """True when no rule failed."""
        return not self.errors

    @property
    def failed_fields(self) -> list[str]:
        return list(self.errors)

    def messages_for(self, field_name: str) -> list[str]:
        """Messages for one field; empty list if it passed."""
        return list(self.errors.get(field_name, []))

    def __bool__(self) -> bool:
        return self.passed

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "rule_set": "user_credentials",
                "errors": {
                    "email": ["Invalid email format"],
                    "password": ["Password can't be empty", "Invalid password format"],
                },
            }
        }
