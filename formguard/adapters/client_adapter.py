"""
Client-side environment adapter.

On the client, rule parameters are read from the live form: the password
pattern is the ``pattern`` attribute of the password input, for example.
The form attributes themselves are rendered from the shared
ValidationSettings by ``form_attributes_from_settings`` so both environments
draw every parameter from one configuration value.
"""

from typing import Any, Mapping

from formguard.config.settings import ValidationSettings
from formguard.core.predicates import Predicate, PredicateFactory

from .base_adapter import EnvironmentAdapter

# Param name -> (form field, element attribute)
DEFAULT_ATTRIBUTE_MAP: dict[str, tuple[str, str]] = {
    "password_pattern": ("password", "pattern"),
    "email_pattern": ("email", "pattern"),
}


def form_attributes_from_settings(settings: ValidationSettings) -> dict[str, dict[str, str]]:
    """
    Build form element attributes from shared settings.

    Args:
        settings: Shared validation settings

    Returns:
        Form field -> {attribute: value}
    """
    attributes: dict[str, dict[str, str]] = {}
    for param_name, value in settings.parameters().items():
        field_name, attribute = DEFAULT_ATTRIBUTE_MAP[param_name]
        attributes.setdefault(field_name, {})[attribute] = value
    return attributes


class ClientAdapter(EnvironmentAdapter):
    """Adapter for the client process, reading parameters from form attributes."""

    environment = "client"

    def __init__(
        self,
        form_attributes: Mapping[str, Mapping[str, Any]],
        attribute_map: Mapping[str, tuple[str, str]] | None = None,
        environment_predicates: Mapping[str, Predicate] | None = None,
        environment_factories: Mapping[str, PredicateFactory] | None = None,
    ):
        """
        Initialize adapter.

        Args:
            form_attributes: Form field -> element attributes, as read from the live form
            attribute_map: Param name -> (form field, attribute); defaults to DEFAULT_ATTRIBUTE_MAP
            environment_predicates: Name -> predicate this environment implements
            environment_factories: Name -> predicate factory this environment implements
        """
        super().__init__(environment_predicates, environment_factories)
        self.form_attributes = form_attributes
        self.attribute_map = dict(attribute_map or DEFAULT_ATTRIBUTE_MAP)

    @classmethod
    def from_settings(cls, settings: ValidationSettings, **kwargs) -> "ClientAdapter":
        """Create an adapter over a form rendered from shared settings."""
        return cls(form_attributes_from_settings(settings), **kwargs)

    def parameters(self) -> dict[str, Any]:
        """Read every mapped attribute that is present on the form."""
        parameters = {}
        for param_name, (field_name, attribute) in self.attribute_map.items():
            value = self.form_attributes.get(field_name, {}).get(attribute)
            if value is not None and value != "":
                parameters[param_name] = value
        return parameters
