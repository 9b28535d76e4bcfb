"""
Server-side environment adapter.

Parameters come straight from the shared ValidationSettings.
"""

from typing import Any, Mapping

from formguard.config.settings import ValidationSettings
from formguard.core.predicates import Predicate, PredicateFactory

from .base_adapter import EnvironmentAdapter


class ServerAdapter(EnvironmentAdapter):
    """Adapter for the server process."""

    environment = "server"

    def __init__(
        self,
        settings: ValidationSettings | None = None,
        environment_predicates: Mapping[str, Predicate] | None = None,
        environment_factories: Mapping[str, PredicateFactory] | None = None,
    ):
        super().__init__(environment_predicates, environment_factories)
        self.settings = settings or ValidationSettings()

    def parameters(self) -> dict[str, Any]:
        return self.settings.parameters()
