"""
Environment adapters and cross-environment conformance checks.
"""

from .base_adapter import EnvironmentAdapter
from .client_adapter import DEFAULT_ATTRIBUTE_MAP, ClientAdapter, form_attributes_from_settings
from .conformance import ConformanceReport, Divergence, check_conformance, compare_portable_registries
from .server_adapter import ServerAdapter

__all__ = [
    "EnvironmentAdapter",
    "ServerAdapter",
    "ClientAdapter",
    "DEFAULT_ATTRIBUTE_MAP",
    "form_attributes_from_settings",
    "ConformanceReport",
    "Divergence",
    "check_conformance",
    "compare_portable_registries",
]
