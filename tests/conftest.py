"""
Pytest configuration and fixtures for formguard tests

This module provides shared fixtures for unit and integration tests.
"""
import os
from pathlib import Path

import pytest

from formguard.adapters import ClientAdapter, ServerAdapter
from formguard.config.settings import ValidationSettings
from formguard.core.predicates import build_portable_registry
from formguard.rulesets import user_credentials_rule_set


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that exercise several components together"
    )


# =======================
# REGISTRY FIXTURES
# =======================

@pytest.fixture(scope="function")
def registry():
    """
    Fresh, unfrozen registry holding the portable predicates

    Returns:
        PredicateRegistry
    """
    return build_portable_registry("test")


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture(scope="function")
def settings() -> ValidationSettings:
    """Default shared settings"""
    return ValidationSettings()


@pytest.fixture(autouse=True)
def clean_formguard_env(monkeypatch):
    """
    Remove FORMGUARD_* variables so settings tests see only what they set
    """
    for name in list(os.environ):
        if name.startswith("FORMGUARD_"):
            monkeypatch.delenv(name, raising=False)


# =======================
# ADAPTER FIXTURES
# =======================

@pytest.fixture(scope="function")
def server_adapter(settings) -> ServerAdapter:
    """Installed server adapter over default settings"""
    adapter = ServerAdapter(settings)
    adapter.install()
    return adapter


@pytest.fixture(scope="function")
def client_adapter(settings) -> ClientAdapter:
    """Installed client adapter over a form rendered from default settings"""
    adapter = ClientAdapter.from_settings(settings)
    adapter.install()
    return adapter


@pytest.fixture(scope="function")
def credentials_rule_set(server_adapter):
    """The shared user credential rule set"""
    return user_credentials_rule_set(server_adapter.registry)


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture(scope="session")
def config_dir() -> Path:
    """
    Get path to the repository config directory

    Returns:
        Path to config/
    """
    return Path(__file__).resolve().parent.parent / "config"


@pytest.fixture(scope="session")
def rule_sets_path(config_dir) -> Path:
    """Path to the shipped rule set YAML file"""
    return config_dir / "rule_sets.yaml"
