"""Shared fixtures for the PagerDuty failure notifier tests."""

import logging
from unittest.mock import MagicMock, Mock

import pytest

from pagerduty_failure.config import PagerdutyConfig, default_config
from pagerduty_failure.logging.context import clear_log_context


@pytest.fixture(autouse=True)
def reset_default_config():
    """Start and finish every test with unset process-wide settings."""
    default_config.reset()
    clear_log_context()
    yield
    default_config.reset()
    clear_log_context()


@pytest.fixture
def pagerduty_config():
    """Fully populated PagerDuty settings with default service key ABC."""
    return PagerdutyConfig(
        subdomain="my_subdomain",
        service_key="ABC",
        username="my_user",
        password="my_pass",
    )


@pytest.fixture
def mock_client():
    """Paging client double whose trigger_incident() returns a success body."""
    client = MagicMock()
    client.trigger_incident.return_value = {"status": "success", "incident_key": "inc-1"}
    return client


@pytest.fixture
def client_factory(mock_client):
    """Client factory that always returns mock_client."""
    return Mock(return_value=mock_client)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set all PagerDuty environment variables."""
    monkeypatch.setenv("PAGERDUTY_SUBDOMAIN", "env_subdomain")
    monkeypatch.setenv("PAGERDUTY_SERVICE_KEY", "env_key")
    monkeypatch.setenv("PAGERDUTY_USERNAME", "env_user")
    monkeypatch.setenv("PAGERDUTY_PASSWORD", "env_pass")


@pytest.fixture
def restore_root_logger():
    """Put the root logger back after configure_logging() replaces its handlers."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
