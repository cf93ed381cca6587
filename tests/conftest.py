"""Shared fixtures for the console tests."""
from unittest.mock import MagicMock

import pytest

from access import AccessCatalog, AccessLevel, AccessOption


@pytest.fixture
def catalog():
    return AccessCatalog(
        levels=[AccessLevel("1", "Administrator"), AccessLevel("2", "Operator")],
        screens=[
            AccessOption("1", "Dashboard"),
            AccessOption("2", "Users"),
            AccessOption("3", "Reports"),
        ],
    )


@pytest.fixture
def api():
    """Backend collaborator with the ConsoleApi surface."""
    mock = MagicMock()
    mock.list_access_levels.return_value = [{"id": 1, "descricao": "Administrator"}]
    mock.list_modules.return_value = [
        {"id": 10, "descricao": "Dashboard"},
        {"id": 11, "descricao": "Users"},
    ]
    mock.list_users.return_value = []
    mock.set_password.return_value = 200
    return mock


@pytest.fixture
def notices():
    """Collects (level, message) notifications."""
    return []


@pytest.fixture
def notify(notices):
    return lambda level, message: notices.append((level, message))
