"""Shared fixtures for League Ops tests."""

from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.league_ops.const import DOMAIN, LEAGUE_OPS_TITLE

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
async def mock_hass_users(hass: HomeAssistant) -> dict[str, Any]:
    """Create mock Home Assistant users for testing."""
    admin_user = await hass.auth.async_create_user(
        "Admin User",
        group_ids=["system-admin"],
    )
    marshal_user = await hass.auth.async_create_user(
        "Field Marshal",
        group_ids=["system-users"],
    )
    return {
        "admin": admin_user,
        "marshal": marshal_user,
    }


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title=LEAGUE_OPS_TITLE,
        data={},
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
def mock_dispatcher_send():
    """Mock the dispatcher send function to capture emitted events."""
    with patch(
        "custom_components.league_ops.managers.base_manager.async_dispatcher_send"
    ) as mock:
        yield mock
