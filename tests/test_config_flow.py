"""Tests for League Ops config flow."""

from unittest.mock import patch

from homeassistant import config_entries
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.league_ops.const import DOMAIN, LEAGUE_OPS_TITLE


async def test_form_user_flow_success(hass: HomeAssistant) -> None:
    """Test successful user config flow."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == "user"

    with patch(
        "custom_components.league_ops.async_setup_entry",
        return_value=True,
    ) as mock_setup_entry:
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"),
            user_input={},
        )
        await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert result.get("title") == LEAGUE_OPS_TITLE
    assert result.get("data") == {}
    assert len(mock_setup_entry.mock_calls) == 1


async def test_single_instance_only(hass: HomeAssistant) -> None:
    """A second entry is refused."""
    MockConfigEntry(domain=DOMAIN, title=LEAGUE_OPS_TITLE, data={}).add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result.get("type") == FlowResultType.ABORT
    assert result.get("reason") == "single_instance_allowed"


async def test_setup_with_empty_storage(hass: HomeAssistant) -> None:
    """A fresh install starts from the empty structure."""
    entry = MockConfigEntry(domain=DOMAIN, title=LEAGUE_OPS_TITLE, data={})
    entry.add_to_hass(hass)

    assert await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    coordinator = entry.runtime_data
    assert coordinator.players_data == {}
    assert coordinator.ranks == []
    assert coordinator.transactions == []
