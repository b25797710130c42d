"""Initialization file for the League Ops integration.

Handles setting up the integration: loading league data from storage,
building the coordinator and its managers, and registering services.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry, ConfigEntryState
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import LeagueOpsCoordinator
from .services import async_setup_services, async_unload_services
from .store import LeagueOpsStore


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for League Ops entry: %s", entry.entry_id)

    store = LeagueOpsStore(hass, const.STORAGE_KEY)
    await store.async_initialize()

    coordinator = LeagueOpsCoordinator(hass, entry, store)
    await coordinator.async_setup()
    await coordinator.async_config_entry_first_refresh()

    entry.runtime_data = coordinator

    async_setup_services(hass)

    const.LOGGER.info("INFO: League Ops setup complete for entry: %s", entry.entry_id)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading League Ops entry: %s", entry.entry_id)

    other_loaded = [
        other
        for other in hass.config_entries.async_entries(const.DOMAIN)
        if other.entry_id != entry.entry_id and other.state is ConfigEntryState.LOADED
    ]
    if not other_loaded:
        await async_unload_services(hass)

    return True
