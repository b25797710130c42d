"""Handles persistent data storage for the League Ops integration.

Uses Home Assistant's Storage helper to save and load league data, ensuring
players, events, raffles and the financial ledger survive restarts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class LeagueOpsStore:
    """Handles persistent storage operations for League Ops data.

    Thin wrapper around Home Assistant's Store API for loading, saving, and
    accessing league data. Every collection is keyed by document id.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).

        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return canonical empty data structure for fresh installations.

        This is the SINGLE SOURCE OF TRUTH for League Ops storage schema.
        Ranks are a list (configuration order matters for tie-breaking);
        every other collection is a dict keyed by id, except the append-only
        transactions ledger.
        """
        return {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION,
                const.DATA_META_LAST_SETTLEMENT: None,
            },
            const.DATA_RANKS: [],
            const.DATA_PLAYERS: {},
            const.DATA_BADGES: {},
            const.DATA_LEGENDARY_BADGES: {},
            const.DATA_GAMIFICATION_RULES: {},
            const.DATA_EVENTS: {},
            const.DATA_SIGNUPS: {},
            const.DATA_INVENTORY: {},
            const.DATA_TRANSACTIONS: [],
            const.DATA_RAFFLES: {},
        }

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure. Buckets missing
        from older files are filled in from the default structure.
        """
        const.LOGGER.debug("DEBUG: LeagueOpsStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = LeagueOpsStore.get_default_structure()
            return

        self._data = existing_data
        for key, default in LeagueOpsStore.get_default_structure().items():
            self._data.setdefault(key, default)

        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: %s",
            {
                "players": len(self._data[const.DATA_PLAYERS]),
                "events": len(self._data[const.DATA_EVENTS]),
                "raffles": len(self._data[const.DATA_RAFFLES]),
                "transactions": len(self._data[const.DATA_TRANSACTIONS]),
            },
        )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory data structure."""
        const.LOGGER.debug(
            "DEBUG: Storage set_data called with %s top-level keys", len(new_data)
        )
        self._data = new_data

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Raises:
            No exceptions raised - errors are logged but do not stop execution.
            OSError: Logged when file system issues prevent saving.
            TypeError: Logged when data contains non-serializable types.
            ValueError: Logged when data is invalid for JSON serialization.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s",
                err,
            )
