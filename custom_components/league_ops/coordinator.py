"""Coordinator for the League Ops integration.

Owns the in-memory league data loaded by LeagueOpsStore, the managers that
mutate it, and persistence. There is no polling: data only changes through
manager operations, which call async_persist() once per logical write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import const, data_builders as db
from .engines import BadgeEngine, RaffleEngine, TierEngine
from .managers import EventManager, ProgressionManager, RaffleManager

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .store import LeagueOpsStore
    from .type_defs import (
        BadgeData,
        EventData,
        GamificationRule,
        InventoryItemData,
        LegendaryBadgeData,
        PlayerData,
        RaffleData,
        RankData,
        SignupData,
        TransactionData,
    )


class LeagueOpsCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator for League Ops integration."""

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: LeagueOpsStore,
    ) -> None:
        """Initialize the LeagueOpsCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=None,
        )
        self.store = store
        self._data: dict[str, Any] = store.data

        self.progression_manager = ProgressionManager(hass, self)
        self.event_manager = EventManager(hass, self)
        self.raffle_manager = RaffleManager(hass, self)

    # -------------------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------------------

    async def async_setup(self) -> None:
        """Normalize stored data, report configuration problems, start managers."""
        players = self._data[const.DATA_PLAYERS]
        for player_id, player in list(players.items()):
            normalized = db.build_player({**player, const.DATA_PLAYER_ID: player_id})
            # Cached rank is a view of stats.xp; refresh it against current ranks
            normalized[const.DATA_PLAYER_RANK] = TierEngine.resolve(
                normalized[const.DATA_PLAYER_STATS][const.DATA_STAT_XP], self.ranks
            )["current"]
            players[player_id] = normalized

        self._log_configuration_warnings()

        for manager in (
            self.progression_manager,
            self.event_manager,
            self.raffle_manager,
        ):
            await manager.async_setup()

        await self.async_persist()

    def _log_configuration_warnings(self) -> None:
        for warning in TierEngine.validate_ranks(self.ranks):
            const.LOGGER.warning("WARNING: Rank configuration: %s", warning)

        for badge_id in BadgeEngine.find_unresolvable_rank_badges(
            self.badges_data.values(), self.ranks
        ):
            const.LOGGER.warning(
                "WARNING: Badge '%s' targets a rank that is not configured and "
                "can never be earned",
                badge_id,
            )

        for badge_id in BadgeEngine.find_unset_threshold_badges(
            self.badges_data.values()
        ):
            const.LOGGER.warning(
                "WARNING: Badge '%s' has no positive threshold and can never be earned",
                badge_id,
            )

        for raffle_id, raffle in self.raffles_data.items():
            for problem in RaffleEngine.validate_prizes(
                raffle.get(const.DATA_RAFFLE_PRIZES)
            ):
                const.LOGGER.warning("WARNING: Raffle '%s': %s", raffle_id, problem)

    async def _async_update_data(self) -> dict[str, Any]:
        """Return the in-memory data; nothing is fetched."""
        return self._data

    async def async_persist(self) -> None:
        """Save to persistent storage and notify listeners."""
        self.store.set_data(self._data)
        await self.store.async_save()
        self.async_set_updated_data(self._data)

    # -------------------------------------------------------------------------------------
    # Data Accessors
    # -------------------------------------------------------------------------------------

    @property
    def ranks(self) -> list[RankData]:
        """Configured Ranks in configuration order."""
        return self._data[const.DATA_RANKS]

    @property
    def players_data(self) -> dict[str, PlayerData]:
        """Players keyed by id."""
        return self._data[const.DATA_PLAYERS]

    @property
    def badges_data(self) -> dict[str, BadgeData]:
        """Standard badges keyed by id."""
        return self._data[const.DATA_BADGES]

    @property
    def legendary_badges_data(self) -> dict[str, LegendaryBadgeData]:
        """Legendary badges keyed by id."""
        return self._data[const.DATA_LEGENDARY_BADGES]

    @property
    def rules_data(self) -> dict[str, GamificationRule]:
        """Gamification rules keyed by id."""
        return self._data[const.DATA_GAMIFICATION_RULES]

    @property
    def events_data(self) -> dict[str, EventData]:
        """Events keyed by id."""
        return self._data[const.DATA_EVENTS]

    @property
    def signups_data(self) -> dict[str, SignupData]:
        """Signups keyed by id."""
        return self._data[const.DATA_SIGNUPS]

    @property
    def inventory_data(self) -> dict[str, InventoryItemData]:
        """Inventory items keyed by id."""
        return self._data[const.DATA_INVENTORY]

    @property
    def transactions(self) -> list[TransactionData]:
        """Append-only financial ledger."""
        return self._data[const.DATA_TRANSACTIONS]

    @property
    def raffles_data(self) -> dict[str, RaffleData]:
        """Raffles keyed by id."""
        return self._data[const.DATA_RAFFLES]

    @property
    def meta(self) -> dict[str, Any]:
        """Storage metadata."""
        return self._data[const.DATA_META]
