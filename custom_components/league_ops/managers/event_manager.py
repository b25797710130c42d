"""Event Manager - Finalizes events through the settlement cascade.

SettlementEngine is not idempotent, so this manager owns the guard: under a
lock, an event is only settled from a settleable status, and the status flip
to Completed is written together with every other settlement write in a single
persist.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError, ServiceValidationError

from .. import const
from ..engines import SettlementEngine, TierEngine
from ..utils.dt_utils import dt_now_iso
from ..utils.math_utils import round_currency
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import LeagueOpsCoordinator
    from ..type_defs import EventData


class EventManager(BaseManager):
    """Manager for event finalization."""

    def __init__(self, hass: HomeAssistant, coordinator: LeagueOpsCoordinator) -> None:
        """Initialize the EventManager."""
        super().__init__(hass, coordinator)
        self._lock = asyncio.Lock()

    async def async_setup(self) -> None:
        """Nothing to subscribe to; settlement is service-driven."""

    def get_event(self, event_id: str) -> EventData:
        """Return a stored event or raise HomeAssistantError."""
        event = self.coordinator.events_data.get(event_id)
        if event is None:
            raise HomeAssistantError(const.ERROR_EVENT_NOT_FOUND_FMT.format(event_id))
        return event

    async def finalize_event(self, event_id: str) -> dict[str, Any]:
        """Settle an event and persist every resulting write at once.

        Returns:
            Settlement summary (JSON-serializable, used as service response)

        Raises:
            HomeAssistantError: if the event does not exist
            ServiceValidationError: if the event is already Completed or Cancelled
        """
        async with self._lock:
            event = self.get_event(event_id)
            status = event.get(const.DATA_EVENT_STATUS)
            if status not in const.EVENT_SETTLEABLE_STATUSES:
                raise ServiceValidationError(
                    const.ERROR_EVENT_NOT_SETTLEABLE_FMT.format(event_id, status)
                )

            now_iso = dt_now_iso()
            players = self.coordinator.players_data
            result = SettlementEngine.settle(
                event,
                event.get(const.DATA_EVENT_ATTENDEES) or {},
                self.coordinator.signups_data,
                players,
                self.coordinator.rules_data,
                self.coordinator.ranks,
                badges=self.coordinator.badges_data,
                inventory=self.coordinator.inventory_data,
                now_iso=now_iso,
            )

            rank_changes: list[dict[str, Any]] = []
            for updated in result["updated_players"]:
                player_id = updated[const.DATA_PLAYER_ID]
                old_tier = players[player_id].get(const.DATA_PLAYER_RANK)
                new_tier = updated.get(const.DATA_PLAYER_RANK)
                if TierEngine.tier_changed(old_tier, new_tier):
                    rank_changes.append(
                        {
                            "player_id": player_id,
                            "old_tier_id": (old_tier or {}).get(const.DATA_TIER_ID),
                            "new_tier_id": (new_tier or {}).get(const.DATA_TIER_ID),
                        }
                    )
                players[player_id] = updated

            self.coordinator.transactions.extend(result["transactions"])
            cleared_signup_keys = [
                key
                for key, signup in self.coordinator.signups_data.items()
                if signup and signup.get(const.DATA_SIGNUP_EVENT_ID) == event_id
            ]
            for key in cleared_signup_keys:
                del self.coordinator.signups_data[key]

            event[const.DATA_EVENT_STATUS] = const.EVENT_STATUS_COMPLETED
            event[const.DATA_EVENT_SETTLED_AT] = now_iso
            self.coordinator.meta[const.DATA_META_LAST_SETTLEMENT] = now_iso

            await self.coordinator.async_persist()

        summary = {
            "event_id": event_id,
            "xp_awards": result["xp_awards"],
            "no_show_player_ids": result["no_show_player_ids"],
            "awarded_badges": result["awarded_badges"],
            "legendary_grants": result["legendary_grants"],
            "cleared_signup_ids": cleared_signup_keys,
            "transaction_count": len(result["transactions"]),
            "revenue_total": round_currency(
                sum(
                    txn[const.DATA_TRANSACTION_AMOUNT]
                    for txn in result["transactions"]
                )
            ),
        }
        self.emit(const.SIGNAL_SUFFIX_EVENT_SETTLED, rank_changes=rank_changes, **summary)

        const.LOGGER.info(
            "INFO: Event '%s' finalized: %s players updated, %s transactions",
            event_id,
            len(result["updated_players"]),
            len(result["transactions"]),
        )
        return summary
