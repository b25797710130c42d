"""Progression Manager - XP, ranks and badges for individual players.

This manager handles all player progression writes outside settlement:
- Manual XP adjustments (append-only ledger, Tier recomputed in the same write)
- Admin badge awards and legendary badge grant/revoke
- Progress read-outs (tier progress, badge progress, career summary)

ARCHITECTURE:
- ProgressionManager = STATEFUL writes to player documents + signals
- XpLedgerEngine / TierEngine / BadgeEngine = pure calculations
- EventManager settles events and emits EVENT_SETTLED; this manager turns
  that payload into per-player RANK_CHANGED / BADGE_EARNED signals
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..engines import BadgeEngine, SettlementEngine, TierEngine, XpLedgerEngine
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import LeagueOpsCoordinator
    from ..type_defs import BadgeProgress, PlayerData, TierData


class ProgressionManager(BaseManager):
    """Manager for player XP, rank and badge state."""

    def __init__(self, hass: HomeAssistant, coordinator: LeagueOpsCoordinator) -> None:
        """Initialize the ProgressionManager."""
        super().__init__(hass, coordinator)
        self._lock = asyncio.Lock()

    async def async_setup(self) -> None:
        """Subscribe to settlement results."""
        self.listen(const.SIGNAL_SUFFIX_EVENT_SETTLED, self._on_event_settled)

    @callback
    def _on_event_settled(self, payload: dict[str, Any]) -> None:
        """Fan a settlement out into per-player progression signals."""
        event_id = payload.get("event_id")
        for change in payload.get("rank_changes", []):
            self.emit(const.SIGNAL_SUFFIX_RANK_CHANGED, event_id=event_id, **change)
        for player_id, badge_ids in payload.get("awarded_badges", {}).items():
            for badge_id in badge_ids:
                self.emit(
                    const.SIGNAL_SUFFIX_BADGE_EARNED,
                    player_id=player_id,
                    badge_id=badge_id,
                    event_id=event_id,
                )
        for player_id, badge_ids in payload.get("legendary_grants", {}).items():
            for badge_id in badge_ids:
                self.emit(
                    const.SIGNAL_SUFFIX_LEGENDARY_BADGE_CHANGED,
                    player_id=player_id,
                    badge_id=badge_id,
                    granted=True,
                    event_id=event_id,
                )

    # -------------------------------------------------------------------------------------
    # XP
    # -------------------------------------------------------------------------------------

    async def adjust_xp(self, player_id: str, amount: int, reason: str) -> PlayerData:
        """Apply a manual XP adjustment and persist it.

        Raises:
            HomeAssistantError: if the player does not exist
            InvalidXpAdjustmentError: if the reason is empty
        """
        async with self._lock:
            player = self.get_player(player_id)
            old_tier = player.get(const.DATA_PLAYER_RANK)

            updated = XpLedgerEngine.apply_adjustment(
                player, amount, reason, self.coordinator.ranks
            )
            earned = BadgeEngine.find_earned_badges(
                self.coordinator.badges_data.values(), updated, self.coordinator.ranks
            )
            updated[const.DATA_PLAYER_BADGES].extend(earned)

            self.coordinator.players_data[player_id] = updated
            await self.coordinator.async_persist()

        new_tier = updated[const.DATA_PLAYER_RANK]
        self.emit(
            const.SIGNAL_SUFFIX_XP_ADJUSTED,
            player_id=player_id,
            amount=amount,
            reason=reason,
            new_xp=updated[const.DATA_PLAYER_STATS][const.DATA_STAT_XP],
        )
        self._emit_rank_change(player_id, old_tier, new_tier)
        for badge_id in earned:
            self.emit(
                const.SIGNAL_SUFFIX_BADGE_EARNED, player_id=player_id, badge_id=badge_id
            )

        const.LOGGER.info(
            "INFO: Adjusted XP for player '%s' by %s (%s)", player_id, amount, reason
        )
        return updated

    def _emit_rank_change(
        self, player_id: str, old_tier: TierData | None, new_tier: TierData | None
    ) -> None:
        if not TierEngine.tier_changed(old_tier, new_tier):
            return
        self.emit(
            const.SIGNAL_SUFFIX_RANK_CHANGED,
            player_id=player_id,
            old_tier_id=(old_tier or {}).get(const.DATA_TIER_ID),
            new_tier_id=(new_tier or {}).get(const.DATA_TIER_ID),
        )

    # -------------------------------------------------------------------------------------
    # Badges
    # -------------------------------------------------------------------------------------

    async def award_badge(self, player_id: str, badge_id: str) -> bool:
        """Award a standard badge by hand (used for custom-criteria badges).

        Returns:
            False if the player already held the badge
        """
        if badge_id not in self.coordinator.badges_data:
            raise HomeAssistantError(const.ERROR_BADGE_NOT_FOUND_FMT.format(badge_id))

        async with self._lock:
            player = self.get_player(player_id)
            held = player.setdefault(const.DATA_PLAYER_BADGES, [])  # type: ignore[typeddict-item]
            if badge_id in held:
                const.LOGGER.debug(
                    "DEBUG: Player '%s' already holds badge '%s'", player_id, badge_id
                )
                return False
            held.append(badge_id)
            await self.coordinator.async_persist()

        self.emit(const.SIGNAL_SUFFIX_BADGE_EARNED, player_id=player_id, badge_id=badge_id)
        return True

    async def set_legendary_badge(
        self, player_id: str, badge_id: str, *, granted: bool
    ) -> bool:
        """Grant or revoke a legendary badge.

        Returns:
            False if the player was already in the requested state
        """
        if badge_id not in self.coordinator.legendary_badges_data:
            raise HomeAssistantError(
                const.ERROR_LEGENDARY_BADGE_NOT_FOUND_FMT.format(badge_id)
            )

        async with self._lock:
            player = self.get_player(player_id)
            held = player.setdefault(const.DATA_PLAYER_LEGENDARY_BADGES, [])  # type: ignore[typeddict-item]
            if (badge_id in held) == granted:
                return False
            if granted:
                held.append(badge_id)
            else:
                held.remove(badge_id)
            await self.coordinator.async_persist()

        self.emit(
            const.SIGNAL_SUFFIX_LEGENDARY_BADGE_CHANGED,
            player_id=player_id,
            badge_id=badge_id,
            granted=granted,
        )
        return True

    # -------------------------------------------------------------------------------------
    # Read-outs
    # -------------------------------------------------------------------------------------

    def get_badge_progress(self, player_id: str) -> dict[str, BadgeProgress]:
        """Progress toward every standard badge, keyed by badge id."""
        player = self.get_player(player_id)
        return {
            badge_id: BadgeEngine.evaluate(badge, player, self.coordinator.ranks)
            for badge_id, badge in self.coordinator.badges_data.items()
        }

    def get_player_progress(self, player_id: str) -> dict[str, Any]:
        """Rank, tier progress, badge progress and career summary for one player."""
        player = self.get_player(player_id)
        xp = player[const.DATA_PLAYER_STATS][const.DATA_STAT_XP]
        resolution = TierEngine.resolve(xp, self.coordinator.ranks)
        rank = resolution["rank"]

        return {
            "player_id": player_id,
            "xp": xp,
            "rank": rank.get(const.DATA_RANK_NAME) if rank else None,
            "tier": resolution["current"],
            "next_tier": resolution["next"],
            "tier_progress": TierEngine.progress_percentage(xp, resolution),
            "xp_adjustment_total": XpLedgerEngine.total_adjustments(player),
            "badges": self.get_badge_progress(player_id),
            "legendary_badges": list(
                player.get(const.DATA_PLAYER_LEGENDARY_BADGES) or []
            ),
            "career": SettlementEngine.career_summary(player),
        }
