"""XP Ledger Engine - Pure logic for manual XP adjustments.

This engine provides stateless, pure Python functions for:
- Validating manual adjustments (reason is mandatory)
- Creating immutable XpAdjustment entries
- Applying an adjustment and recomputing the cached Tier in the same write

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
State management (persisting, emitting rank-change signals) belongs in
ProgressionManager.
"""

from __future__ import annotations

from collections.abc import Iterable
import copy
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_now_iso
from ..utils.math_utils import coerce_int
from .tier_engine import TierEngine

if TYPE_CHECKING:
    from ..type_defs import PlayerData, RankData, XpAdjustment


class InvalidXpAdjustmentError(Exception):
    """Raised when a manual XP adjustment fails validation.

    Attributes:
        player_id: The player the adjustment was aimed at
        amount: The requested XP delta
        reason: The rejected reason text
    """

    def __init__(self, player_id: str | None, amount: int, reason: str | None) -> None:
        """Initialize InvalidXpAdjustmentError.

        Args:
            player_id: The player the adjustment was aimed at
            amount: The requested XP delta
            reason: The rejected reason text
        """
        self.player_id = player_id
        self.amount = amount
        self.reason = reason
        super().__init__(
            f"Invalid XP adjustment for player {player_id}: amount={amount}, "
            f"reason={reason!r}. {const.ERROR_EMPTY_REASON}"
        )


class XpLedgerEngine:
    """Pure logic engine for the append-only manual XP ledger.

    All methods are static - no instance state.
    """

    @staticmethod
    def create_adjustment(
        amount: int, reason: str, now_iso: str | None = None
    ) -> XpAdjustment:
        """Create an immutable ledger entry.

        Args:
            amount: Signed XP delta (positive = bonus, negative = penalty)
            reason: User-visible reason (already validated)
            now_iso: Optional timestamp override for deterministic tests

        Returns:
            XpAdjustment TypedDict
        """
        return {
            const.DATA_XP_ADJUSTMENT_AMOUNT: amount,
            const.DATA_XP_ADJUSTMENT_REASON: reason.strip(),
            const.DATA_XP_ADJUSTMENT_DATE: now_iso or dt_now_iso(),
        }

    @staticmethod
    def apply_adjustment(
        player: PlayerData,
        amount: int,
        reason: str,
        ranks: Iterable[RankData] | None,
        now_iso: str | None = None,
    ) -> PlayerData:
        """Apply a manual XP adjustment and recompute the player's Tier.

        The input player is not mutated; a new player dict is returned whose
        stats.xp, rank and xp_adjustments reflect the same logical write.

        Args:
            player: Player document
            amount: Signed XP delta; zero is accepted as an intentional no-op
            reason: Mandatory, non-empty reason
            ranks: Configured Ranks for Tier recomputation
            now_iso: Optional timestamp override for deterministic tests

        Returns:
            Updated player dict

        Raises:
            InvalidXpAdjustmentError: if reason is empty or whitespace-only
        """
        player_id = player.get(const.DATA_PLAYER_ID)
        if not isinstance(reason, str) or not reason.strip():
            raise InvalidXpAdjustmentError(player_id, amount, reason)

        if amount == 0:
            const.LOGGER.info(
                "INFO: Zero-amount XP adjustment recorded for player '%s' (%s)",
                player_id,
                reason,
            )

        updated = copy.deepcopy(player)
        stats = updated.setdefault(const.DATA_PLAYER_STATS, {})  # type: ignore[typeddict-item]
        old_xp = coerce_int(stats.get(const.DATA_STAT_XP))
        new_xp = old_xp + amount
        stats[const.DATA_STAT_XP] = new_xp

        updated[const.DATA_PLAYER_RANK] = TierEngine.resolve(new_xp, ranks)["current"]
        adjustments = updated.setdefault(const.DATA_PLAYER_XP_ADJUSTMENTS, [])  # type: ignore[typeddict-item]
        adjustments.append(XpLedgerEngine.create_adjustment(amount, reason, now_iso))

        const.LOGGER.debug(
            "DEBUG: XP adjustment for player '%s': %s -> %s (%+d)",
            player_id,
            old_xp,
            new_xp,
            amount,
        )
        return updated

    @staticmethod
    def total_adjustments(player: PlayerData) -> int:
        """Sum of all manual adjustments recorded for a player."""
        return sum(
            coerce_int(entry.get(const.DATA_XP_ADJUSTMENT_AMOUNT))
            for entry in player.get(const.DATA_PLAYER_XP_ADJUSTMENTS) or []
        )
