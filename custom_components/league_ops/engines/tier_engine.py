"""Tier Engine - Pure logic for resolving a player's Tier and Rank from XP.

This engine provides stateless, pure Python functions for:
- Tier resolution (current / previous / next / owning Rank)
- Rank ordering by lowest Tier threshold
- Progress toward the next Tier
- Rank/Tier configuration validation

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.

The cached ``rank`` field on a player is a materialized view of resolve();
callers recompute it after every XP write and never read it back as input.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.math_utils import calculate_percentage, coerce_int

if TYPE_CHECKING:
    from ..type_defs import RankData, TierData, TierResolution


def unranked_tier() -> TierData:
    """Return a fresh copy of the sentinel Tier used when nothing is configured."""
    return {
        const.DATA_TIER_ID: const.UNRANKED_TIER_ID,
        const.DATA_TIER_NAME: const.UNRANKED_TIER_NAME,
        const.DATA_TIER_MIN_XP: 0,
        const.DATA_TIER_PERKS: list(const.UNRANKED_TIER_PERKS),
        const.DATA_TIER_ICON_URL: const.UNRANKED_TIER_ICON_URL,
    }


class TierEngine:
    """Pure logic engine for Tier/Rank resolution.

    All methods are static - no instance state. Ranks are accepted as any
    iterable of RankData (a list from configuration, or ``dict.values()``
    from storage).
    """

    @staticmethod
    def _min_xp(tier: dict[str, Any]) -> int:
        return coerce_int(tier.get(const.DATA_TIER_MIN_XP))

    @staticmethod
    def flatten_tiers(ranks: Iterable[RankData] | None) -> list[TierData]:
        """Flatten all Tiers across Ranks, drop empty entries, sort by min_xp.

        The sort is stable, so Tiers sharing a min_xp keep configuration order.
        """
        tiers: list[TierData] = []
        for rank in ranks or []:
            if not rank:
                continue
            tiers.extend(
                tier for tier in rank.get(const.DATA_RANK_TIERS) or [] if tier
            )
        return sorted(tiers, key=TierEngine._min_xp)

    @staticmethod
    def resolve(xp: int | float, ranks: Iterable[RankData] | None) -> TierResolution:
        """Resolve the current Tier for a cumulative XP value.

        Args:
            xp: Cumulative XP (may be negative after penalties)
            ranks: Configured Ranks

        Returns:
            TierResolution with current, previous, next and owning rank.
            With no Tiers configured, current is the Unranked sentinel and
            everything else is None.
        """
        rank_list = [rank for rank in ranks or [] if rank]
        tiers = TierEngine.flatten_tiers(rank_list)

        if not tiers:
            return {
                "current": unranked_tier(),
                "previous": None,
                "next": None,
                "rank": None,
            }

        # Highest qualifying threshold; ties go to the first in config order
        index = 0
        best_min_xp: int | None = None
        for position, tier in enumerate(tiers):
            tier_min = TierEngine._min_xp(tier)
            if tier_min > xp:
                break
            if best_min_xp is None or tier_min > best_min_xp:
                best_min_xp = tier_min
                index = position

        current = tiers[index]
        return {
            "current": current,
            "previous": tiers[index - 1] if index > 0 else None,
            "next": tiers[index + 1] if index < len(tiers) - 1 else None,
            "rank": TierEngine.find_rank_for_tier(current, rank_list),
        }

    @staticmethod
    def find_rank_for_tier(
        tier: TierData, ranks: Iterable[RankData] | None
    ) -> RankData | None:
        """Return the Rank that owns ``tier`` (by id, then identity), or None."""
        tier_id = tier.get(const.DATA_TIER_ID)
        for rank in ranks or []:
            if not rank:
                continue
            for candidate in rank.get(const.DATA_RANK_TIERS) or []:
                if not candidate:
                    continue
                if candidate is tier:
                    return rank
                if tier_id is not None and candidate.get(const.DATA_TIER_ID) == tier_id:
                    return rank

        const.LOGGER.warning(
            "WARNING: Tier '%s' is not owned by any configured Rank",
            tier.get(const.DATA_TIER_NAME),
        )
        return None

    @staticmethod
    def ordered_ranks(ranks: Iterable[RankData] | None) -> list[RankData]:
        """Return Ranks ordered by the min_xp of their lowest Tier.

        Ranks without Tiers sort after all others, keeping configuration order.
        """
        with_tiers: list[tuple[int, RankData]] = []
        without_tiers: list[RankData] = []
        for rank in ranks or []:
            if not rank:
                continue
            tiers = [t for t in rank.get(const.DATA_RANK_TIERS) or [] if t]
            if tiers:
                with_tiers.append((min(TierEngine._min_xp(t) for t in tiers), rank))
            else:
                without_tiers.append(rank)

        with_tiers.sort(key=lambda item: item[0])
        return [rank for _, rank in with_tiers] + without_tiers

    @staticmethod
    def progress_percentage(xp: int | float, resolution: TierResolution) -> float:
        """Percent of the way from the current Tier to the next one.

        Returns 100.0 at the top Tier (no next) and 0.0 below the lowest Tier.
        """
        next_tier = resolution["next"]
        if next_tier is None:
            return 100.0

        current_min = TierEngine._min_xp(resolution["current"])
        span = TierEngine._min_xp(next_tier) - current_min
        return calculate_percentage(xp - current_min, span)

    @staticmethod
    def tier_changed(old_tier: TierData | None, new_tier: TierData | None) -> bool:
        """Return True if two cached Tiers differ (rank-up or rank-down)."""
        old_id = (old_tier or {}).get(const.DATA_TIER_ID)
        new_id = (new_tier or {}).get(const.DATA_TIER_ID)
        return old_id != new_id

    @staticmethod
    def validate_ranks(ranks: Iterable[RankData] | None) -> list[str]:
        """Report configuration problems that make resolution ambiguous.

        Returns:
            List of human-readable warnings (empty when the configuration is sound)
        """
        warnings: list[str] = []
        seen: dict[int, str] = {}

        for rank in ranks or []:
            if not rank:
                continue
            rank_name = rank.get(const.DATA_RANK_NAME, "?")
            tiers = [t for t in rank.get(const.DATA_RANK_TIERS) or [] if t]
            if not tiers:
                warnings.append(f"Rank '{rank_name}' has no tiers")
                continue

            for tier in tiers:
                tier_name = tier.get(const.DATA_TIER_NAME, "?")
                min_xp = TierEngine._min_xp(tier)
                if min_xp < 0:
                    warnings.append(
                        f"Tier '{tier_name}' in rank '{rank_name}' has negative min_xp {min_xp}"
                    )
                if min_xp in seen:
                    warnings.append(
                        f"Tier '{tier_name}' shares min_xp {min_xp} with tier '{seen[min_xp]}'"
                    )
                else:
                    seen[min_xp] = tier_name

        return warnings
