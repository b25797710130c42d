"""Badge Engine - Pure logic for standard badge progress evaluation.

This engine provides stateless, pure Python functions for:
- Badge progress evaluation (kills, headshots, games played, rank, custom)
- Detection of newly earned badges for auto-award
- Configuration checks for rank badges whose target Rank is not configured
  and stat badges without a positive threshold

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
Awarding (writing into ``player["badges"]``) belongs to the caller.

Criteria kinds form a closed set (const.BADGE_CRITERIA_TYPES). Each kind has
exactly one handler in the registry; registration fails loudly if a kind is
added to the set without a handler.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.math_utils import calculate_percentage, coerce_int
from .tier_engine import TierEngine

if TYPE_CHECKING:
    from ..type_defs import BadgeData, BadgeProgress, PlayerData, RankData


# Handler function signature: (player, criteria_value, ranks) -> BadgeProgress
CriteriaHandler = Callable[
    ["PlayerData", Any, "list[RankData]"], "BadgeProgress"
]


def _progress(
    current: float, maximum: float, percentage: float, is_earned: bool, text: str
) -> BadgeProgress:
    return {
        "current": current,
        "max": maximum,
        "percentage": percentage,
        "is_earned": is_earned,
        "text": text,
    }


def _unlocked(current: float = 1, maximum: float = 1) -> BadgeProgress:
    return _progress(current, maximum, 100.0, True, const.BADGE_TEXT_UNLOCKED)


def _not_completable(text: str) -> BadgeProgress:
    return _progress(0, 1, 0.0, False, text)


class BadgeEngine:
    """Pure logic engine for badge evaluation.

    All methods are static - no instance state.

    Evaluation Flow:
        1. Already-held badges short-circuit to "Unlocked" (earned is terminal)
        2. Players without a cached rank report "Rank data missing"
        3. The criteria handler for the badge's type computes progress
    """

    # =========================================================================
    # CRITERIA HANDLER REGISTRY
    # =========================================================================

    _CRITERIA_HANDLERS: dict[str, CriteriaHandler] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Register one handler per criteria kind.

        Raises:
            RuntimeError: if the registry does not cover BADGE_CRITERIA_TYPES exactly
        """
        if cls._CRITERIA_HANDLERS:
            return

        handlers: dict[str, CriteriaHandler] = {
            const.BADGE_CRITERIA_KILLS: cls._evaluate_kills,
            const.BADGE_CRITERIA_HEADSHOTS: cls._evaluate_headshots,
            const.BADGE_CRITERIA_GAMES_PLAYED: cls._evaluate_games_played,
            const.BADGE_CRITERIA_RANK: cls._evaluate_rank,
            const.BADGE_CRITERIA_CUSTOM: cls._evaluate_custom,
        }

        if set(handlers) != set(const.BADGE_CRITERIA_TYPES):
            raise RuntimeError(
                "Badge criteria handlers out of sync: "
                f"missing={sorted(set(const.BADGE_CRITERIA_TYPES) - set(handlers))} "
                f"extra={sorted(set(handlers) - set(const.BADGE_CRITERIA_TYPES))}"
            )

        cls._CRITERIA_HANDLERS = handlers

    # =========================================================================
    # MAIN EVALUATION METHODS
    # =========================================================================

    @classmethod
    def evaluate(
        cls,
        badge: BadgeData,
        player: PlayerData,
        ranks: Iterable[RankData] | None,
    ) -> BadgeProgress:
        """Evaluate a player's progress toward a standard badge.

        Pure function - never mutates the player.

        Args:
            badge: Badge definition with criteria {type, value}
            player: Player snapshot (stats, cached rank, earned badges)
            ranks: Configured Ranks

        Returns:
            BadgeProgress {current, max, percentage (0-100), is_earned, text}
        """
        cls._register_handlers()

        badge_id = badge.get(const.DATA_BADGE_ID)
        if badge_id in (player.get(const.DATA_PLAYER_BADGES) or []):
            return _unlocked()

        if not player.get(const.DATA_PLAYER_RANK):
            return _not_completable(const.BADGE_TEXT_RANK_DATA_MISSING)

        criteria = badge.get(const.DATA_BADGE_CRITERIA) or {}
        criteria_type = criteria.get(const.DATA_BADGE_CRITERIA_TYPE)
        handler = cls._CRITERIA_HANDLERS.get(criteria_type)  # type: ignore[arg-type]

        if handler is None:
            const.LOGGER.warning(
                "WARNING: Unknown badge criteria type: %s for badge %s",
                criteria_type,
                badge_id,
            )
            return _not_completable(const.BADGE_TEXT_UNKNOWN_CRITERIA)

        rank_list = [rank for rank in ranks or [] if rank]
        return handler(player, criteria.get(const.DATA_BADGE_CRITERIA_VALUE), rank_list)

    @classmethod
    def find_earned_badges(
        cls,
        badges: Iterable[BadgeData] | None,
        player: PlayerData,
        ranks: Iterable[RankData] | None,
    ) -> list[str]:
        """Return ids of badges the player now qualifies for but does not hold.

        Args:
            badges: All configured standard badges
            player: Player snapshot after any stat/XP update
            ranks: Configured Ranks

        Returns:
            Badge ids in configuration order, without duplicates
        """
        held = set(player.get(const.DATA_PLAYER_BADGES) or [])
        rank_list = [rank for rank in ranks or [] if rank]
        earned: list[str] = []

        for badge in badges or []:
            badge_id = badge.get(const.DATA_BADGE_ID)
            if not badge_id or badge_id in held or badge_id in earned:
                continue
            if cls.evaluate(badge, player, rank_list)["is_earned"]:
                earned.append(badge_id)

        return earned

    @staticmethod
    def find_unresolvable_rank_badges(
        badges: Iterable[BadgeData] | None,
        ranks: Iterable[RankData] | None,
    ) -> list[str]:
        """Return ids of rank badges whose target Rank name is not configured.

        Such badges can never be completed; managers surface them as
        configuration warnings.
        """
        rank_names = {
            rank.get(const.DATA_RANK_NAME) for rank in ranks or [] if rank
        }
        unresolvable: list[str] = []
        for badge in badges or []:
            criteria = badge.get(const.DATA_BADGE_CRITERIA) or {}
            if criteria.get(const.DATA_BADGE_CRITERIA_TYPE) != const.BADGE_CRITERIA_RANK:
                continue
            if criteria.get(const.DATA_BADGE_CRITERIA_VALUE) not in rank_names:
                unresolvable.append(badge.get(const.DATA_BADGE_ID))
        return unresolvable

    @staticmethod
    def find_unset_threshold_badges(badges: Iterable[BadgeData] | None) -> list[str]:
        """Return ids of stat badges whose threshold is missing or not positive."""
        unset: list[str] = []
        for badge in badges or []:
            criteria = badge.get(const.DATA_BADGE_CRITERIA) or {}
            if criteria.get(const.DATA_BADGE_CRITERIA_TYPE) not in (
                const.BADGE_STAT_CRITERIA_TYPES
            ):
                continue
            if coerce_int(criteria.get(const.DATA_BADGE_CRITERIA_VALUE)) <= 0:
                unset.append(badge.get(const.DATA_BADGE_ID))
        return unset

    # =========================================================================
    # STAT THRESHOLD HANDLERS
    # =========================================================================

    @staticmethod
    def _evaluate_stat_threshold(
        player: PlayerData, stat_key: str, value: Any
    ) -> BadgeProgress:
        """Shared logic for kills / headshots / games_played thresholds.

        A missing or non-positive threshold can never be earned.
        """
        maximum = coerce_int(value)
        if maximum <= 0:
            return _not_completable(const.BADGE_TEXT_THRESHOLD_NOT_SET)

        stats = player.get(const.DATA_PLAYER_STATS) or {}
        current = coerce_int(stats.get(stat_key))
        is_earned = current >= maximum
        percentage = 100.0 if is_earned else calculate_percentage(current, maximum)
        return _progress(
            current, maximum, percentage, is_earned, f"{current:,} / {maximum:,}"
        )

    @staticmethod
    def _evaluate_kills(
        player: PlayerData, value: Any, ranks: list[RankData]
    ) -> BadgeProgress:
        return BadgeEngine._evaluate_stat_threshold(player, const.DATA_STAT_KILLS, value)

    @staticmethod
    def _evaluate_headshots(
        player: PlayerData, value: Any, ranks: list[RankData]
    ) -> BadgeProgress:
        return BadgeEngine._evaluate_stat_threshold(
            player, const.DATA_STAT_HEADSHOTS, value
        )

    @staticmethod
    def _evaluate_games_played(
        player: PlayerData, value: Any, ranks: list[RankData]
    ) -> BadgeProgress:
        return BadgeEngine._evaluate_stat_threshold(
            player, const.DATA_STAT_GAMES_PLAYED, value
        )

    # =========================================================================
    # RANK / CUSTOM HANDLERS
    # =========================================================================

    @staticmethod
    def _evaluate_rank(
        player: PlayerData, value: Any, ranks: list[RankData]
    ) -> BadgeProgress:
        """Compare the player's Rank ordinal against the target Rank ordinal.

        The player's Rank is resolved from stats.xp, not from the cached tier.
        """
        target_name = value
        reach_text = const.BADGE_TEXT_REACH_RANK_FMT.format(target_name)

        rank_names = [
            rank.get(const.DATA_RANK_NAME) for rank in TierEngine.ordered_ranks(ranks)
        ]
        if target_name not in rank_names:
            return _not_completable(reach_text)
        target_index = rank_names.index(target_name)

        stats = player.get(const.DATA_PLAYER_STATS) or {}
        player_rank = TierEngine.resolve(coerce_int(stats.get(const.DATA_STAT_XP)), ranks)[
            "rank"
        ]
        player_rank_name = (player_rank or {}).get(const.DATA_RANK_NAME)
        player_index = (
            rank_names.index(player_rank_name) if player_rank_name in rank_names else 0
        )

        if player_index >= target_index:
            return _unlocked(target_index, target_index)

        return _progress(
            player_index,
            target_index,
            calculate_percentage(player_index, target_index),
            False,
            reach_text,
        )

    @staticmethod
    def _evaluate_custom(
        player: PlayerData, value: Any, ranks: list[RankData]
    ) -> BadgeProgress:
        """Custom badges are only ever awarded by an admin."""
        return _not_completable(const.BADGE_TEXT_ADMIN_AWARDED)


# Register at import so a handler/criteria mismatch fails immediately
BadgeEngine._register_handlers()  # pylint: disable=protected-access
