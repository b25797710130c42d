"""Settlement Engine - Pure logic for the event settlement cascade.

Finalizing an event runs one ordered cascade:
1. Score each attendee from the gamification rules (event overrides first)
2. Penalize no-shows (signed up, never attended)
3. Append one MatchRecord per attendee
4. Aggregate lifetime stats and XP
5. Recompute the cached Tier, auto-award standard badges, grant the
   legendary badges the event lists for each player
6. Create revenue transactions for paid attendees
7. Return the event's signup ids for deletion

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Inputs are never mutated; updated copies are returned. The cascade has no
memory of prior runs, so EventManager guards against settling an event twice.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import copy
from typing import TYPE_CHECKING, Any

from .. import const
from ..data_builders import build_match_record, build_transaction
from ..utils.dt_utils import dt_now_iso
from ..utils.math_utils import coerce_int, round_currency
from .badge_engine import BadgeEngine
from .tier_engine import TierEngine

if TYPE_CHECKING:
    from ..type_defs import (
        AttendeeData,
        BadgeData,
        CareerSummary,
        EventData,
        GamificationRule,
        InventoryItemData,
        MatchRecord,
        MatchStats,
        PlayerData,
        RankData,
        SettlementResult,
        SignupData,
        TransactionData,
    )


def _as_mapping(items: Any, id_key: str) -> dict[str, Any]:
    """Accept either an id-keyed dict or a list of documents carrying ``id_key``."""
    if not items:
        return {}
    if isinstance(items, Mapping):
        return dict(items)
    return {item.get(id_key): item for item in items if item and item.get(id_key)}


class SettlementEngine:
    """Pure logic engine for settling a finished event.

    All methods are static - no instance state.
    """

    # =========================================================================
    # SCORING
    # =========================================================================

    @staticmethod
    def resolve_rule_value(
        rule_id: str,
        event: EventData,
        rules: Mapping[str, GamificationRule],
    ) -> int:
        """Event override first, then the global rule, then 0."""
        overrides = event.get(const.DATA_EVENT_XP_OVERRIDES) or {}
        if rule_id in overrides:
            return coerce_int(overrides[rule_id])
        rule = rules.get(rule_id)
        if rule is None:
            return 0
        return coerce_int(rule.get(const.DATA_RULE_XP))

    @staticmethod
    def participation_xp(
        event: EventData, rules: Mapping[str, GamificationRule]
    ) -> int:
        """Base XP for attending: override, then the event's own value, then the rule."""
        overrides = event.get(const.DATA_EVENT_XP_OVERRIDES) or {}
        if const.RULE_PARTICIPATION in overrides:
            return coerce_int(overrides[const.RULE_PARTICIPATION])
        if event.get(const.DATA_EVENT_PARTICIPATION_XP) is not None:
            return coerce_int(event.get(const.DATA_EVENT_PARTICIPATION_XP))
        return SettlementEngine.resolve_rule_value(
            const.RULE_PARTICIPATION, event, rules
        )

    @staticmethod
    def calculate_earned_xp(
        match_stats: MatchStats,
        event: EventData,
        rules: Mapping[str, GamificationRule],
    ) -> int:
        """XP earned by one attendee for one event.

        earned = base + kills*kill + headshots*headshot + deaths*death
        """
        kills = coerce_int(match_stats.get(const.DATA_STAT_KILLS))
        headshots = coerce_int(match_stats.get(const.DATA_STAT_HEADSHOTS))
        deaths = coerce_int(match_stats.get(const.DATA_STAT_DEATHS))

        return (
            SettlementEngine.participation_xp(event, rules)
            + kills * SettlementEngine.resolve_rule_value(const.RULE_KILL, event, rules)
            + headshots
            * SettlementEngine.resolve_rule_value(const.RULE_HEADSHOT, event, rules)
            + deaths * SettlementEngine.resolve_rule_value(const.RULE_DEATH, event, rules)
        )

    @staticmethod
    def no_show_penalty(
        event: EventData, rules: Mapping[str, GamificationRule]
    ) -> int:
        """Negative XP delta for a signed-up player who did not attend."""
        return -abs(
            SettlementEngine.resolve_rule_value(const.RULE_NO_SHOW_PENALTY, event, rules)
        )

    @staticmethod
    def attendee_stats(
        attendee: AttendeeData, event: EventData, player_id: str | None = None
    ) -> MatchStats:
        """Attendee's recorded stats, falling back to the event's live stats."""
        player_id = player_id or attendee.get(const.DATA_ATTENDEE_PLAYER_ID)
        stats = attendee.get(const.DATA_ATTENDEE_STATS)
        if not stats:
            live_stats = event.get(const.DATA_EVENT_LIVE_STATS) or {}
            stats = live_stats.get(player_id) or {}
        return {
            const.DATA_STAT_KILLS: coerce_int(stats.get(const.DATA_STAT_KILLS)),
            const.DATA_STAT_DEATHS: coerce_int(stats.get(const.DATA_STAT_DEATHS)),
            const.DATA_STAT_HEADSHOTS: coerce_int(stats.get(const.DATA_STAT_HEADSHOTS)),
        }

    # =========================================================================
    # FINANCE
    # =========================================================================

    @staticmethod
    def calculate_rental_total(
        gear_ids: Iterable[str] | None,
        event: EventData,
        inventory: Mapping[str, InventoryItemData],
    ) -> float:
        """Sum of rental prices: event override first, then the item's sale price.

        Unknown items contribute 0.
        """
        overrides = event.get(const.DATA_EVENT_RENTAL_PRICE_OVERRIDES) or {}
        total = 0.0
        for gear_id in gear_ids or []:
            if gear_id in overrides:
                total += float(overrides[gear_id] or 0)
                continue
            item = inventory.get(gear_id)
            if item is None:
                const.LOGGER.warning(
                    "WARNING: Rented gear '%s' for event '%s' is not in inventory, "
                    "charging 0",
                    gear_id,
                    event.get(const.DATA_EVENT_ID),
                )
                continue
            total += float(item.get(const.DATA_INVENTORY_SALE_PRICE) or 0)
        return round_currency(total)

    @staticmethod
    def _attendee_transactions(
        player_id: str,
        attendee: AttendeeData,
        event: EventData,
        inventory: Mapping[str, InventoryItemData],
        now_iso: str,
    ) -> list[TransactionData]:
        payment_status = attendee.get(const.DATA_ATTENDEE_PAYMENT_STATUS)
        if payment_status not in const.PAID_PAYMENT_STATUSES:
            return []

        event_id = event.get(const.DATA_EVENT_ID)
        title = event.get(const.DATA_EVENT_TITLE, event_id)

        fee = float(event.get(const.DATA_EVENT_GAME_FEE) or 0)
        discount = float(attendee.get(const.DATA_ATTENDEE_DISCOUNT_AMOUNT) or 0)
        transactions = [
            build_transaction(
                const.TRANSACTION_TYPE_EVENT_REVENUE,
                const.TRANSACTION_DESC_GAME_FEE_FMT.format(title),
                max(fee - discount, 0.0),
                related_event_id=event_id,
                related_player_id=player_id,
                payment_status=payment_status,
                date=now_iso,
            )
        ]

        gear_ids = attendee.get(const.DATA_ATTENDEE_RENTED_GEAR_IDS) or []
        if gear_ids:
            transactions.append(
                build_transaction(
                    const.TRANSACTION_TYPE_RENTAL_REVENUE,
                    const.TRANSACTION_DESC_RENTAL_FMT.format(title),
                    SettlementEngine.calculate_rental_total(gear_ids, event, inventory),
                    related_event_id=event_id,
                    related_player_id=player_id,
                    payment_status=payment_status,
                    date=now_iso,
                )
            )
        return transactions

    # =========================================================================
    # CASCADE
    # =========================================================================

    @staticmethod
    def _apply_progression(
        player: PlayerData,
        xp_delta: int,
        ranks: list[RankData],
        badges: list[BadgeData],
        legendary_ids: Iterable[str],
    ) -> tuple[list[str], list[str]]:
        """Add XP, recompute the cached Tier, award badges. Mutates ``player``.

        Returns:
            (newly earned standard badge ids, newly granted legendary badge ids)
        """
        stats = player.setdefault(const.DATA_PLAYER_STATS, {})  # type: ignore[typeddict-item]
        new_xp = coerce_int(stats.get(const.DATA_STAT_XP)) + xp_delta
        stats[const.DATA_STAT_XP] = new_xp
        player[const.DATA_PLAYER_RANK] = TierEngine.resolve(new_xp, ranks)["current"]

        earned = BadgeEngine.find_earned_badges(badges, player, ranks)
        held = player.setdefault(const.DATA_PLAYER_BADGES, [])  # type: ignore[typeddict-item]
        held.extend(earned)

        granted: list[str] = []
        legendary = player.setdefault(const.DATA_PLAYER_LEGENDARY_BADGES, [])  # type: ignore[typeddict-item]
        for badge_id in legendary_ids:
            if badge_id and badge_id not in legendary and badge_id not in granted:
                granted.append(badge_id)
        legendary.extend(granted)

        return earned, granted

    @staticmethod
    def settle(
        event: EventData,
        attendees: Mapping[str, AttendeeData] | Iterable[AttendeeData] | None,
        signups: Iterable[SignupData] | Mapping[str, SignupData] | None,
        players: Mapping[str, PlayerData],
        rules: Mapping[str, GamificationRule] | Iterable[GamificationRule] | None,
        ranks: Iterable[RankData] | None,
        badges: Iterable[BadgeData] | Mapping[str, BadgeData] | None = None,
        inventory: Mapping[str, InventoryItemData]
        | Iterable[InventoryItemData]
        | None = None,
        now_iso: str | None = None,
    ) -> SettlementResult:
        """Run the settlement cascade for one event.

        Args:
            event: The event being finalized
            attendees: Confirmed participants, keyed by player id or as a list
            signups: Signups (any event; filtered to this one)
            players: All players keyed by id
            rules: Gamification rules, keyed by id or as a list
            ranks: Configured Ranks
            badges: Standard badges considered for auto-award
            inventory: Inventory items for rental pricing
            now_iso: Settlement timestamp (match records and transactions)

        Returns:
            SettlementResult. Only players that attended or no-showed appear
            in updated_players; everyone else is untouched.
        """
        now_iso = now_iso or dt_now_iso()
        event_id = event.get(const.DATA_EVENT_ID)
        rule_map = _as_mapping(rules, const.DATA_RULE_ID)
        inventory_map = _as_mapping(inventory, const.DATA_INVENTORY_ID)
        attendee_map = _as_mapping(attendees, const.DATA_ATTENDEE_PLAYER_ID)
        rank_list = [rank for rank in ranks or [] if rank]
        badge_list = list(
            badges.values() if isinstance(badges, Mapping) else badges or []
        )
        signup_list = list(
            signups.values() if isinstance(signups, Mapping) else signups or []
        )
        awarded_legendary = event.get(const.DATA_EVENT_AWARDED_BADGES) or {}

        updated: dict[str, PlayerData] = {}
        xp_awards: dict[str, int] = {}
        awarded_badges: dict[str, list[str]] = {}
        legendary_grants: dict[str, list[str]] = {}
        transactions: list[TransactionData] = []

        # Attendees: score, record, aggregate, progress, ledger
        for player_id, attendee in attendee_map.items():
            if player_id not in players:
                const.LOGGER.warning(
                    "WARNING: Event '%s' attendee '%s' is not a known player, skipping",
                    event_id,
                    player_id,
                )
                continue

            player = copy.deepcopy(players[player_id])
            match_stats = SettlementEngine.attendee_stats(attendee, event, player_id)
            earned_xp = SettlementEngine.calculate_earned_xp(match_stats, event, rule_map)

            record: MatchRecord = build_match_record(
                event_id,
                match_stats[const.DATA_STAT_KILLS],
                match_stats[const.DATA_STAT_DEATHS],
                match_stats[const.DATA_STAT_HEADSHOTS],
                recorded_at=now_iso,
            )
            player.setdefault(const.DATA_PLAYER_MATCH_HISTORY, []).append(record)  # type: ignore[typeddict-item]

            stats = player.setdefault(const.DATA_PLAYER_STATS, {})  # type: ignore[typeddict-item]
            for stat_key in (
                const.DATA_STAT_KILLS,
                const.DATA_STAT_DEATHS,
                const.DATA_STAT_HEADSHOTS,
            ):
                stats[stat_key] = coerce_int(stats.get(stat_key)) + match_stats[stat_key]
            stats[const.DATA_STAT_GAMES_PLAYED] = (
                coerce_int(stats.get(const.DATA_STAT_GAMES_PLAYED)) + 1
            )

            earned, granted = SettlementEngine._apply_progression(
                player,
                earned_xp,
                rank_list,
                badge_list,
                awarded_legendary.get(player_id) or [],
            )

            updated[player_id] = player
            xp_awards[player_id] = earned_xp
            if earned:
                awarded_badges[player_id] = earned
            if granted:
                legendary_grants[player_id] = granted

            transactions.extend(
                SettlementEngine._attendee_transactions(
                    player_id, attendee, event, inventory_map, now_iso
                )
            )

        # No-shows: signed up, never attended
        event_signups = [
            signup
            for signup in signup_list
            if signup and signup.get(const.DATA_SIGNUP_EVENT_ID) == event_id
        ]
        penalty = SettlementEngine.no_show_penalty(event, rule_map)
        no_show_ids: list[str] = []
        for signup in event_signups:
            player_id = signup.get(const.DATA_SIGNUP_PLAYER_ID)
            if player_id in attendee_map or player_id in no_show_ids:
                continue
            if player_id not in players:
                const.LOGGER.warning(
                    "WARNING: Event '%s' signup '%s' references unknown player '%s'",
                    event_id,
                    signup.get(const.DATA_SIGNUP_ID),
                    player_id,
                )
                continue

            player = copy.deepcopy(players[player_id])
            earned, _ = SettlementEngine._apply_progression(
                player, penalty, rank_list, badge_list, []
            )
            updated[player_id] = player
            xp_awards[player_id] = penalty
            no_show_ids.append(player_id)
            if earned:
                awarded_badges[player_id] = earned

        cleared_signup_ids = [
            signup.get(const.DATA_SIGNUP_ID)
            for signup in event_signups
            if signup.get(const.DATA_SIGNUP_ID)
        ]

        const.LOGGER.debug(
            "DEBUG: Settled event '%s': %s attendees, %s no-shows, %s transactions",
            event_id,
            len(updated) - len(no_show_ids),
            len(no_show_ids),
            len(transactions),
        )

        return {
            "updated_players": list(updated.values()),
            "transactions": transactions,
            "cleared_signup_ids": cleared_signup_ids,
            "xp_awards": xp_awards,
            "no_show_player_ids": no_show_ids,
            "awarded_badges": awarded_badges,
            "legendary_grants": legendary_grants,
        }

    # =========================================================================
    # CAREER SUMMARY
    # =========================================================================

    @staticmethod
    def career_summary(player: PlayerData) -> CareerSummary:
        """Lifetime K/D and best match (most kills, earliest on ties)."""
        stats = player.get(const.DATA_PLAYER_STATS) or {}
        kills = coerce_int(stats.get(const.DATA_STAT_KILLS))
        deaths = coerce_int(stats.get(const.DATA_STAT_DEATHS))
        kd_ratio = round(kills / deaths, 2) if deaths else float(kills)

        best_match: MatchRecord | None = None
        for record in player.get(const.DATA_PLAYER_MATCH_HISTORY) or []:
            if best_match is None or coerce_int(
                record.get(const.DATA_MATCH_KILLS)
            ) > coerce_int(best_match.get(const.DATA_MATCH_KILLS)):
                best_match = record

        return {
            "games_played": coerce_int(stats.get(const.DATA_STAT_GAMES_PLAYED)),
            "kills": kills,
            "deaths": deaths,
            "headshots": coerce_int(stats.get(const.DATA_STAT_HEADSHOTS)),
            "kd_ratio": kd_ratio,
            "best_match": best_match,
        }
