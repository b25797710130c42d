"""Document builders for League Ops storage.

This module is the SINGLE SOURCE OF TRUTH for:
- Field defaults of stored documents (players)
- Building the immutable records created at settlement and draw time
  (match records, transactions, raffle winners)

Build functions take DATA_* keyed input, apply defaults, generate ids where
the record needs one and return a complete dict ready for storage. They have
no Home Assistant dependencies, so engines may use them.

Consumers:
- engines/settlement_engine.py (match records, transactions)
- engines/raffle_engine.py (winners)
- coordinator.py (player normalization on load)
"""

from __future__ import annotations

from typing import Any
import uuid

from . import const
from .type_defs import MatchRecord, PlayerData, TransactionData, WinnerData
from .utils.dt_utils import dt_now_iso
from .utils.math_utils import coerce_int, round_currency

# ==============================================================================
# HELPER FUNCTIONS FOR FIELD NORMALIZATION
# ==============================================================================


def _normalize_list_field(value: Any) -> list[Any]:
    """Normalize a field that should be a list.

    This prevents bugs like list("badge_1") → ['b', 'a', ...]
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        return [value] if value else []
    return list(value) if value else []


# ==============================================================================
# PLAYERS
# ==============================================================================


def build_player(data: dict[str, Any]) -> PlayerData:
    """Return a player document with every field present.

    Missing stats default to 0 and missing collections to empty lists. The
    cached rank is passed through untouched; callers recompute it.
    """
    stats = data.get(const.DATA_PLAYER_STATS) or {}
    player: PlayerData = {
        const.DATA_PLAYER_ID: data.get(const.DATA_PLAYER_ID) or str(uuid.uuid4()),
        const.DATA_PLAYER_NAME: str(data.get(const.DATA_PLAYER_NAME) or "").strip(),
        const.DATA_PLAYER_CALLSIGN: data.get(const.DATA_PLAYER_CALLSIGN) or "",
        const.DATA_PLAYER_STATUS: data.get(const.DATA_PLAYER_STATUS)
        or const.PLAYER_STATUS_ACTIVE,
        const.DATA_PLAYER_STATS: {
            const.DATA_STAT_KILLS: coerce_int(stats.get(const.DATA_STAT_KILLS)),
            const.DATA_STAT_DEATHS: coerce_int(stats.get(const.DATA_STAT_DEATHS)),
            const.DATA_STAT_HEADSHOTS: coerce_int(stats.get(const.DATA_STAT_HEADSHOTS)),
            const.DATA_STAT_GAMES_PLAYED: coerce_int(
                stats.get(const.DATA_STAT_GAMES_PLAYED)
            ),
            const.DATA_STAT_XP: coerce_int(stats.get(const.DATA_STAT_XP)),
        },
        const.DATA_PLAYER_RANK: data.get(const.DATA_PLAYER_RANK),
        const.DATA_PLAYER_BADGES: _normalize_list_field(
            data.get(const.DATA_PLAYER_BADGES)
        ),
        const.DATA_PLAYER_LEGENDARY_BADGES: _normalize_list_field(
            data.get(const.DATA_PLAYER_LEGENDARY_BADGES)
        ),
        const.DATA_PLAYER_XP_ADJUSTMENTS: _normalize_list_field(
            data.get(const.DATA_PLAYER_XP_ADJUSTMENTS)
        ),
        const.DATA_PLAYER_MATCH_HISTORY: _normalize_list_field(
            data.get(const.DATA_PLAYER_MATCH_HISTORY)
        ),
    }
    return player


# ==============================================================================
# SETTLEMENT RECORDS
# ==============================================================================


def build_match_record(
    event_id: str,
    kills: int,
    deaths: int,
    headshots: int,
    recorded_at: str | None = None,
) -> MatchRecord:
    """Build the immutable per-event snapshot appended to match_history."""
    return {
        const.DATA_MATCH_EVENT_ID: event_id,
        const.DATA_MATCH_KILLS: kills,
        const.DATA_MATCH_DEATHS: deaths,
        const.DATA_MATCH_HEADSHOTS: headshots,
        const.DATA_MATCH_RECORDED_AT: recorded_at or dt_now_iso(),
    }


def build_transaction(
    transaction_type: str,
    description: str,
    amount: float,
    *,
    related_event_id: str | None = None,
    related_player_id: str | None = None,
    payment_status: str | None = None,
    date: str | None = None,
) -> TransactionData:
    """Build a financial ledger entry with a fresh id and rounded amount."""
    return {
        const.DATA_TRANSACTION_ID: str(uuid.uuid4()),
        const.DATA_TRANSACTION_DATE: date or dt_now_iso(),
        const.DATA_TRANSACTION_TYPE: transaction_type,  # type: ignore[typeddict-item]
        const.DATA_TRANSACTION_DESCRIPTION: description,
        const.DATA_TRANSACTION_AMOUNT: round_currency(amount),
        const.DATA_TRANSACTION_RELATED_EVENT_ID: related_event_id,
        const.DATA_TRANSACTION_RELATED_PLAYER_ID: related_player_id,
        const.DATA_TRANSACTION_PAYMENT_STATUS: payment_status,  # type: ignore[typeddict-item]
    }


# ==============================================================================
# RAFFLES
# ==============================================================================


def build_winner(
    raffle_id: str, prize_id: str, ticket_id: str, player_id: str
) -> WinnerData:
    """Build a drawn (prize, ticket) pair."""
    return {
        const.DATA_WINNER_ID: str(uuid.uuid4()),
        const.DATA_WINNER_RAFFLE_ID: raffle_id,
        const.DATA_WINNER_PRIZE_ID: prize_id,
        const.DATA_WINNER_TICKET_ID: ticket_id,
        const.DATA_WINNER_PLAYER_ID: player_id,
    }
