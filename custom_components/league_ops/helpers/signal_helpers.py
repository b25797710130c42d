"""Dispatcher signal helpers for League Ops managers."""

from __future__ import annotations

from .. import const


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Each config entry gets its own signal namespace, so managers of two
    League Ops instances never hear each other.

    Format: 'league_ops_{entry_id}_{suffix}'

    Example:
        get_event_signal("abc123", "event_settled") → "league_ops_abc123_event_settled"

    Args:
        entry_id: ConfigEntry.entry_id from coordinator
        suffix: Signal suffix constant from const.py (e.g., SIGNAL_SUFFIX_EVENT_SETTLED)

    Returns:
        Fully qualified signal name scoped to this integration instance
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"
