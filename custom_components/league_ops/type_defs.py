"""Type definitions for League Ops data structures.

TypedDicts describe the STATIC structures (keys known at design time) stored
by LeagueOpsStore and produced by the engines. Collections keyed by internal
id (players, events, raffles, ...) are plain ``dict[str, <TypedDict>]``.

IMPORTANT: This file must NOT import from coordinator.py, helpers.py, or any
file that imports the coordinator, to avoid circular dependencies.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime null checks and ``.get()``
defaults remain in the engines and managers.
"""

from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

PlayerId = str
EventId = str
BadgeId = str
RaffleId = str
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"

BadgeCriteriaType = Literal["kills", "headshots", "games_played", "rank", "custom"]
EventStatus = Literal["Upcoming", "In Progress", "Completed", "Cancelled"]
RaffleStatus = Literal["Upcoming", "Active", "Completed"]
PaymentStatus = Literal["Paid (Card)", "Paid (Cash)", "Unpaid"]
TransactionType = Literal[
    "Event Revenue", "Rental Revenue", "Retail Revenue", "Expense"
]


# =============================================================================
# Ranks and Tiers
# =============================================================================


class TierData(TypedDict):
    """A single rank level gated by a minimum XP threshold."""

    id: str
    name: str
    min_xp: int
    perks: list[str]
    icon_url: NotRequired[str]


class RankData(TypedDict):
    """A named, ordered group of Tiers."""

    id: str
    name: str
    description: NotRequired[str]
    rank_badge_url: NotRequired[str]
    tiers: list[TierData]


class TierResolution(TypedDict):
    """Result of TierEngine.resolve()."""

    current: TierData
    previous: TierData | None
    next: TierData | None
    rank: RankData | None


# =============================================================================
# Players
# =============================================================================


class PlayerStats(TypedDict):
    """Cumulative lifetime statistics. ``xp`` is the authoritative score."""

    kills: int
    deaths: int
    headshots: int
    games_played: int
    xp: int


class XpAdjustment(TypedDict):
    """Immutable manual XP ledger entry.

    Created by: XpLedgerEngine.apply_adjustment()
    Stored in: PlayerData["xp_adjustments"] (append-only)
    """

    amount: int
    reason: str
    date: ISODatetime


class MatchRecord(TypedDict):
    """Immutable per-event performance snapshot appended at settlement."""

    event_id: EventId
    kills: int
    deaths: int
    headshots: int
    recorded_at: NotRequired[ISODatetime]


class PlayerData(TypedDict):
    """A league player document."""

    id: PlayerId
    name: str
    callsign: NotRequired[str]
    status: NotRequired[str]
    stats: PlayerStats
    rank: NotRequired[TierData | None]  # cached TierEngine output
    badges: list[BadgeId]
    legendary_badges: list[BadgeId]
    xp_adjustments: list[XpAdjustment]
    match_history: list[MatchRecord]


class CareerSummary(TypedDict):
    """Lifetime summary derived from a player's stats and match history."""

    games_played: int
    kills: int
    deaths: int
    headshots: int
    kd_ratio: float
    best_match: MatchRecord | None


# =============================================================================
# Badges
# =============================================================================


class BadgeCriteria(TypedDict):
    """Unlock criteria. ``value`` is a threshold or, for rank, a Rank name."""

    type: BadgeCriteriaType
    value: int | str


class BadgeData(TypedDict):
    """A standard badge with automatic criteria."""

    id: BadgeId
    name: str
    description: NotRequired[str]
    icon_url: NotRequired[str]
    criteria: BadgeCriteria


class LegendaryBadgeData(TypedDict):
    """A manually granted badge with no automatic criteria."""

    id: BadgeId
    name: str
    description: NotRequired[str]
    icon_url: NotRequired[str]
    how_to_obtain: NotRequired[str]


class BadgeProgress(TypedDict):
    """Result of BadgeEngine.evaluate()."""

    current: float
    max: float
    percentage: float
    is_earned: bool
    text: str


# =============================================================================
# Gamification, Events, Signups
# =============================================================================


class GamificationRule(TypedDict):
    """Named, signed XP modifier."""

    id: str
    name: str
    description: NotRequired[str]
    xp: int


class MatchStats(TypedDict, total=False):
    """Per-event live performance for one player (all keys optional)."""

    kills: int
    deaths: int
    headshots: int


class AttendeeData(TypedDict):
    """A confirmed participant of an event."""

    player_id: PlayerId
    payment_status: PaymentStatus
    rented_gear_ids: NotRequired[list[str]]
    discount_amount: NotRequired[float]
    discount_reason: NotRequired[str]
    stats: NotRequired[MatchStats]


class SignupData(TypedDict):
    """A pre-registration for an event, deleted at settlement."""

    id: str  # "<event_id>_<player_id>"
    event_id: EventId
    player_id: PlayerId
    requested_gear_ids: NotRequired[list[str]]
    note: NotRequired[str]


class EventData(TypedDict):
    """A league event."""

    id: EventId
    title: str
    date: NotRequired[str]
    status: EventStatus
    participation_xp: NotRequired[int]
    game_fee: NotRequired[float]
    gear_for_rent: NotRequired[list[str]]
    rental_price_overrides: NotRequired[dict[str, float]]
    xp_overrides: NotRequired[dict[str, int]]
    awarded_badges: NotRequired[dict[PlayerId, list[BadgeId]]]
    attendees: NotRequired[dict[PlayerId, AttendeeData]]
    live_stats: NotRequired[dict[PlayerId, MatchStats]]
    settled_at: NotRequired[ISODatetime]


class InventoryItemData(TypedDict):
    """The inventory fields settlement reads."""

    id: str
    name: str
    sale_price: float
    is_rental: NotRequired[bool]


class TransactionData(TypedDict):
    """Immutable financial ledger entry."""

    id: str
    date: ISODatetime
    type: TransactionType
    description: str
    amount: float
    related_event_id: NotRequired[EventId | None]
    related_player_id: NotRequired[PlayerId | None]
    payment_status: NotRequired[PaymentStatus | None]


class SettlementResult(TypedDict):
    """Result of SettlementEngine.settle()."""

    updated_players: list[PlayerData]
    transactions: list[TransactionData]
    cleared_signup_ids: list[str]
    xp_awards: dict[PlayerId, int]
    no_show_player_ids: list[PlayerId]
    awarded_badges: dict[PlayerId, list[BadgeId]]
    legendary_grants: dict[PlayerId, list[BadgeId]]


# =============================================================================
# Raffles
# =============================================================================


class PrizeData(TypedDict):
    """A raffle prize; ``place`` is unique within the raffle (1..3)."""

    id: str
    name: str
    place: int


class TicketData(TypedDict):
    """A raffle ticket owned by exactly one player."""

    id: str
    code: NotRequired[str]
    player_id: PlayerId
    payment_status: NotRequired[PaymentStatus]


class WinnerData(TypedDict):
    """A drawn (prize, ticket) pair."""

    id: str
    raffle_id: RaffleId
    prize_id: str
    ticket_id: str
    player_id: PlayerId


class RaffleData(TypedDict):
    """A raffle with its ticket pool and drawn winners."""

    id: RaffleId
    name: str
    status: RaffleStatus
    prizes: list[PrizeData]
    tickets: list[TicketData]
    winners: list[WinnerData]
    drawn_at: NotRequired[ISODatetime]


class DrawResult(TypedDict):
    """Result of RaffleEngine.draw()."""

    winners: list[WinnerData]
    raffle: RaffleData
