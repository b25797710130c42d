# File: const.py
"""Constants for the League Ops integration.

This file centralizes storage keys, data keys, statuses, defaults, signal
suffixes, service names and error messages for consistency across the
integration. Engines import only from here (never from managers or helpers).
"""

import logging

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
LEAGUE_OPS_TITLE = "League Ops"

# Integration Domain
DOMAIN = "league_ops"

# Logger
LOGGER = logging.getLogger(__package__)

# Coordinator
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORAGE_KEY = "league_ops_data"
STORAGE_VERSION = 1
SCHEMA_VERSION = 1

# ------------------------------------------------------------------------------------------------
# Storage Buckets
# ------------------------------------------------------------------------------------------------
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"
DATA_META_LAST_SETTLEMENT = "last_settlement"

DATA_RANKS = "ranks"
DATA_PLAYERS = "players"
DATA_BADGES = "badges"
DATA_LEGENDARY_BADGES = "legendary_badges"
DATA_GAMIFICATION_RULES = "gamification_rules"
DATA_EVENTS = "events"
DATA_SIGNUPS = "signups"
DATA_INVENTORY = "inventory"
DATA_TRANSACTIONS = "transactions"
DATA_RAFFLES = "raffles"

# ------------------------------------------------------------------------------------------------
# Rank / Tier Keys
# ------------------------------------------------------------------------------------------------
DATA_RANK_ID = "id"
DATA_RANK_NAME = "name"
DATA_RANK_DESCRIPTION = "description"
DATA_RANK_BADGE_URL = "rank_badge_url"
DATA_RANK_TIERS = "tiers"

DATA_TIER_ID = "id"
DATA_TIER_NAME = "name"
DATA_TIER_MIN_XP = "min_xp"
DATA_TIER_PERKS = "perks"
DATA_TIER_ICON_URL = "icon_url"

UNRANKED_TIER_ID = "tier_unranked"
UNRANKED_TIER_NAME = "Unranked"
UNRANKED_TIER_ICON_URL = "https://img.icons8.com/ios-filled/100/737373/shield.png"
UNRANKED_TIER_PERKS = ["Base operator status"]

# ------------------------------------------------------------------------------------------------
# Player Keys
# ------------------------------------------------------------------------------------------------
DATA_PLAYER_ID = "id"
DATA_PLAYER_NAME = "name"
DATA_PLAYER_CALLSIGN = "callsign"
DATA_PLAYER_STATUS = "status"
DATA_PLAYER_STATS = "stats"
DATA_PLAYER_RANK = "rank"
DATA_PLAYER_BADGES = "badges"
DATA_PLAYER_LEGENDARY_BADGES = "legendary_badges"
DATA_PLAYER_XP_ADJUSTMENTS = "xp_adjustments"
DATA_PLAYER_MATCH_HISTORY = "match_history"

DATA_STAT_KILLS = "kills"
DATA_STAT_DEATHS = "deaths"
DATA_STAT_HEADSHOTS = "headshots"
DATA_STAT_GAMES_PLAYED = "games_played"
DATA_STAT_XP = "xp"

PLAYER_STATUS_ACTIVE = "Active"
PLAYER_STATUS_ON_LEAVE = "On Leave"
PLAYER_STATUS_RETIRED = "Retired"

# XP adjustment entries
DATA_XP_ADJUSTMENT_AMOUNT = "amount"
DATA_XP_ADJUSTMENT_REASON = "reason"
DATA_XP_ADJUSTMENT_DATE = "date"

# Match records
DATA_MATCH_EVENT_ID = "event_id"
DATA_MATCH_KILLS = "kills"
DATA_MATCH_DEATHS = "deaths"
DATA_MATCH_HEADSHOTS = "headshots"
DATA_MATCH_RECORDED_AT = "recorded_at"

# ------------------------------------------------------------------------------------------------
# Badge Keys
# ------------------------------------------------------------------------------------------------
DATA_BADGE_ID = "id"
DATA_BADGE_NAME = "name"
DATA_BADGE_DESCRIPTION = "description"
DATA_BADGE_ICON_URL = "icon_url"
DATA_BADGE_CRITERIA = "criteria"
DATA_BADGE_CRITERIA_TYPE = "type"
DATA_BADGE_CRITERIA_VALUE = "value"
DATA_LEGENDARY_BADGE_HOW_TO_OBTAIN = "how_to_obtain"

BADGE_CRITERIA_KILLS = "kills"
BADGE_CRITERIA_HEADSHOTS = "headshots"
BADGE_CRITERIA_GAMES_PLAYED = "games_played"
BADGE_CRITERIA_RANK = "rank"
BADGE_CRITERIA_CUSTOM = "custom"

# Closed set of criteria kinds; BadgeEngine checks its handler registry against it
BADGE_CRITERIA_TYPES = (
    BADGE_CRITERIA_KILLS,
    BADGE_CRITERIA_HEADSHOTS,
    BADGE_CRITERIA_GAMES_PLAYED,
    BADGE_CRITERIA_RANK,
    BADGE_CRITERIA_CUSTOM,
)

BADGE_TEXT_UNLOCKED = "Unlocked"
BADGE_TEXT_RANK_DATA_MISSING = "Rank data missing"
BADGE_TEXT_ADMIN_AWARDED = "Admin Awarded"
BADGE_TEXT_REACH_RANK_FMT = "Reach {} Rank"
BADGE_TEXT_UNKNOWN_CRITERIA = "Unknown criteria"
BADGE_TEXT_THRESHOLD_NOT_SET = "Threshold not set"

# Criteria kinds that compare a player stat against a positive threshold
BADGE_STAT_CRITERIA_TYPES = (
    BADGE_CRITERIA_KILLS,
    BADGE_CRITERIA_HEADSHOTS,
    BADGE_CRITERIA_GAMES_PLAYED,
)

# ------------------------------------------------------------------------------------------------
# Gamification Rules
# ------------------------------------------------------------------------------------------------
DATA_RULE_ID = "id"
DATA_RULE_NAME = "name"
DATA_RULE_DESCRIPTION = "description"
DATA_RULE_XP = "xp"

RULE_PARTICIPATION = "g_participation"
RULE_KILL = "g_kill"
RULE_HEADSHOT = "g_headshot"
RULE_DEATH = "g_death"
RULE_NO_SHOW_PENALTY = "g_no_show_penalty"

# ------------------------------------------------------------------------------------------------
# Event / Attendee / Signup Keys
# ------------------------------------------------------------------------------------------------
DATA_EVENT_ID = "id"
DATA_EVENT_TITLE = "title"
DATA_EVENT_DATE = "date"
DATA_EVENT_STATUS = "status"
DATA_EVENT_PARTICIPATION_XP = "participation_xp"
DATA_EVENT_GAME_FEE = "game_fee"
DATA_EVENT_GEAR_FOR_RENT = "gear_for_rent"
DATA_EVENT_RENTAL_PRICE_OVERRIDES = "rental_price_overrides"
DATA_EVENT_XP_OVERRIDES = "xp_overrides"
DATA_EVENT_AWARDED_BADGES = "awarded_badges"
DATA_EVENT_ATTENDEES = "attendees"
DATA_EVENT_LIVE_STATS = "live_stats"
DATA_EVENT_SETTLED_AT = "settled_at"

EVENT_STATUS_UPCOMING = "Upcoming"
EVENT_STATUS_IN_PROGRESS = "In Progress"
EVENT_STATUS_COMPLETED = "Completed"
EVENT_STATUS_CANCELLED = "Cancelled"

EVENT_SETTLEABLE_STATUSES = (EVENT_STATUS_UPCOMING, EVENT_STATUS_IN_PROGRESS)

DATA_ATTENDEE_PLAYER_ID = "player_id"
DATA_ATTENDEE_PAYMENT_STATUS = "payment_status"
DATA_ATTENDEE_RENTED_GEAR_IDS = "rented_gear_ids"
DATA_ATTENDEE_DISCOUNT_AMOUNT = "discount_amount"
DATA_ATTENDEE_DISCOUNT_REASON = "discount_reason"
DATA_ATTENDEE_STATS = "stats"

DATA_SIGNUP_ID = "id"
DATA_SIGNUP_EVENT_ID = "event_id"
DATA_SIGNUP_PLAYER_ID = "player_id"
DATA_SIGNUP_REQUESTED_GEAR_IDS = "requested_gear_ids"
DATA_SIGNUP_NOTE = "note"

PAYMENT_STATUS_PAID_CARD = "Paid (Card)"
PAYMENT_STATUS_PAID_CASH = "Paid (Cash)"
PAYMENT_STATUS_UNPAID = "Unpaid"

PAID_PAYMENT_STATUSES = (PAYMENT_STATUS_PAID_CARD, PAYMENT_STATUS_PAID_CASH)

# ------------------------------------------------------------------------------------------------
# Inventory / Transactions
# ------------------------------------------------------------------------------------------------
DATA_INVENTORY_ID = "id"
DATA_INVENTORY_NAME = "name"
DATA_INVENTORY_SALE_PRICE = "sale_price"
DATA_INVENTORY_IS_RENTAL = "is_rental"

DATA_TRANSACTION_ID = "id"
DATA_TRANSACTION_DATE = "date"
DATA_TRANSACTION_TYPE = "type"
DATA_TRANSACTION_DESCRIPTION = "description"
DATA_TRANSACTION_AMOUNT = "amount"
DATA_TRANSACTION_RELATED_EVENT_ID = "related_event_id"
DATA_TRANSACTION_RELATED_PLAYER_ID = "related_player_id"
DATA_TRANSACTION_PAYMENT_STATUS = "payment_status"

TRANSACTION_TYPE_EVENT_REVENUE = "Event Revenue"
TRANSACTION_TYPE_RENTAL_REVENUE = "Rental Revenue"
TRANSACTION_TYPE_RETAIL_REVENUE = "Retail Revenue"
TRANSACTION_TYPE_EXPENSE = "Expense"

TRANSACTION_DESC_GAME_FEE_FMT = "Game fee: {}"
TRANSACTION_DESC_RENTAL_FMT = "Gear rental: {}"

# ------------------------------------------------------------------------------------------------
# Raffles
# ------------------------------------------------------------------------------------------------
DATA_RAFFLE_ID = "id"
DATA_RAFFLE_NAME = "name"
DATA_RAFFLE_STATUS = "status"
DATA_RAFFLE_PRIZES = "prizes"
DATA_RAFFLE_TICKETS = "tickets"
DATA_RAFFLE_WINNERS = "winners"
DATA_RAFFLE_DRAWN_AT = "drawn_at"

DATA_PRIZE_ID = "id"
DATA_PRIZE_NAME = "name"
DATA_PRIZE_PLACE = "place"

DATA_TICKET_ID = "id"
DATA_TICKET_CODE = "code"
DATA_TICKET_PLAYER_ID = "player_id"
DATA_TICKET_PAYMENT_STATUS = "payment_status"

DATA_WINNER_ID = "id"
DATA_WINNER_RAFFLE_ID = "raffle_id"
DATA_WINNER_PRIZE_ID = "prize_id"
DATA_WINNER_TICKET_ID = "ticket_id"
DATA_WINNER_PLAYER_ID = "player_id"

RAFFLE_STATUS_UPCOMING = "Upcoming"
RAFFLE_STATUS_ACTIVE = "Active"
RAFFLE_STATUS_COMPLETED = "Completed"

RAFFLE_MAX_PRIZES = 3
RAFFLE_PRIZE_PLACES = (1, 2, 3)

# ------------------------------------------------------------------------------------------------
# Event Signals (instance-scoped via helpers.get_event_signal)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_XP_ADJUSTED = "xp_adjusted"
SIGNAL_SUFFIX_RANK_CHANGED = "rank_changed"
SIGNAL_SUFFIX_BADGE_EARNED = "badge_earned"
SIGNAL_SUFFIX_LEGENDARY_BADGE_CHANGED = "legendary_badge_changed"
SIGNAL_SUFFIX_EVENT_SETTLED = "event_settled"
SIGNAL_SUFFIX_RAFFLE_DRAWN = "raffle_drawn"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_ADJUST_XP = "adjust_xp"
SERVICE_AWARD_BADGE = "award_badge"
SERVICE_GRANT_LEGENDARY_BADGE = "grant_legendary_badge"
SERVICE_REVOKE_LEGENDARY_BADGE = "revoke_legendary_badge"
SERVICE_FINALIZE_EVENT = "finalize_event"
SERVICE_DRAW_RAFFLE = "draw_raffle"
SERVICE_GET_PLAYER_PROGRESS = "get_player_progress"

FIELD_PLAYER_ID = "player_id"
FIELD_AMOUNT = "amount"
FIELD_REASON = "reason"
FIELD_BADGE_ID = "badge_id"
FIELD_EVENT_ID = "event_id"
FIELD_RAFFLE_ID = "raffle_id"

# ------------------------------------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------------------------------------
ERROR_PLAYER_NOT_FOUND_FMT = "Player '{}' not found"
ERROR_BADGE_NOT_FOUND_FMT = "Badge '{}' not found"
ERROR_LEGENDARY_BADGE_NOT_FOUND_FMT = "Legendary badge '{}' not found"
ERROR_EVENT_NOT_FOUND_FMT = "Event '{}' not found"
ERROR_RAFFLE_NOT_FOUND_FMT = "Raffle '{}' not found"
ERROR_EMPTY_REASON = "An XP adjustment requires a non-empty reason."
ERROR_EVENT_NOT_SETTLEABLE_FMT = "Event '{}' cannot be finalized from status '{}'"
ERROR_RAFFLE_ALREADY_DRAWN_FMT = "Raffle '{}' has already been drawn"
ERROR_RAFFLE_NO_TICKETS_FMT = "Raffle '{}' has no tickets to draw from"
ERROR_RAFFLE_INVALID_PRIZES_FMT = "Raffle '{}' has invalid prizes: {}"
ERROR_NOT_AUTHORIZED_ACTION_FMT = "Not authorized to {}."
ERROR_NO_ENTRY_LOADED = "No League Ops instance is loaded."

ACTION_ADJUST_XP = "adjust XP"
ACTION_AWARD_BADGE = "award badges"
ACTION_MANAGE_LEGENDARY_BADGES = "manage legendary badges"
ACTION_FINALIZE_EVENT = "finalize events"
ACTION_DRAW_RAFFLE = "draw raffles"

TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
