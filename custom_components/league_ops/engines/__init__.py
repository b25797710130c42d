"""Engine modules for League Ops integration.

Contains specialized computation engines:
- tier_engine: Tier/Rank resolution from cumulative XP
- badge_engine: Standard badge progress evaluation
- xp_ledger_engine: Manual XP adjustments with Tier recomputation
- settlement_engine: Event settlement cascade
- raffle_engine: Raffle winner draws
"""

# Use relative imports within package to avoid mypy module resolution issues
from .badge_engine import BadgeEngine
from .raffle_engine import RaffleEngine
from .settlement_engine import SettlementEngine
from .tier_engine import TierEngine, unranked_tier
from .xp_ledger_engine import InvalidXpAdjustmentError, XpLedgerEngine

__all__ = [
    "BadgeEngine",
    "InvalidXpAdjustmentError",
    "RaffleEngine",
    "SettlementEngine",
    "TierEngine",
    "XpLedgerEngine",
    "unranked_tier",
]
