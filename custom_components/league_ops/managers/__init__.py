"""Manager modules for League Ops integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager
from .event_manager import EventManager
from .progression_manager import ProgressionManager
from .raffle_manager import RaffleManager

__all__ = [
    "BaseManager",
    "EventManager",
    "ProgressionManager",
    "RaffleManager",
]
