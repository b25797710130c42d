"""Raffle Manager - Guarded raffle draws.

RaffleEngine draws without checking status; this manager refuses to draw a
Completed raffle, an empty ticket pool or an invalid prize list, and persists
the drawn raffle.
"""

from __future__ import annotations

import asyncio
import random
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError, ServiceValidationError

from .. import const
from ..engines import RaffleEngine
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import LeagueOpsCoordinator
    from ..type_defs import RaffleData


class RaffleManager(BaseManager):
    """Manager for raffle draws."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: LeagueOpsCoordinator,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the RaffleManager.

        Args:
            rng: Random source handed to RaffleEngine; None uses SystemRandom
        """
        super().__init__(hass, coordinator)
        self._lock = asyncio.Lock()
        self.rng = rng

    async def async_setup(self) -> None:
        """Nothing to subscribe to; draws are service-driven."""

    def get_raffle(self, raffle_id: str) -> RaffleData:
        """Return a stored raffle or raise HomeAssistantError."""
        raffle = self.coordinator.raffles_data.get(raffle_id)
        if raffle is None:
            raise HomeAssistantError(const.ERROR_RAFFLE_NOT_FOUND_FMT.format(raffle_id))
        return raffle

    async def draw_raffle(self, raffle_id: str) -> dict[str, Any]:
        """Draw winners for a raffle and persist the result.

        Raises:
            HomeAssistantError: if the raffle does not exist
            ServiceValidationError: if already drawn, no tickets or bad prizes
        """
        async with self._lock:
            raffle = self.get_raffle(raffle_id)
            if raffle.get(const.DATA_RAFFLE_STATUS) == const.RAFFLE_STATUS_COMPLETED:
                raise ServiceValidationError(
                    const.ERROR_RAFFLE_ALREADY_DRAWN_FMT.format(raffle_id)
                )
            if not raffle.get(const.DATA_RAFFLE_TICKETS):
                raise ServiceValidationError(
                    const.ERROR_RAFFLE_NO_TICKETS_FMT.format(raffle_id)
                )
            problems = RaffleEngine.validate_prizes(raffle.get(const.DATA_RAFFLE_PRIZES))
            if problems:
                raise ServiceValidationError(
                    const.ERROR_RAFFLE_INVALID_PRIZES_FMT.format(
                        raffle_id, "; ".join(problems)
                    )
                )

            result = RaffleEngine.draw(raffle, self.rng)
            self.coordinator.raffles_data[raffle_id] = result["raffle"]
            await self.coordinator.async_persist()

        winners = result["winners"]
        self.emit(const.SIGNAL_SUFFIX_RAFFLE_DRAWN, raffle_id=raffle_id, winners=winners)
        const.LOGGER.info(
            "INFO: Raffle '%s' drawn with %s winners", raffle_id, len(winners)
        )
        return {"raffle_id": raffle_id, "winners": winners}
