"""Raffle Engine - Pure logic for drawing raffle winners.

Draws are without replacement: prizes are processed in ascending place order
and each winning ticket is removed from the pool before the next prize, so a
ticket can win at most once per draw. A player holding several tickets can
still win several prizes.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Status guards (no redraw of a Completed raffle) belong in RaffleManager.
"""

from __future__ import annotations

import copy
import random
from typing import TYPE_CHECKING

from .. import const
from ..data_builders import build_winner
from ..utils.dt_utils import dt_now_iso
from ..utils.math_utils import coerce_int

if TYPE_CHECKING:
    from ..type_defs import DrawResult, PrizeData, RaffleData, WinnerData


class RaffleEngine:
    """Pure logic engine for raffle draws.

    All methods are static - no instance state.
    """

    @staticmethod
    def validate_prizes(prizes: list[PrizeData] | None) -> list[str]:
        """Check that a raffle has 1-3 prizes with unique places in 1..3.

        Returns:
            List of problems (empty when valid)
        """
        problems: list[str] = []
        prizes = prizes or []

        if not prizes:
            problems.append("raffle has no prizes")
        if len(prizes) > const.RAFFLE_MAX_PRIZES:
            problems.append(
                f"raffle has {len(prizes)} prizes, maximum is {const.RAFFLE_MAX_PRIZES}"
            )

        seen: set[int] = set()
        for prize in prizes:
            place = coerce_int(prize.get(const.DATA_PRIZE_PLACE), default=-1)
            if place not in const.RAFFLE_PRIZE_PLACES:
                problems.append(
                    f"prize '{prize.get(const.DATA_PRIZE_NAME)}' has invalid place {place}"
                )
            elif place in seen:
                problems.append(f"place {place} is used by more than one prize")
            seen.add(place)

        return problems

    @staticmethod
    def draw(
        raffle: RaffleData, rng: random.Random | None = None
    ) -> DrawResult:
        """Draw winners for a raffle's prizes from its ticket pool.

        Args:
            raffle: Raffle with prizes and tickets
            rng: Random source; defaults to a SystemRandom (OS entropy).
                 Tests pass a seeded random.Random for determinism.

        Returns:
            DrawResult with the winners and an updated copy of the raffle
            (winners set, status Completed). An empty ticket pool is a no-op:
            no winners and the raffle returned unchanged.
        """
        raffle_id = raffle.get(const.DATA_RAFFLE_ID)
        tickets = list(raffle.get(const.DATA_RAFFLE_TICKETS) or [])

        if not tickets:
            const.LOGGER.warning(
                "WARNING: Raffle '%s' has no tickets, nothing drawn", raffle_id
            )
            return {"winners": [], "raffle": copy.deepcopy(raffle)}

        rng = rng or random.SystemRandom()
        prizes = sorted(
            raffle.get(const.DATA_RAFFLE_PRIZES) or [],
            key=lambda prize: coerce_int(prize.get(const.DATA_PRIZE_PLACE)),
        )

        pool = tickets
        winners: list[WinnerData] = []
        for prize in prizes:
            if not pool:
                const.LOGGER.info(
                    "INFO: Raffle '%s' ran out of tickets after %s winners",
                    raffle_id,
                    len(winners),
                )
                break

            ticket = pool.pop(rng.randrange(len(pool)))
            winners.append(
                build_winner(
                    raffle_id,
                    prize.get(const.DATA_PRIZE_ID),
                    ticket.get(const.DATA_TICKET_ID),
                    ticket.get(const.DATA_TICKET_PLAYER_ID),
                )
            )

        updated = copy.deepcopy(raffle)
        updated[const.DATA_RAFFLE_WINNERS] = winners
        updated[const.DATA_RAFFLE_STATUS] = const.RAFFLE_STATUS_COMPLETED
        updated[const.DATA_RAFFLE_DRAWN_AT] = dt_now_iso()

        const.LOGGER.debug(
            "DEBUG: Raffle '%s' drawn: %s winners from %s tickets",
            raffle_id,
            len(winners),
            len(tickets),
        )
        return {"winners": winners, "raffle": updated}
