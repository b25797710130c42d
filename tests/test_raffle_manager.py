"""Integration tests for RaffleManager.

Tests guarded raffle draws against the league scenario: r001 is drawable,
r002 has no tickets and r003 was already drawn.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
import pytest

from custom_components.league_ops import const
from tests.helpers.setup import SetupResult, setup_from_yaml

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


@pytest.fixture
async def scenario_league(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
) -> SetupResult:
    """Load league scenario with a seeded raffle random source."""
    result = await setup_from_yaml(
        hass,
        hass_storage,
        "tests/scenarios/scenario_league.yaml",
    )
    result.coordinator.raffle_manager.rng = random.Random(2026)
    return result


class TestDrawRaffle:
    """Tests for RaffleManager.draw_raffle()."""

    @pytest.mark.asyncio
    async def test_draw_three_winners(
        self,
        scenario_league: SetupResult,
        mock_dispatcher_send: MagicMock,
    ) -> None:
        """Three prizes, five tickets: three distinct winning tickets."""
        coordinator = scenario_league.coordinator

        result = await coordinator.raffle_manager.draw_raffle("r001")

        winners = result["winners"]
        assert result["raffle_id"] == "r001"
        assert [w["prize_id"] for w in winners] == ["prize_1", "prize_2", "prize_3"]
        assert len({w["ticket_id"] for w in winners}) == 3

        raffle = coordinator.raffles_data["r001"]
        assert raffle["status"] == const.RAFFLE_STATUS_COMPLETED
        assert raffle["winners"] == winners
        assert len(raffle["tickets"]) == 5

        signals = [
            call.args[2]
            for call in mock_dispatcher_send.call_args_list
            if call.args[1].endswith(const.SIGNAL_SUFFIX_RAFFLE_DRAWN)
        ]
        assert signals == [{"raffle_id": "r001", "winners": winners}]

    @pytest.mark.asyncio
    async def test_draw_is_reproducible_with_seed(
        self,
        hass: HomeAssistant,
        hass_storage: dict[str, Any],
    ) -> None:
        """The injected random source decides the winners."""
        first = await setup_from_yaml(
            hass, hass_storage, "tests/scenarios/scenario_league.yaml"
        )
        first.coordinator.raffle_manager.rng = random.Random(99)
        drawn = await first.coordinator.raffle_manager.draw_raffle("r001")

        expected = random.Random(99)
        pool = ["t1", "t2", "t3", "t4", "t5"]
        expected_tickets = [pool.pop(expected.randrange(len(pool))) for _ in range(3)]

        assert [w["ticket_id"] for w in drawn["winners"]] == expected_tickets

    @pytest.mark.asyncio
    async def test_draw_persists(
        self,
        scenario_league: SetupResult,
        hass_storage: dict[str, Any],
    ) -> None:
        """The drawn raffle reaches storage."""
        await scenario_league.coordinator.raffle_manager.draw_raffle("r001")

        stored = hass_storage[const.STORAGE_KEY]["data"]["raffles"]["r001"]
        assert stored["status"] == const.RAFFLE_STATUS_COMPLETED
        assert len(stored["winners"]) == 3

    @pytest.mark.asyncio
    async def test_redraw_refused(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """A Completed raffle keeps its original winners."""
        coordinator = scenario_league.coordinator
        before = list(coordinator.raffles_data["r003"]["winners"])

        with pytest.raises(ServiceValidationError):
            await coordinator.raffle_manager.draw_raffle("r003")

        assert coordinator.raffles_data["r003"]["winners"] == before

    @pytest.mark.asyncio
    async def test_second_draw_refused(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Drawing r001 twice is refused the second time."""
        manager = scenario_league.coordinator.raffle_manager
        await manager.draw_raffle("r001")

        with pytest.raises(ServiceValidationError):
            await manager.draw_raffle("r001")

    @pytest.mark.asyncio
    async def test_no_tickets_refused(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """An empty pool is reported and the raffle stays Active."""
        coordinator = scenario_league.coordinator

        with pytest.raises(ServiceValidationError):
            await coordinator.raffle_manager.draw_raffle("r002")

        assert coordinator.raffles_data["r002"]["status"] == const.RAFFLE_STATUS_ACTIVE

    @pytest.mark.asyncio
    async def test_invalid_prizes_refused(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Duplicate prize places block the draw."""
        coordinator = scenario_league.coordinator
        coordinator.raffles_data["r001"]["prizes"][0]["place"] = 1

        with pytest.raises(ServiceValidationError) as exc_info:
            await coordinator.raffle_manager.draw_raffle("r001")

        assert "place 1" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unknown_raffle(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Unknown ids raise HomeAssistantError."""
        with pytest.raises(HomeAssistantError):
            await scenario_league.coordinator.raffle_manager.draw_raffle("r404")
