"""Integration tests for ProgressionManager.

Tests the ProgressionManager's interaction with coordinator, storage and the
event system. These tests use the full integration setup with mocked Home
Assistant.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

from homeassistant.exceptions import HomeAssistantError
import pytest

from custom_components.league_ops import const
from custom_components.league_ops.engines import InvalidXpAdjustmentError
from tests.helpers.setup import SetupResult, setup_from_yaml

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


@pytest.fixture
async def scenario_league(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
) -> SetupResult:
    """Load league scenario: 3 players, 2 ranks, 3 badges, 3 raffles."""
    return await setup_from_yaml(
        hass,
        hass_storage,
        "tests/scenarios/scenario_league.yaml",
    )


def emitted(mock_send: MagicMock, suffix: str) -> list[dict[str, Any]]:
    """Payloads sent on signals ending with ``suffix``."""
    return [
        call.args[2] for call in mock_send.call_args_list if call.args[1].endswith(suffix)
    ]


class TestProgressionManagerSetup:
    """Tests for state prepared at setup."""

    @pytest.mark.asyncio
    async def test_cached_rank_refreshed_on_load(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Players get a cached tier resolved from their XP."""
        players = scenario_league.coordinator.players_data

        assert players["p001"]["rank"]["id"] == "tier_recruit_2"
        assert players["p002"]["rank"]["id"] == "tier_recruit_1"
        assert players["p003"]["rank"]["id"] == "tier_recruit_1"

    @pytest.mark.asyncio
    async def test_missing_fields_filled_on_load(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Stored players are normalized with empty collections."""
        player = scenario_league.coordinator.players_data["p003"]

        assert player["badges"] == []
        assert player["xp_adjustments"] == []
        assert player["status"] == const.PLAYER_STATUS_ACTIVE


class TestProgressionManagerAdjustXp:
    """Tests for ProgressionManager.adjust_xp()."""

    @pytest.mark.asyncio
    async def test_adjust_xp_updates_player_and_ledger(
        self,
        scenario_league: SetupResult,
        mock_dispatcher_send: MagicMock,
    ) -> None:
        """Penalty lowers XP and appends one ledger entry."""
        manager = scenario_league.coordinator.progression_manager

        updated = await manager.adjust_xp("p003", -50, "Late to safety briefing")

        assert updated["stats"]["xp"] == 50
        assert updated["xp_adjustments"][-1]["reason"] == "Late to safety briefing"
        assert scenario_league.coordinator.players_data["p003"] is updated
        assert emitted(mock_dispatcher_send, const.SIGNAL_SUFFIX_XP_ADJUSTED) == [
            {
                "player_id": "p003",
                "amount": -50,
                "reason": "Late to safety briefing",
                "new_xp": 50,
            }
        ]
        assert emitted(mock_dispatcher_send, const.SIGNAL_SUFFIX_RANK_CHANGED) == []

    @pytest.mark.asyncio
    async def test_adjust_xp_rank_up_awards_badge(
        self,
        scenario_league: SetupResult,
        mock_dispatcher_send: MagicMock,
    ) -> None:
        """Crossing into Veteran changes tier and earns the rank badge."""
        manager = scenario_league.coordinator.progression_manager

        updated = await manager.adjust_xp("p001", 150, "Tournament win")

        assert updated["stats"]["xp"] == 1050
        assert updated["rank"]["id"] == "tier_veteran_1"
        assert "b_veteran" in updated["badges"]

        rank_changes = emitted(mock_dispatcher_send, const.SIGNAL_SUFFIX_RANK_CHANGED)
        assert rank_changes == [
            {
                "player_id": "p001",
                "old_tier_id": "tier_recruit_2",
                "new_tier_id": "tier_veteran_1",
            }
        ]
        badge_signals = emitted(mock_dispatcher_send, const.SIGNAL_SUFFIX_BADGE_EARNED)
        assert badge_signals == [{"player_id": "p001", "badge_id": "b_veteran"}]

    @pytest.mark.asyncio
    async def test_adjust_xp_persists(
        self,
        scenario_league: SetupResult,
        hass_storage: dict[str, Any],
    ) -> None:
        """The write reaches storage."""
        manager = scenario_league.coordinator.progression_manager

        await manager.adjust_xp("p002", 25, "Helped set up the field")

        stored = hass_storage[const.STORAGE_KEY]["data"]["players"]["p002"]
        assert stored["stats"]["xp"] == 425
        assert stored["xp_adjustments"][0]["amount"] == 25

    @pytest.mark.asyncio
    async def test_adjust_xp_rejects_empty_reason(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Whitespace-only reasons are refused and nothing is written."""
        manager = scenario_league.coordinator.progression_manager

        with pytest.raises(InvalidXpAdjustmentError):
            await manager.adjust_xp("p001", 10, "   ")

        player = scenario_league.coordinator.players_data["p001"]
        assert player["stats"]["xp"] == 900
        assert player["xp_adjustments"] == []

    @pytest.mark.asyncio
    async def test_adjust_xp_unknown_player(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Unknown player ids raise HomeAssistantError."""
        manager = scenario_league.coordinator.progression_manager

        with pytest.raises(HomeAssistantError) as exc_info:
            await manager.adjust_xp("p999", 10, "bonus")

        assert "p999" in str(exc_info.value)


class TestProgressionManagerBadges:
    """Tests for admin badge awards and legendary badges."""

    @pytest.mark.asyncio
    async def test_award_badge_is_idempotent(
        self,
        scenario_league: SetupResult,
        mock_dispatcher_send: MagicMock,
    ) -> None:
        """A second award of the same badge is a no-op."""
        manager = scenario_league.coordinator.progression_manager

        assert await manager.award_badge("p003", "b_marshal_pick") is True
        assert await manager.award_badge("p003", "b_marshal_pick") is False

        player = scenario_league.coordinator.players_data["p003"]
        assert player["badges"] == ["b_marshal_pick"]
        assert len(emitted(mock_dispatcher_send, const.SIGNAL_SUFFIX_BADGE_EARNED)) == 1

    @pytest.mark.asyncio
    async def test_award_unknown_badge(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Badges that are not configured cannot be awarded."""
        manager = scenario_league.coordinator.progression_manager

        with pytest.raises(HomeAssistantError):
            await manager.award_badge("p003", "b_missing")

    @pytest.mark.asyncio
    async def test_grant_and_revoke_legendary(
        self,
        scenario_league: SetupResult,
        mock_dispatcher_send: MagicMock,
    ) -> None:
        """Grant, repeat grant, then revoke."""
        manager = scenario_league.coordinator.progression_manager
        players = scenario_league.coordinator.players_data

        assert await manager.set_legendary_badge("p002", "lb_founder", granted=True)
        assert players["p002"]["legendary_badges"] == ["lb_founder"]
        assert not await manager.set_legendary_badge("p002", "lb_founder", granted=True)

        assert await manager.set_legendary_badge("p002", "lb_founder", granted=False)
        assert players["p002"]["legendary_badges"] == []

        signals = emitted(
            mock_dispatcher_send, const.SIGNAL_SUFFIX_LEGENDARY_BADGE_CHANGED
        )
        assert [signal["granted"] for signal in signals] == [True, False]

    @pytest.mark.asyncio
    async def test_unknown_legendary_badge(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Legendary badges must be configured."""
        manager = scenario_league.coordinator.progression_manager

        with pytest.raises(HomeAssistantError):
            await manager.set_legendary_badge("p002", "lb_nope", granted=True)


class TestProgressionManagerReadOuts:
    """Tests for progress read-outs."""

    @pytest.mark.asyncio
    async def test_player_progress(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Rank, tier progress, badge progress and career in one view."""
        manager = scenario_league.coordinator.progression_manager

        progress = manager.get_player_progress("p001")

        assert progress["xp"] == 900
        assert progress["rank"] == "Recruit"
        assert progress["tier"]["id"] == "tier_recruit_2"
        assert progress["next_tier"]["id"] == "tier_veteran_1"
        assert progress["tier_progress"] == 80.0
        assert progress["badges"]["b_kills_50"]["text"] == "20 / 50"
        assert progress["badges"]["b_kills_50"]["percentage"] == 40.0
        assert progress["badges"]["b_veteran"]["text"] == "Reach Veteran Rank"
        assert progress["badges"]["b_marshal_pick"]["text"] == const.BADGE_TEXT_ADMIN_AWARDED
        assert progress["career"]["kd_ratio"] == 2.0
        assert progress["career"]["best_match"] is None
        assert progress["xp_adjustment_total"] == 0

    @pytest.mark.asyncio
    async def test_player_progress_reports_adjustment_total(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Manual adjustments are summed in the progress view."""
        manager = scenario_league.coordinator.progression_manager
        await manager.adjust_xp("p002", 75, "Field repair")
        await manager.adjust_xp("p002", -25, "Late check-in")

        progress = manager.get_player_progress("p002")

        assert progress["xp"] == 450
        assert progress["xp_adjustment_total"] == 50

    @pytest.mark.asyncio
    async def test_badge_progress_unknown_player(
        self,
        scenario_league: SetupResult,
    ) -> None:
        """Read-outs for unknown players raise."""
        manager = scenario_league.coordinator.progression_manager

        with pytest.raises(HomeAssistantError):
            manager.get_badge_progress("p999")
