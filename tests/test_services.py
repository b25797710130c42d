"""Tests for League Ops services.

This module tests:
- Service registration and unregistration
- Admin authorization (admin and system calls allowed, other users refused)
- Schema validation and error mapping
- Service responses for finalize_event, draw_raffle and get_player_progress
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import Context
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
import pytest
import voluptuous as vol

from custom_components.league_ops import const
from custom_components.league_ops.services import SERVICES
from tests.helpers.setup import SetupResult, setup_from_yaml

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
async def scenario_league(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
) -> SetupResult:
    """Load league scenario."""
    return await setup_from_yaml(
        hass,
        hass_storage,
        "tests/scenarios/scenario_league.yaml",
    )


# ============================================================================
# REGISTRATION
# ============================================================================


async def test_services_registered(
    hass: HomeAssistant, scenario_league: SetupResult
) -> None:
    """Every service is registered once the entry is loaded."""
    for service in SERVICES:
        assert hass.services.has_service(const.DOMAIN, service)


async def test_services_removed_on_unload(
    hass: HomeAssistant, scenario_league: SetupResult
) -> None:
    """Unloading the only entry removes the services."""
    assert await hass.config_entries.async_unload(scenario_league.config_entry.entry_id)
    await hass.async_block_till_done()

    for service in SERVICES:
        assert not hass.services.has_service(const.DOMAIN, service)


# ============================================================================
# ADJUST XP
# ============================================================================


async def test_adjust_xp_as_admin(
    hass: HomeAssistant,
    scenario_league: SetupResult,
    mock_hass_users: dict[str, Any],
) -> None:
    """Admins can adjust XP."""
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_ADJUST_XP,
        {"player_id": "p001", "amount": "40", "reason": "Marshal assist"},
        blocking=True,
        context=Context(user_id=mock_hass_users["admin"].id),
    )

    player = scenario_league.coordinator.players_data["p001"]
    assert player["stats"]["xp"] == 940
    assert player["xp_adjustments"][-1]["reason"] == "Marshal assist"


async def test_adjust_xp_without_user(
    hass: HomeAssistant, scenario_league: SetupResult
) -> None:
    """Automation calls (no user) are allowed."""
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_ADJUST_XP,
        {"player_id": "p003", "amount": -10, "reason": "Automation penalty"},
        blocking=True,
    )

    assert scenario_league.coordinator.players_data["p003"]["stats"]["xp"] == 90


async def test_adjust_xp_non_admin_refused(
    hass: HomeAssistant,
    scenario_league: SetupResult,
    mock_hass_users: dict[str, Any],
) -> None:
    """Non-admin users cannot adjust XP."""
    with pytest.raises(HomeAssistantError) as exc_info:
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_ADJUST_XP,
            {"player_id": "p001", "amount": 1000, "reason": "Self promotion"},
            blocking=True,
            context=Context(user_id=mock_hass_users["marshal"].id),
        )

    assert const.ACTION_ADJUST_XP in str(exc_info.value)
    assert scenario_league.coordinator.players_data["p001"]["stats"]["xp"] == 900


async def test_adjust_xp_empty_reason(
    hass: HomeAssistant, scenario_league: SetupResult
) -> None:
    """An empty reason is a validation error."""
    with pytest.raises(ServiceValidationError):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_ADJUST_XP,
            {"player_id": "p001", "amount": 10, "reason": "  "},
            blocking=True,
        )


async def test_adjust_xp_schema_rejects_bad_amount(
    hass: HomeAssistant, scenario_league: SetupResult
) -> None:
    """Non-numeric amounts fail schema validation."""
    with pytest.raises(vol.Invalid):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_ADJUST_XP,
            {"player_id": "p001", "amount": "lots", "reason": "bonus"},
            blocking=True,
        )


# ============================================================================
# BADGES
# ============================================================================


async def test_award_and_legendary_badges(
    hass: HomeAssistant, scenario_league: SetupResult
) -> None:
    """Badge services write to the player."""
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_AWARD_BADGE,
        {"player_id": "p002", "badge_id": "b_marshal_pick"},
        blocking=True,
    )
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_GRANT_LEGENDARY_BADGE,
        {"player_id": "p002", "badge_id": "lb_founder"},
        blocking=True,
    )

    player = scenario_league.coordinator.players_data["p002"]
    assert player["badges"] == ["b_marshal_pick"]
    assert player["legendary_badges"] == ["lb_founder"]

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_REVOKE_LEGENDARY_BADGE,
        {"player_id": "p002", "badge_id": "lb_founder"},
        blocking=True,
    )

    assert player["legendary_badges"] == []


# ============================================================================
# FINALIZE EVENT / DRAW RAFFLE
# ============================================================================


async def test_finalize_event_response(
    hass: HomeAssistant,
    scenario_league: SetupResult,
    mock_hass_users: dict[str, Any],
) -> None:
    """finalize_event returns the settlement summary on request."""
    response = await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_FINALIZE_EVENT,
        {"event_id": "ev001"},
        blocking=True,
        return_response=True,
        context=Context(user_id=mock_hass_users["admin"].id),
    )

    assert response["xp_awards"] == {"p001": 131, "p002": 120, "p003": -50}
    assert response["revenue_total"] == 125.0


async def test_finalize_event_twice(
    hass: HomeAssistant, scenario_league: SetupResult
) -> None:
    """The second finalize call is a validation error."""
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_FINALIZE_EVENT,
        {"event_id": "ev001"},
        blocking=True,
    )

    with pytest.raises(ServiceValidationError):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_FINALIZE_EVENT,
            {"event_id": "ev001"},
            blocking=True,
        )


async def test_draw_raffle_response(
    hass: HomeAssistant, scenario_league: SetupResult
) -> None:
    """draw_raffle returns the winners on request."""
    response = await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_DRAW_RAFFLE,
        {"raffle_id": "r001"},
        blocking=True,
        return_response=True,
    )

    assert response["raffle_id"] == "r001"
    assert len(response["winners"]) == 3


async def test_draw_raffle_non_admin_refused(
    hass: HomeAssistant,
    scenario_league: SetupResult,
    mock_hass_users: dict[str, Any],
) -> None:
    """Non-admin users cannot draw raffles."""
    with pytest.raises(HomeAssistantError):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_DRAW_RAFFLE,
            {"raffle_id": "r001"},
            blocking=True,
            context=Context(user_id=mock_hass_users["marshal"].id),
        )

    raffle = scenario_league.coordinator.raffles_data["r001"]
    assert raffle["status"] == const.RAFFLE_STATUS_ACTIVE


# ============================================================================
# PLAYER PROGRESS
# ============================================================================


async def test_get_player_progress(
    hass: HomeAssistant,
    scenario_league: SetupResult,
    mock_hass_users: dict[str, Any],
) -> None:
    """Any user may read progress."""
    response = await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_GET_PLAYER_PROGRESS,
        {"player_id": "p002"},
        blocking=True,
        return_response=True,
        context=Context(user_id=mock_hass_users["marshal"].id),
    )

    assert response["xp"] == 400
    assert response["rank"] == "Recruit"
    assert response["badges"]["b_kills_50"]["text"] == "48 / 50"


async def test_get_player_progress_unknown(
    hass: HomeAssistant, scenario_league: SetupResult
) -> None:
    """Unknown players raise."""
    with pytest.raises(HomeAssistantError):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_GET_PLAYER_PROGRESS,
            {"player_id": "p999"},
            blocking=True,
            return_response=True,
        )
