"""Defines custom services for the League Ops integration.

These services are the admin surface of the progression and settlement
engine: manual XP adjustments, badge awards, event finalization and raffle
draws. Calls made by a user require an admin; calls without a user
(automations, scripts) are allowed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall, ServiceResponse, SupportsResponse
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from homeassistant.helpers import config_validation as cv

from . import const
from .engines import InvalidXpAdjustmentError
from .helpers.auth_helpers import (
    get_league_ops_coordinator,
    is_user_authorized_for_global_action,
)

if TYPE_CHECKING:
    from .coordinator import LeagueOpsCoordinator

# --- Service Schemas ---
ADJUST_XP_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_PLAYER_ID): cv.string,
        vol.Required(const.FIELD_AMOUNT): vol.Coerce(int),
        vol.Required(const.FIELD_REASON): cv.string,
    }
)

PLAYER_BADGE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_PLAYER_ID): cv.string,
        vol.Required(const.FIELD_BADGE_ID): cv.string,
    }
)

FINALIZE_EVENT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_EVENT_ID): cv.string,
    }
)

DRAW_RAFFLE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_RAFFLE_ID): cv.string,
    }
)

PLAYER_PROGRESS_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_PLAYER_ID): cv.string,
    }
)

SERVICES = (
    const.SERVICE_ADJUST_XP,
    const.SERVICE_AWARD_BADGE,
    const.SERVICE_GRANT_LEGENDARY_BADGE,
    const.SERVICE_REVOKE_LEGENDARY_BADGE,
    const.SERVICE_FINALIZE_EVENT,
    const.SERVICE_DRAW_RAFFLE,
    const.SERVICE_GET_PLAYER_PROGRESS,
)


def _get_coordinator(hass: HomeAssistant) -> LeagueOpsCoordinator:
    coordinator = get_league_ops_coordinator(hass)
    if coordinator is None:
        raise HomeAssistantError(const.ERROR_NO_ENTRY_LOADED)
    return coordinator


async def _authorize(hass: HomeAssistant, call: ServiceCall, action: str) -> None:
    if not await is_user_authorized_for_global_action(
        hass, call.context.user_id, action
    ):
        raise HomeAssistantError(const.ERROR_NOT_AUTHORIZED_ACTION_FMT.format(action))


def async_setup_services(hass: HomeAssistant) -> None:
    """Register League Ops services."""

    async def handle_adjust_xp(call: ServiceCall) -> None:
        """Handle a manual XP adjustment."""
        await _authorize(hass, call, const.ACTION_ADJUST_XP)
        coordinator = _get_coordinator(hass)
        try:
            await coordinator.progression_manager.adjust_xp(
                call.data[const.FIELD_PLAYER_ID],
                call.data[const.FIELD_AMOUNT],
                call.data[const.FIELD_REASON],
            )
        except InvalidXpAdjustmentError as err:
            const.LOGGER.warning("WARNING: Adjust XP: %s", err)
            raise ServiceValidationError(const.ERROR_EMPTY_REASON) from err

    async def handle_award_badge(call: ServiceCall) -> None:
        """Handle awarding a standard badge."""
        await _authorize(hass, call, const.ACTION_AWARD_BADGE)
        coordinator = _get_coordinator(hass)
        await coordinator.progression_manager.award_badge(
            call.data[const.FIELD_PLAYER_ID], call.data[const.FIELD_BADGE_ID]
        )

    async def handle_grant_legendary_badge(call: ServiceCall) -> None:
        """Handle granting a legendary badge."""
        await _authorize(hass, call, const.ACTION_MANAGE_LEGENDARY_BADGES)
        coordinator = _get_coordinator(hass)
        await coordinator.progression_manager.set_legendary_badge(
            call.data[const.FIELD_PLAYER_ID],
            call.data[const.FIELD_BADGE_ID],
            granted=True,
        )

    async def handle_revoke_legendary_badge(call: ServiceCall) -> None:
        """Handle revoking a legendary badge."""
        await _authorize(hass, call, const.ACTION_MANAGE_LEGENDARY_BADGES)
        coordinator = _get_coordinator(hass)
        await coordinator.progression_manager.set_legendary_badge(
            call.data[const.FIELD_PLAYER_ID],
            call.data[const.FIELD_BADGE_ID],
            granted=False,
        )

    async def handle_finalize_event(call: ServiceCall) -> ServiceResponse:
        """Handle finalizing an event."""
        await _authorize(hass, call, const.ACTION_FINALIZE_EVENT)
        coordinator = _get_coordinator(hass)
        summary = await coordinator.event_manager.finalize_event(
            call.data[const.FIELD_EVENT_ID]
        )
        return summary if call.return_response else None

    async def handle_draw_raffle(call: ServiceCall) -> ServiceResponse:
        """Handle drawing a raffle."""
        await _authorize(hass, call, const.ACTION_DRAW_RAFFLE)
        coordinator = _get_coordinator(hass)
        result: dict[str, Any] = await coordinator.raffle_manager.draw_raffle(
            call.data[const.FIELD_RAFFLE_ID]
        )
        return result if call.return_response else None

    async def handle_get_player_progress(call: ServiceCall) -> ServiceResponse:
        """Return a player's rank, badge progress and career summary."""
        coordinator = _get_coordinator(hass)
        return coordinator.progression_manager.get_player_progress(
            call.data[const.FIELD_PLAYER_ID]
        )

    hass.services.async_register(
        const.DOMAIN, const.SERVICE_ADJUST_XP, handle_adjust_xp, schema=ADJUST_XP_SCHEMA
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_AWARD_BADGE,
        handle_award_badge,
        schema=PLAYER_BADGE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GRANT_LEGENDARY_BADGE,
        handle_grant_legendary_badge,
        schema=PLAYER_BADGE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_REVOKE_LEGENDARY_BADGE,
        handle_revoke_legendary_badge,
        schema=PLAYER_BADGE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_FINALIZE_EVENT,
        handle_finalize_event,
        schema=FINALIZE_EVENT_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DRAW_RAFFLE,
        handle_draw_raffle,
        schema=DRAW_RAFFLE_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_PLAYER_PROGRESS,
        handle_get_player_progress,
        schema=PLAYER_PROGRESS_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )

    const.LOGGER.debug("DEBUG: League Ops services have been registered")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister League Ops services when unloading the integration."""
    for service in SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: League Ops services have been unregistered")
