"""Authorization helper functions for League Ops.

Functions that check user permissions for League Ops operations.
All functions here require a `hass` object for auth system access.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.config_entries import ConfigEntryState

from .. import const

if TYPE_CHECKING:
    from homeassistant.auth.models import User
    from homeassistant.core import HomeAssistant

    from ..coordinator import LeagueOpsCoordinator


# ==============================================================================
# Coordinator Access
# ==============================================================================


def get_league_ops_coordinator(hass: HomeAssistant) -> LeagueOpsCoordinator | None:
    """Retrieve the League Ops coordinator from config entry runtime_data.

    Returns:
        LeagueOpsCoordinator of the first loaded entry, None otherwise
    """
    for entry in hass.config_entries.async_entries(const.DOMAIN):
        if entry.state is ConfigEntryState.LOADED:
            return entry.runtime_data
    return None


# ==============================================================================
# Authorization Checks
# ==============================================================================


async def is_user_authorized_for_global_action(
    hass: HomeAssistant,
    user_id: str | None,
    action: str,
) -> bool:
    """Check if a user may run an administrative League Ops action.

    Authorization rules:
      - No user (automations, scripts) => authorized
      - Admin users => authorized
      - Everyone else => not authorized

    Args:
        hass: HomeAssistant instance
        user_id: User ID from the service call context
        action: Action name for logging purposes

    Returns:
        True if authorized, False otherwise
    """
    if not user_id:
        return True

    user: User | None = await hass.auth.async_get_user(user_id)
    if not user:
        const.LOGGER.warning("WARNING: %s: Invalid user ID '%s'", action, user_id)
        return False

    if user.is_admin:
        return True

    const.LOGGER.warning(
        "WARNING: %s: Non-admin user '%s' is not authorized", action, user.name
    )
    return False
