"""Config flow for the League Ops integration.

League Ops keeps all league data in its own storage file, so the flow only
creates the (single) config entry.
"""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries
from homeassistant.config_entries import ConfigFlowResult

from . import const


class LeagueOpsConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for League Ops."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Create the League Ops entry after a confirmation step."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is None:
            return self.async_show_form(step_id="user")

        const.LOGGER.info("INFO: Creating League Ops config entry")
        return self.async_create_entry(title=const.LEAGUE_OPS_TITLE, data={})
