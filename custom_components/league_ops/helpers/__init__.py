"""Home Assistant-bound helper functions for League Ops.

This module contains functions that REQUIRE Home Assistant dependencies.

NOTE: Functions that need `hass` object belong here, NOT in utils/.

Submodules:
    - auth_helpers: Coordinator lookup and user authorization checks
    - signal_helpers: Instance-scoped dispatcher signal names
"""

from . import auth_helpers, signal_helpers

__all__ = ["auth_helpers", "signal_helpers"]
