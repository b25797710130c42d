# File: utils/__init__.py
"""Pure Python utilities for League Ops.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Timestamp helpers
    - math_utils: Currency rounding and progress calculations

Usage:
    from . import dt_utils
    from .math_utils import round_currency
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
