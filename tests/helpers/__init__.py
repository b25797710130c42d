"""Test helpers for League Ops."""

from .setup import SetupResult, load_scenario_data, setup_from_yaml

__all__ = ["SetupResult", "load_scenario_data", "setup_from_yaml"]
