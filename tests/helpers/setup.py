"""Setup helpers for League Ops test configuration.

Scenarios are YAML files holding the storage document directly (ranks,
players, events, ...). setup_from_yaml() seeds hass_storage with it, adds a
config entry and sets the integration up, so tests start from a loaded
coordinator.

Example:
    result = await setup_from_yaml(
        hass,
        hass_storage,
        "tests/scenarios/scenario_league.yaml",
    )
    coordinator = result.coordinator
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry
import yaml

from custom_components.league_ops import const
from custom_components.league_ops.coordinator import LeagueOpsCoordinator
from custom_components.league_ops.store import LeagueOpsStore

# =============================================================================
# DATACLASSES
# =============================================================================


@dataclass
class SetupResult:
    """Result from setup_from_yaml.

    Attributes:
        config_entry: The loaded ConfigEntry
        coordinator: The LeagueOpsCoordinator instance
    """

    config_entry: ConfigEntry
    coordinator: LeagueOpsCoordinator


# =============================================================================
# LOADERS
# =============================================================================


def load_scenario_data(yaml_path: str | Path) -> dict[str, Any]:
    """Load a scenario YAML file merged over the default storage structure.

    Args:
        yaml_path: Path to YAML scenario file (absolute or relative to workspace)
    """
    path = Path(yaml_path)
    if not path.is_absolute():
        # Relative paths are resolved from the workspace root
        workspace_root = Path(__file__).parent.parent.parent
        path = workspace_root / path

    if not path.exists():
        raise FileNotFoundError(f"Scenario YAML not found: {path}")

    with open(path, encoding="utf-8") as f:
        yaml_data = yaml.safe_load(f) or {}

    data = LeagueOpsStore.get_default_structure()
    data.update(yaml_data)
    return data


async def setup_from_yaml(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
    yaml_path: str | Path,
) -> SetupResult:
    """Seed storage from a scenario file and set up League Ops.

    Args:
        hass: Home Assistant instance
        hass_storage: Storage fixture from pytest-homeassistant-custom-component
        yaml_path: Path to YAML scenario file

    Returns:
        SetupResult with config_entry and coordinator
    """
    hass_storage[const.STORAGE_KEY] = {
        "version": const.STORAGE_VERSION,
        "minor_version": 1,
        "key": const.STORAGE_KEY,
        "data": load_scenario_data(yaml_path),
    }

    config_entry = MockConfigEntry(
        domain=const.DOMAIN,
        title=const.LEAGUE_OPS_TITLE,
        data={},
        entry_id="test_entry_id",
    )
    config_entry.add_to_hass(hass)

    assert await hass.config_entries.async_setup(config_entry.entry_id)
    await hass.async_block_till_done()

    return SetupResult(config_entry=config_entry, coordinator=config_entry.runtime_data)
