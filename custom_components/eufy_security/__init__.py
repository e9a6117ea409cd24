"""Set up the Eufy Security integration."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_VENDOR_PATH = Path(__file__).resolve().parent / "vendor" / "eufy"
if _VENDOR_PATH.exists() and str(_VENDOR_PATH) not in sys.path:
    sys.path.insert(0, str(_VENDOR_PATH))

from eufy_security_lib import InvalidCountryCodeError
from eufy_security_lib.types import DEFAULT_API_BASE

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed

from .const import CONF_API_BASE, CONF_SERIAL_NUMBER, DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import EufySecurityDataUpdateCoordinator
from .hub import EufySecurityHub
from .identity import async_get_serial_number

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [Platform.SENSOR]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Eufy Security from a config entry."""
    if not entry.data.get(CONF_SERIAL_NUMBER):
        serial_number = await async_get_serial_number(
            hass, entry.data.get(CONF_API_BASE) or DEFAULT_API_BASE
        )
        hass.config_entries.async_update_entry(
            entry,
            data={**entry.data, CONF_SERIAL_NUMBER: serial_number},
        )

    hub = EufySecurityHub(hass, entry)
    try:
        await hub.async_connect()
    except InvalidCountryCodeError as err:
        raise ConfigEntryAuthFailed("Stored country code is invalid") from err

    coordinator = EufySecurityDataUpdateCoordinator(hass, hub, entry)
    await coordinator.async_config_entry_first_refresh()
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        DATA_HUB: hub,
        DATA_COORDINATOR: coordinator,
    }
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a Eufy Security config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    if data is not None:
        hub: EufySecurityHub | None = data.get(DATA_HUB)
        if hub is not None:
            await hub.async_disconnect()
    return unload_ok
