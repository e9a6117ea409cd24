"""Data update coordinator for the Eufy Security integration."""

from __future__ import annotations

import logging

from eufy_security_lib import DirectorySnapshot, ErrorKind, SessionState

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .const import DEFAULT_SCAN_INTERVAL, DOMAIN
from .hub import EufySecurityHub

_LOGGER = logging.getLogger(__name__)


class EufySecurityDataUpdateCoordinator(DataUpdateCoordinator[DirectorySnapshot]):
    """Poll the hub and device directory."""

    def __init__(self, hass: HomeAssistant, hub: EufySecurityHub, entry: ConfigEntry) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            config_entry=entry,
            update_interval=DEFAULT_SCAN_INTERVAL,
        )
        self._hub = hub

    async def _async_update_data(self) -> DirectorySnapshot:
        result = await self._hub.async_refresh()
        api = self._hub.api
        if api is not None and api.state is SessionState.AWAITING_2FA:
            raise ConfigEntryAuthFailed("Two-factor verification required")
        if not result.ok:
            # A rejected re-login leaves no token behind.
            if api is not None and api.token is None:
                auth_error = api.last_auth_error
                if auth_error is not None and auth_error.kind is ErrorKind.BUSINESS:
                    raise ConfigEntryAuthFailed(f"Login rejected: {auth_error}")
            raise UpdateFailed(f"Directory refresh failed: {result.error}")
        return self._hub.get_snapshot()
