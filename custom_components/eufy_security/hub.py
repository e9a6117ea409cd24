"""Hub wrapper for the Eufy Security client lifecycle."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime, timezone
import logging
from typing import Any

from eufy_security_lib import (
    AuthResult,
    ClientConfig,
    DirectorySnapshot,
    ErrorKind,
    EufyError,
    EufySecurityApi,
    Result,
    SessionClosed,
    SessionConnected,
    SessionEvent,
)
from eufy_security_lib.types import DEFAULT_API_BASE

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.core import HomeAssistant, callback
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .const import (
    CONF_API_BASE,
    CONF_COUNTRY,
    CONF_OPENUDID,
    CONF_SERIAL_NUMBER,
    CONF_TOKEN,
    CONF_TOKEN_EXPIRATION,
    DEFAULT_COUNTRY,
)

_LOGGER = logging.getLogger(__name__)

_TRANSIENT_KINDS = frozenset({ErrorKind.TRANSPORT, ErrorKind.HTTP_STATUS})


def is_transient_failure(error: EufyError | None) -> bool:
    """Return True when a failure should be retried rather than reauthenticated."""
    return error is not None and error.kind in _TRANSIENT_KINDS


def session_data(api: EufySecurityApi) -> dict[str, Any]:
    """Return the persisted session fields for a config entry."""
    expiration = api.token_expiration
    return {
        CONF_TOKEN: api.token,
        CONF_TOKEN_EXPIRATION: expiration.timestamp() if expiration is not None else None,
        CONF_API_BASE: api.api_base,
    }


def restore_session(api: EufySecurityApi, data: Mapping[str, Any]) -> None:
    """Restore a session saved by session_data()."""
    token = data.get(CONF_TOKEN)
    expiration = data.get(CONF_TOKEN_EXPIRATION)
    if not token:
        return
    api.set_token(token)
    if isinstance(expiration, (int, float)):
        api.set_token_expiration(datetime.fromtimestamp(expiration, tz=timezone.utc))


def build_api(hass: HomeAssistant, data: Mapping[str, Any]) -> EufySecurityApi:
    """Create a client bound to Home Assistant's shared aiohttp session."""
    api = EufySecurityApi(
        data[CONF_USERNAME],
        data[CONF_PASSWORD],
        session=async_get_clientsession(hass),
        config=ClientConfig(
            api_base=data.get(CONF_API_BASE) or DEFAULT_API_BASE,
            logger_name=__package__,
        ),
    )
    api.set_country(data.get(CONF_COUNTRY) or DEFAULT_COUNTRY)
    if data.get(CONF_OPENUDID):
        api.set_openudid(data[CONF_OPENUDID])
    if data.get(CONF_SERIAL_NUMBER):
        api.set_serial_number(data[CONF_SERIAL_NUMBER])
    return api


class EufySecurityHub:
    """Manage a single EufySecurityApi instance for one config entry."""

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        """Initialize the hub wrapper."""
        self._hass = hass
        self._entry = entry
        self._api: EufySecurityApi | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._unavailable_logged = False

    @property
    def api(self) -> EufySecurityApi | None:
        """Return the underlying client."""
        return self._api

    def get_snapshot(self) -> DirectorySnapshot:
        """Return the latest directory snapshot."""
        if self._api is None:
            return DirectorySnapshot.empty()
        return self._api.snapshot()

    async def async_connect(self) -> None:
        """Create the client, restore the stored session and log in if needed."""
        await self.async_disconnect()
        api = build_api(self._hass, self._entry.data)
        restore_session(api, self._entry.data)
        self._api = api
        self._unsubscribe = api.subscribe(
            self._handle_session_event,
            kinds=(SessionConnected.KIND, SessionClosed.KIND),
        )
        if api.session.has_valid_token():
            _LOGGER.debug("Restored stored session for %s", api.api_base)
            return
        await self._async_login(api)

    async def _async_login(self, api: EufySecurityApi) -> None:
        result = await api.authenticate()
        if result is AuthResult.RENEW:
            result = await api.authenticate()
        if result is AuthResult.OK:
            self._persist_session()
            return
        if result is AuthResult.SEND_VERIFY_CODE:
            raise ConfigEntryAuthFailed("Two-factor verification required")
        error = api.last_auth_error
        if is_transient_failure(error):
            raise ConfigEntryNotReady(f"Eufy cloud unreachable: {error}")
        raise ConfigEntryAuthFailed(f"Login rejected: {error}")

    async def async_disconnect(self) -> None:
        """Unregister event handlers and drop the client."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._api = None

    async def async_refresh(self) -> Result[None]:
        """Refresh hubs and devices, persisting any token renewed on the way."""
        api = self._api
        if api is None:
            raise ConfigEntryNotReady("Client is not connected.")
        result = await api.update_device_info()
        self._persist_session()
        return result

    def _persist_session(self) -> None:
        api = self._api
        if api is None:
            return
        data = session_data(api)
        if all(self._entry.data.get(key) == value for key, value in data.items()):
            return
        self._hass.config_entries.async_update_entry(
            self._entry, data={**self._entry.data, **data}
        )

    @callback
    def _handle_session_event(self, event: SessionEvent) -> None:
        if isinstance(event, SessionClosed):
            self._log_unavailable(event.reason)
        elif isinstance(event, SessionConnected) and self._unavailable_logged:
            _LOGGER.info("Eufy cloud session restored")
            self._unavailable_logged = False

    def _log_unavailable(self, reason: str | None) -> None:
        if self._unavailable_logged:
            return
        _LOGGER.warning("Eufy cloud session lost: %s", reason or "unknown")
        self._unavailable_logged = True
