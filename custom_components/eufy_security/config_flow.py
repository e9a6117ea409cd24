"""Config flow for the Eufy Security integration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from eufy_security_lib import AuthResult, EufySecurityApi
from eufy_security_lib.headers import is_valid_country
from eufy_security_lib.types import DEFAULT_API_BASE
import voluptuous as vol

from homeassistant.config_entries import ConfigEntry, ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.selector import selector

from .const import (
    CONF_API_BASE,
    CONF_COUNTRY,
    CONF_OPENUDID,
    CONF_SERIAL_NUMBER,
    CONF_VERIFY_CODE,
    DEFAULT_COUNTRY,
    DOMAIN,
)
from .hub import build_api, is_transient_failure, session_data
from .identity import async_get_serial_number, get_openudid

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_USERNAME): cv.string,
        vol.Required(CONF_PASSWORD): selector({"text": {"type": "password"}}),
        vol.Required(CONF_COUNTRY, default=DEFAULT_COUNTRY): cv.string,
    }
)

STEP_VERIFY_CODE_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_VERIFY_CODE): cv.string,
    }
)

STEP_REAUTH_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_PASSWORD): selector({"text": {"type": "password"}}),
    }
)


class EufySecurityConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Eufy Security."""

    VERSION = 1
    MINOR_VERSION = 1

    def __init__(self) -> None:
        """Initialize the flow."""
        self._data: dict[str, Any] = {}
        self._api: EufySecurityApi | None = None
        self._reauth_entry: ConfigEntry | None = None

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}
        if user_input is not None:
            username = user_input[CONF_USERNAME].strip()
            country = user_input[CONF_COUNTRY].strip().upper()
            if not is_valid_country(country):
                errors[CONF_COUNTRY] = "invalid_country"
            else:
                await self.async_set_unique_id(username.lower())
                self._abort_if_unique_id_configured()
                self._data = {
                    CONF_USERNAME: username,
                    CONF_PASSWORD: user_input[CONF_PASSWORD],
                    CONF_COUNTRY: country,
                    CONF_API_BASE: DEFAULT_API_BASE,
                    CONF_OPENUDID: get_openudid(),
                    CONF_SERIAL_NUMBER: await async_get_serial_number(
                        self.hass, DEFAULT_API_BASE
                    ),
                }
                return await self._async_login(errors, "user", STEP_USER_DATA_SCHEMA)

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_verify_code(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Complete two-factor verification with the emailed code."""
        errors: dict[str, str] = {}
        if user_input is not None:
            api = self._api
            if api is None:
                return self.async_abort(reason="missing_context")
            if await api.confirm_two_factor(user_input[CONF_VERIFY_CODE].strip()):
                return await self._async_finish(api)
            errors["base"] = "invalid_verify_code"

        return self.async_show_form(
            step_id="verify_code",
            data_schema=STEP_VERIFY_CODE_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_reauth(
        self, entry_data: Mapping[str, Any]
    ) -> ConfigFlowResult:
        """Handle reauth when the stored session or password is rejected."""
        entry_id = self.context.get("entry_id")
        self._reauth_entry = (
            self.hass.config_entries.async_get_entry(entry_id)
            if entry_id is not None
            else None
        )
        self._data = dict(entry_data)
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for the password again and log in."""
        errors: dict[str, str] = {}
        if user_input is not None:
            if self._reauth_entry is None:
                return self.async_abort(reason="missing_context")
            self._data[CONF_PASSWORD] = user_input[CONF_PASSWORD]
            return await self._async_login(
                errors, "reauth_confirm", STEP_REAUTH_DATA_SCHEMA
            )

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=STEP_REAUTH_DATA_SCHEMA,
            errors=errors,
            description_placeholders={"username": self._data.get(CONF_USERNAME, "")},
        )

    async def _async_login(
        self,
        errors: dict[str, str],
        step_id: str,
        data_schema: vol.Schema,
    ) -> ConfigFlowResult:
        """Log in with the collected data; RENEW is followed once."""
        api = build_api(self.hass, self._data)
        self._api = api
        result = await api.authenticate()
        if result is AuthResult.RENEW:
            result = await api.authenticate()

        if result is AuthResult.OK:
            return await self._async_finish(api)
        if result is AuthResult.SEND_VERIFY_CODE:
            return await self.async_step_verify_code()

        if is_transient_failure(api.last_auth_error):
            errors["base"] = "cannot_connect"
        else:
            errors["base"] = "invalid_auth"
        return self.async_show_form(
            step_id=step_id,
            data_schema=data_schema,
            errors=errors,
        )

    async def _async_finish(self, api: EufySecurityApi) -> ConfigFlowResult:
        """Create or update the entry with the authenticated session."""
        data = {**self._data, **session_data(api)}
        entry = self._reauth_entry
        if entry is not None:
            self.hass.config_entries.async_update_entry(
                entry, data={**entry.data, **data}
            )
            await self.hass.config_entries.async_reload(entry.entry_id)
            return self.async_abort(reason="reauth_successful")

        return self.async_create_entry(title=data[CONF_USERNAME], data=data)
