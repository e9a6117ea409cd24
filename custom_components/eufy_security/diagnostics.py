"""Diagnostics support for Eufy Security."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from datetime import date, datetime
import enum
from types import MappingProxyType
from typing import Any

from eufy_security_lib import redact_for_diagnostics

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import (
    CONF_API_BASE,
    CONF_COUNTRY,
    CONF_TOKEN,
    CONF_TOKEN_EXPIRATION,
    DATA_COORDINATOR,
    DATA_HUB,
    DOMAIN,
)
from .coordinator import EufySecurityDataUpdateCoordinator
from .hub import EufySecurityHub


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    data = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    hub: EufySecurityHub | None = data.get(DATA_HUB) if data else None
    coordinator: EufySecurityDataUpdateCoordinator | None = (
        data.get(DATA_COORDINATOR) if data else None
    )
    snapshot = coordinator.data if coordinator is not None else None
    api = hub.api if hub is not None else None

    return {
        "entry_id": entry.entry_id,
        "api_base": entry.data.get(CONF_API_BASE),
        "country": entry.data.get(CONF_COUNTRY),
        "token_present": bool(entry.data.get(CONF_TOKEN)),
        "token_expiration": entry.data.get(CONF_TOKEN_EXPIRATION),
        "session": _to_jsonable(
            {
                "state": api.state if api is not None else None,
                "connected": api.is_connected() if api is not None else False,
                "last_auth_error": str(api.last_auth_error)
                if api is not None and api.last_auth_error is not None
                else None,
            }
        ),
        "snapshot_available": snapshot is not None,
        "snapshot": redact_for_diagnostics(_to_jsonable(snapshot)),
    }


def _to_jsonable(value: Any) -> Any:
    """Normalize snapshots to JSON-safe types."""
    if value is None:
        return None
    if is_dataclass(value):
        return {
            field.name: _to_jsonable(getattr(value, field.name))
            for field in fields(value)
        }
    if isinstance(value, (MappingProxyType, Mapping)):
        return {str(key): _to_jsonable(val) for key, val in value.items()}
    if isinstance(value, list | tuple):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
