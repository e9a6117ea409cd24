"""Identity helpers for the Eufy Security integration."""

from __future__ import annotations

import secrets
import socket
from typing import Any
from urllib.parse import urlparse

import psutil_home_assistant as ha_psutil

from homeassistant.components import network
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.device_registry import format_mac

from .const import OPENUDID_LENGTH, SERIAL_NUMBER_LENGTH


async def async_get_serial_number(
    hass: HomeAssistant, api_base: str, existing: str | None = None
) -> str:
    """Return the persisted `sn` header value, deriving one if needed."""
    if existing:
        return existing

    host = urlparse(api_base).hostname or api_base
    target_ip = await hass.async_add_executor_job(_resolve_host, host)
    try:
        source_ip = await network.async_get_source_ip(hass, target_ip=target_ip)
    except (HomeAssistantError, OSError):
        return _random_hex(SERIAL_NUMBER_LENGTH)
    if not source_ip:
        return _random_hex(SERIAL_NUMBER_LENGTH)
    mac = await hass.async_add_executor_job(_get_mac_for_source_ip, source_ip)
    if mac:
        return _normalize_serial(mac)
    return _random_hex(SERIAL_NUMBER_LENGTH)


def get_openudid(existing: str | None = None) -> str:
    """Return the persisted `openudid` header value, generating one if needed."""
    return existing or _random_hex(OPENUDID_LENGTH)


def _resolve_host(host: str) -> str:
    try:
        return socket.gethostbyname(host)
    except OSError:
        return host


def _get_mac_for_source_ip(source_ip: str) -> str | None:
    try:
        psutil_wrapper = ha_psutil.PsutilWrapper()
        addresses = psutil_wrapper.psutil.net_if_addrs()
    except (OSError, RuntimeError):
        return None

    for addrs in addresses.values():
        if not any(addr.address == source_ip for addr in addrs):
            continue
        mac = _extract_mac(addrs)
        if mac:
            return mac
    return None


def _extract_mac(addrs: list[Any]) -> str | None:
    mac_families = {
        getattr(socket, "AF_PACKET", None),
        getattr(socket, "AF_LINK", None),
    }
    for addr in addrs:
        if addr.family in mac_families and addr.address:
            return format_mac(addr.address)
    return None


def _random_hex(length: int) -> str:
    return secrets.token_hex(length // 2)


def _normalize_serial(serial: str) -> str:
    """Return the MAC as 12 lowercase hex digits."""
    return "".join(ch for ch in serial if ch.isalnum()).lower()
