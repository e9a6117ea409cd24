"""Shared entity helpers for the Eufy Security integration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from homeassistant.helpers.device_registry import DeviceInfo

from .const import DOMAIN, MANUFACTURER


def descriptor_name(descriptor: Mapping[str, Any], serial: str) -> str:
    """Return the user-facing name for a hub or device descriptor."""
    return str(
        descriptor.get("station_name") or descriptor.get("device_name") or serial
    )


def device_info_for_descriptor(
    serial: str, descriptor: Mapping[str, Any], *, station_sn: str | None = None
) -> DeviceInfo:
    """Build device info for a hub or device descriptor."""
    info = DeviceInfo(
        identifiers={(DOMAIN, serial)},
        manufacturer=MANUFACTURER,
        name=descriptor_name(descriptor, serial),
        model=descriptor.get("station_model") or descriptor.get("device_model"),
        sw_version=descriptor.get("main_sw_version"),
        hw_version=descriptor.get("main_hw_version"),
        serial_number=serial,
    )
    if station_sn and station_sn != serial:
        info["via_device"] = (DOMAIN, station_sn)
    return info


def build_unique_id(serial: str, key: str) -> str:
    """Build a stable unique ID in <serial>:<key> format."""
    return f"{serial}:{key}"
