"""Sensors for the Eufy Security integration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from homeassistant.components.sensor import SensorEntity, SensorEntityDescription
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DATA_COORDINATOR, DOMAIN
from .coordinator import EufySecurityDataUpdateCoordinator
from .entity import build_unique_id, device_info_for_descriptor


@dataclass(frozen=True, slots=True, kw_only=True)
class EufySecuritySensorDescription(SensorEntityDescription):
    """Describe a Eufy Security sensor."""

    key: str
    value_fn: Callable[[Mapping[str, Any]], Any]


FIRMWARE_SENSOR = EufySecuritySensorDescription(
    key="firmware_version",
    translation_key="firmware_version",
    entity_category=EntityCategory.DIAGNOSTIC,
    value_fn=lambda descriptor: descriptor.get("main_sw_version"),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up Eufy Security sensors from a config entry."""
    coordinator: EufySecurityDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id][
        DATA_COORDINATOR
    ]
    known: set[str] = set()

    @callback
    def _add_new_entities() -> None:
        snapshot = coordinator.data
        if snapshot is None:
            return
        entities: list[EufySecuritySensor] = []
        for serial in snapshot.hubs:
            if f"hub:{serial}" not in known:
                known.add(f"hub:{serial}")
                entities.append(EufySecuritySensor(coordinator, serial, is_hub=True))
        for serial in snapshot.devices:
            if f"device:{serial}" not in known:
                known.add(f"device:{serial}")
                entities.append(EufySecuritySensor(coordinator, serial, is_hub=False))
        if entities:
            async_add_entities(entities)

    _add_new_entities()
    entry.async_on_unload(coordinator.async_add_listener(_add_new_entities))


class EufySecuritySensor(
    CoordinatorEntity[EufySecurityDataUpdateCoordinator], SensorEntity
):
    """Firmware version of a hub or device."""

    _attr_has_entity_name = True
    entity_description: EufySecuritySensorDescription

    def __init__(
        self,
        coordinator: EufySecurityDataUpdateCoordinator,
        serial: str,
        *,
        is_hub: bool,
        description: EufySecuritySensorDescription = FIRMWARE_SENSOR,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._serial = serial
        self._is_hub = is_hub
        self.entity_description = description
        self._attr_unique_id = build_unique_id(serial, description.key)
        descriptor = self._descriptor() or {}
        station_sn = None if is_hub else descriptor.get("station_sn")
        self._attr_device_info = device_info_for_descriptor(
            serial, descriptor, station_sn=station_sn
        )

    def _descriptor(self) -> Mapping[str, Any] | None:
        snapshot = self.coordinator.data
        if snapshot is None:
            return None
        source = snapshot.hubs if self._is_hub else snapshot.devices
        return source.get(self._serial)

    @property
    def available(self) -> bool:
        """Return if the descriptor is still listed."""
        return super().available and self._descriptor() is not None

    @property
    def native_value(self) -> Any:
        """Return the current value."""
        descriptor = self._descriptor()
        if descriptor is None:
            return None
        return self.entity_description.value_fn(descriptor)
