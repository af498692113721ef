"""Shared behaviour of the accessory representations of a robot.

A representation never caches robot truth: getters refresh through the
state cache and read the device snapshot, setters turn into intents for the
action sequencer. Changes are pushed to the bridge through an optional
listener ``listener(representation_name, toggle, value)``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from neatobridge.core.models import (
    BoundaryRegion,
    ControlResult,
    Device,
    Intent,
    IntentKind,
)
from neatobridge.core.sequencer import ActionSequencer
from neatobridge.core.state_cache import StateCache

logger = logging.getLogger(__name__)

ToggleListener = Callable[[str, str, Any], None]

MANUFACTURER = "Neato Robotics"


class Representation(ABC):
    """Base class for the Main and Room views of a device.

    Args:
        device: The robot this view reads through to.
        cache: State cache used before every read.
        sequencer: Sequencer executing control requests.
        listener: Receives every published toggle value.
    """

    def __init__(
        self,
        device: Device,
        cache: StateCache,
        sequencer: ActionSequencer,
        listener: ToggleListener | None = None,
    ) -> None:
        self._device = device
        self._cache = cache
        self._sequencer = sequencer
        self._listener = listener

    @property
    def device(self) -> Device:
        return self._device

    @property
    def region(self) -> BoundaryRegion | None:
        """Region this view is scoped to, None for the whole device."""
        return None

    @property
    @abstractmethod
    def name(self) -> str:
        """Accessory display name."""
        ...

    @property
    def info(self) -> dict[str, str]:
        """Accessory information shown by the bridge."""
        return {
            "manufacturer": MANUFACTURER,
            "model": self._device.meta.model_name,
            "serial_number": self._device.serial,
            "firmware_revision": self._device.meta.firmware,
            "name": self.name,
        }

    def identify(self) -> None:
        logger.debug("Identify request for %s", self.name)

    @abstractmethod
    async def get_clean(self) -> bool:
        """Whether this view is currently cleaning."""
        ...

    async def set_clean(self, on: bool) -> ControlResult:
        """Start (or resume) cleaning this view's scope, or pause it."""
        region = self.region
        logger.debug(
            "%s: %s clean%s",
            self.name,
            "enabled" if on else "disabled",
            f" ({region.name})" if region else "",
        )
        kind = IntentKind.START if on else IntentKind.STOP
        return await self._sequencer.execute(self._device, Intent(kind, region=region))

    async def get_battery_level(self) -> int:
        await self._cache.refresh(self._device)
        charge = self._device.snapshot.charge
        logger.debug("%s: battery is %d%%", self.name, charge)
        return charge

    async def get_charging(self) -> bool:
        await self._cache.refresh(self._device)
        charging = self._device.snapshot.is_charging
        logger.debug("%s: battery is %s", self.name, "CHARGING" if charging else "NOT CHARGING")
        return charging

    @abstractmethod
    def updated(self) -> None:
        """Publish the current device state after a refresh."""
        ...

    def _publish(self, toggle: str, value: Any) -> None:
        if self._listener is not None:
            self._listener(self.name, toggle, value)

    def _publish_battery(self) -> None:
        snapshot = self._device.snapshot
        self._publish("battery_level", snapshot.charge)
        self._publish("charging", snapshot.is_charging)
