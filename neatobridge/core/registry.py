"""Device registry — owns robots and their accessory representations.

Each robot gets one Main representation and one Room representation per
polygon boundary of its maps. Room names are unique across all robots.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from neatobridge.accessories.base import Representation, ToggleListener
from neatobridge.accessories.main import MainRepresentation
from neatobridge.accessories.room import RoomRepresentation
from neatobridge.core.models import BoundaryRegion, Device
from neatobridge.core.room_queue import RoomQueue
from neatobridge.core.sequencer import ActionSequencer
from neatobridge.core.state_cache import StateCache
from neatobridge.gateway.interfaces import BoundaryInfo, RobotClient

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    device: Device
    main: MainRepresentation
    rooms: list[RoomRepresentation] = field(default_factory=list)


def has_spot_plus(services: dict[str, str]) -> bool:
    """Whether the robot accepts spot width and height."""
    return "basic" in services.get("spotCleaning", "")


class DeviceRegistry:
    """Owned collection of devices and representations.

    Args:
        cache: State cache handed to every representation.
        sequencer: Sequencer handed to every representation.
        queue: Room queue consumed by Main representations.
        hidden: Optional toggle categories hidden on Main representations.
        listener: Receives every published toggle value.
    """

    def __init__(
        self,
        cache: StateCache,
        sequencer: ActionSequencer,
        queue: RoomQueue,
        hidden: tuple[str, ...] = (),
        listener: ToggleListener | None = None,
    ) -> None:
        self._cache = cache
        self._sequencer = sequencer
        self._queue = queue
        self._hidden = tuple(hidden)
        self._listener = listener
        self._entries: dict[str, _Entry] = {}
        self._region_names: list[str] = []

    def add_device(
        self, robot: RobotClient, boundaries: list[BoundaryInfo] | None = None
    ) -> Device:
        """Register a robot with the boundaries found on its maps.

        Args:
            robot: Cloud handle of the robot.
            boundaries: Boundaries of all persistent maps; non-polygon ones are skipped.

        Returns:
            The new device.
        """
        device = Device(robot=robot, spot_plus=has_spot_plus(robot.available_services))
        logger.info(
            'Found robot named "%s" with serial "%s"', device.name, device.masked_serial
        )

        main = MainRepresentation(
            device,
            self._cache,
            self._sequencer,
            self._queue,
            hidden=self._hidden,
            listener=self._listener,
        )
        entry = _Entry(device=device, main=main)

        for boundary in boundaries or []:
            if boundary.type != "polygon":
                continue
            region = BoundaryRegion(
                id=boundary.id, name=self.unique_region_name(boundary.name), device=device
            )
            device.regions[region.id] = region
            entry.rooms.append(
                RoomRepresentation(region, self._cache, self._sequencer, self._listener)
            )

        self._entries[device.serial] = entry
        return device

    def unique_region_name(self, name: str) -> str:
        """Reserve a region display name, renaming on collision.

        A trailing digit is incremented ("Room 2" -> "Room 3"), otherwise
        " 2" is appended ("Kitchen" -> "Kitchen 2"), until the name is free.
        """
        while name in self._region_names:
            if name[-1:].isdigit():
                name = name[:-1] + str(int(name[-1]) + 1)
            else:
                name = name + " 2"
        self._region_names.append(name)
        return name

    def notify(self, device: Device) -> None:
        """Fan a refresh out: Main first, then every Room of the device."""
        entry = self._entries[device.serial]
        entry.main.updated()
        for room in entry.rooms:
            room.updated()

    @property
    def devices(self) -> list[Device]:
        return [entry.device for entry in self._entries.values()]

    @property
    def representations(self) -> list[Representation]:
        result: list[Representation] = []
        for entry in self._entries.values():
            result.append(entry.main)
            result.extend(entry.rooms)
        return result

    def device(self, serial: str) -> Device:
        """Look up a device by serial.

        Raises:
            KeyError: If no device has this serial.
        """
        return self._entries[serial].device

    def main(self, device: Device) -> MainRepresentation:
        return self._entries[device.serial].main

    def rooms(self, device: Device) -> list[RoomRepresentation]:
        return list(self._entries[device.serial].rooms)
