"""Deferred "clean this room next" slot, one per device."""

from __future__ import annotations

import logging

from neatobridge.core.models import BoundaryRegion, Device

logger = logging.getLogger(__name__)


class RoomQueue:
    """Holds at most one pending room per device until it is back on its dock.

    The slot lives on the device (``Device.pending_room_id``); setting it again
    replaces the previous entry.
    """

    def set(self, device: Device, region: BoundaryRegion) -> None:
        """Queue a region to be cleaned once the device is docked."""
        if device.pending_room_id is not None and device.pending_room_id != region.id:
            logger.debug(
                "%s: replacing queued room %s", device.name, device.pending_room_id
            )
        device.pending_room_id = region.id
        logger.debug("%s: queued %s for cleaning after docking", device.name, region.name)

    def pending(self, device: Device) -> BoundaryRegion | None:
        """Return the queued region without consuming it."""
        if device.pending_room_id is None:
            return None
        return device.regions.get(device.pending_room_id)

    def clear(self, device: Device) -> None:
        device.pending_room_id = None

    def take_if_docked(self, device: Device) -> BoundaryRegion | None:
        """Consume the queued region if the device is docked.

        The slot is cleared on consumption whatever happens to the
        cleaning started for it.

        Returns:
            The queued region, or None if nothing is queued or the device
            is not docked yet.
        """
        if device.pending_room_id is None or not device.snapshot.is_docked:
            return None
        region = self.pending(device)
        self.clear(device)
        if region is None:
            logger.warning("%s: queued room no longer exists", device.name)
        return region
