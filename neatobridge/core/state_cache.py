"""Freshness-gated robot state cache.

Every read of robot state goes through :class:`StateCache`, which fetches
from the cloud at most once per debounce window and keeps serving the last
good snapshot when a fetch fails.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from neatobridge.core.models import Device

logger = logging.getLogger(__name__)

# Minimum time between two state fetches of the same robot.
REFRESH_DEBOUNCE_SECONDS = 2.0


class StateCache:
    """Debounced state refresh for devices.

    Args:
        debounce: Minimum seconds between two fetches of one device.
        clock: Monotonic clock, replaceable for testing.
    """

    def __init__(
        self,
        debounce: float = REFRESH_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._debounce = debounce
        self._clock = clock

    def is_fresh(self, device: Device) -> bool:
        """Check whether the device was fetched inside the debounce window."""
        if device.last_update is None:
            return False
        return self._clock() - device.last_update < self._debounce

    async def refresh(self, device: Device) -> bool:
        """Fetch the device state unless it is still fresh.

        The fetch start time is stored before the remote call so that a
        second caller arriving during a slow fetch sees the device as fresh.

        Args:
            device: Device to refresh.

        Returns:
            False if a fetch was attempted and failed, True otherwise.
        """
        if self.is_fresh(device):
            return True

        logger.debug("%s: updating robot state", device.name)
        device.last_update = self._clock()
        try:
            device.snapshot = await device.robot.get_state()
        except Exception as e:
            logger.error(
                "%s: cannot update robot, check if it is online: %s", device.name, e
            )
            return False
        return True
