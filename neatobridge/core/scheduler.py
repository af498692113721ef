"""Background refresh timers, one per device.

A refresh cycle fetches the robot state, fans it out to every
representation of the robot and then decides when the next cycle runs.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable

from neatobridge.core.models import Device
from neatobridge.core.state_cache import StateCache

logger = logging.getLogger(__name__)

# Poll interval while cleaning in auto mode.
AUTO_REFRESH_SECONDS = 60


class RefreshScheduler:
    """Runs refresh cycles and keeps at most one pending timer per device.

    Args:
        cache: State cache used for every fetch.
        notify: Fans a refreshed device out to its representations.
        refresh: ``"auto"`` or a fixed interval in seconds (0 disables polling).
    """

    def __init__(
        self,
        cache: StateCache,
        notify: Callable[[Device], None],
        refresh: int | str = "auto",
    ) -> None:
        self._cache = cache
        self._notify = notify
        self._refresh = refresh

    @property
    def refresh(self) -> int | str:
        return self._refresh

    async def update_robot_timer(self, device: Device) -> None:
        """Run one refresh cycle: fetch, notify, then schedule the next one."""
        await self._cache.refresh(device)
        self.cancel(device)
        self._notify(device)
        self.schedule_next(device)

    def schedule_next(self, device: Device) -> float | None:
        """Apply the refresh policy to a device.

        Returns:
            Seconds until the next cycle, or None if polling stops.
        """
        if self._refresh != "auto" and self._refresh != 0:
            delay = float(self._refresh)
            logger.debug("%s: next background update in %d seconds", device.name, delay)
        elif self._refresh == "auto" and device.snapshot.can_pause:
            delay = float(AUTO_REFRESH_SECONDS)
            logger.debug(
                "%s: next background update in %d seconds while cleaning (auto mode)",
                device.name,
                delay,
            )
        else:
            logger.debug("%s: stopped background updates", device.name)
            return None
        self.schedule_in(device, delay)
        return delay

    def schedule_in(self, device: Device, seconds: float) -> asyncio.Task:
        """Schedule a refresh cycle, replacing any pending timer of the device."""
        self.cancel(device)
        task = asyncio.create_task(self._fire(device, seconds))
        device.timer = task
        return task

    def kick_auto_refresh(self, device: Device) -> None:
        """Restart polling shortly after a cleaning run begins in auto mode."""
        if self._refresh == "auto":
            self.schedule_in(device, AUTO_REFRESH_SECONDS)

    def cancel(self, device: Device) -> None:
        """Drop the pending timer of a device, if any."""
        timer = device.timer
        device.timer = None
        if timer is not None and not timer.done() and timer is not asyncio.current_task():
            timer.cancel()

    def cancel_all(self, devices: Iterable[Device]) -> None:
        for device in devices:
            self.cancel(device)

    async def _fire(self, device: Device, seconds: float) -> None:
        await asyncio.sleep(seconds)
        if device.timer is asyncio.current_task():
            device.timer = None
        try:
            await self.update_robot_timer(device)
        except Exception as e:
            logger.error("%s: background update failed: %s", device.name, e)
