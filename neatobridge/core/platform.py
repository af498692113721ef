"""Neato platform — wires discovery, refresh and sequencing together.

Discovers the robots of the account, builds their accessory
representations, runs the first refresh cycle of each robot and keeps
the process alive until stopped.
"""

from __future__ import annotations

import asyncio
import logging

from neatobridge.accessories.base import Representation, ToggleListener
from neatobridge.core.config import Settings
from neatobridge.core.discovery import discover
from neatobridge.core.models import Device
from neatobridge.core.registry import DeviceRegistry
from neatobridge.core.room_queue import RoomQueue
from neatobridge.core.scheduler import RefreshScheduler
from neatobridge.core.sequencer import ActionSequencer
from neatobridge.core.state_cache import StateCache
from neatobridge.gateway.interfaces import CloudClient

logger = logging.getLogger(__name__)


class NeatoPlatform:
    """Owns every engine component for one cloud account.

    Args:
        settings: Application settings.
        client: Cloud account client.
        listener: Receives every published toggle value.
    """

    def __init__(
        self,
        settings: Settings,
        client: CloudClient,
        listener: ToggleListener | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._stop_event: asyncio.Event | None = None

        self.cache = StateCache()
        self.queue = RoomQueue()
        self.scheduler = RefreshScheduler(self.cache, self._notify, settings.refresh)
        self.sequencer = ActionSequencer(self.cache, self.queue, self.scheduler)
        self.registry = DeviceRegistry(
            self.cache,
            self.sequencer,
            self.queue,
            hidden=settings.hidden,
            listener=listener,
        )

    @property
    def devices(self) -> list[Device]:
        return self.registry.devices

    @property
    def accessories(self) -> list[Representation]:
        return self.registry.representations

    async def load_accessories(self) -> list[Representation]:
        """Discover robots and start their refresh cycles.

        Returns:
            Every representation created, Main and Room.
        """
        logger.debug("Get robots")
        for found in await discover(self._client, self._settings.email, self._settings.password):
            device = self.registry.add_device(found.robot, found.boundaries)
            await self.scheduler.update_robot_timer(device)
        return self.accessories

    async def run(self) -> None:
        """Load accessories and serve until stop() is called."""
        self._stop_event = asyncio.Event()
        await self.load_accessories()
        logger.info("Neato bridge started with %d robot(s).", len(self.devices))
        try:
            await self._stop_event.wait()
        except asyncio.CancelledError:
            logger.info("Neato bridge cancelled.")
        finally:
            await self.shutdown()

    def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()

    async def shutdown(self) -> None:
        """Cancel timers and wait for background control requests."""
        self.scheduler.cancel_all(self.devices)
        await self.sequencer.drain()
        logger.info("Neato bridge stopped.")

    def _notify(self, device: Device) -> None:
        self.registry.notify(device)
