"""Action sequencer — turns control intents into remote robot commands.

Each intent triggers a fresh (debounced) state read, one lookup in the
state machine transition table and then the matching remote command or
short command sequence (pause → settle → dock, dock → queued room clean).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from neatobridge.core.models import (
    BoundaryRegion,
    ControlResult,
    Device,
    Intent,
    IntentKind,
    SpotParams,
)
from neatobridge.core.room_queue import RoomQueue
from neatobridge.core.scheduler import RefreshScheduler
from neatobridge.core.state_cache import StateCache
from neatobridge.core.state_machine import Action, decide, derive_state

logger = logging.getLogger(__name__)

# Time given to a pause to take effect before sending the robot home.
DOCK_SETTLE_SECONDS = 1.0

# Time after which the Find Me toggle flips back off.
FIND_ME_REVERT_SECONDS = 1.0


class ActionSequencer:
    """Executes intents against a device, one decision per intent.

    Args:
        cache: State cache, refreshed before every decision.
        queue: Room queue used by the room switch sequence.
        scheduler: Scheduler kicked when a cleaning run begins (optional).
        settle_delay: Seconds between pause and send-to-base.
        find_me_delay: Seconds before the Find Me toggle reverts.
    """

    def __init__(
        self,
        cache: StateCache,
        queue: RoomQueue,
        scheduler: RefreshScheduler | None = None,
        settle_delay: float = DOCK_SETTLE_SECONDS,
        find_me_delay: float = FIND_ME_REVERT_SECONDS,
    ) -> None:
        self._cache = cache
        self._queue = queue
        self._scheduler = scheduler
        self._settle_delay = settle_delay
        self._find_me_delay = find_me_delay
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> set[asyncio.Task]:
        """Background tasks that have not finished yet."""
        return set(self._tasks)

    async def execute(
        self,
        device: Device,
        intent: Intent,
        on_revert: Callable[[], None] | None = None,
    ) -> ControlResult:
        """Refresh the device, decide and run the intent.

        Args:
            device: Target device.
            intent: Requested action.
            on_revert: Called when the Find Me toggle must flip back off.

        Returns:
            The control result; failures are logged, never raised.
        """
        await self._cache.refresh(device)
        action = decide(device, intent)
        logger.debug(
            "%s: %s in state %s -> %s",
            device.name,
            intent.kind.name,
            derive_state(device.snapshot).name,
            action.name,
        )
        try:
            await self._perform(device, intent, action, on_revert)
        except Exception as e:
            logger.error("%s: %s failed: %s", device.name, intent.kind.name, e)
            return ControlResult.failed(e)
        return ControlResult()

    def dispatch(self, device: Device, intent: Intent) -> asyncio.Task:
        """Run an intent in the background, keeping a reference until done."""
        task = asyncio.create_task(self.execute(device, intent))
        self._track(task)
        return task

    async def drain(self) -> None:
        """Wait for every background task started so far."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def _perform(
        self,
        device: Device,
        intent: Intent,
        action: Action,
        on_revert: Callable[[], None] | None,
    ) -> None:
        robot = device.robot

        if action == Action.NONE:
            self._log_noop(device, intent)

        elif action == Action.START:
            if intent.kind == IntentKind.SPOT_CLEAN:
                await self._clean(device, spot=intent.spot or SpotParams())
            else:
                await self._clean(device, region=intent.region)

        elif action == Action.RESUME:
            logger.debug("%s: resume cleaning", device.name)
            await robot.resume_cleaning()
            self._kick(device)

        elif action == Action.PAUSE:
            logger.debug("%s: pause cleaning", device.name)
            await robot.pause_cleaning()

        elif action == Action.SWITCH_ROOM:
            logger.debug("%s: returning to dock to start cleaning of new room", device.name)
            await self._switch_room(device, intent.region)

        elif action in (Action.PAUSE_THEN_DOCK, Action.SEND_TO_BASE):
            await self._go_to_dock(device, action)

        elif action == Action.ENABLE_SCHEDULE:
            logger.debug("%s: enable schedule", device.name)
            await robot.enable_schedule()

        elif action == Action.DISABLE_SCHEDULE:
            logger.debug("%s: disable schedule", device.name)
            await robot.disable_schedule()

        elif action == Action.FIND_ME:
            logger.debug("%s: find me", device.name)
            if on_revert is not None:
                self._track(asyncio.create_task(self._revert_later(on_revert)))
            await robot.find_me()

    async def _switch_room(self, device: Device, region: BoundaryRegion) -> None:
        # The region is queued once the pause completes, before docking.
        # Dock arrival, not the dock command, triggers the queued clean.
        if device.snapshot.can_pause:
            logger.debug("%s: pause cleaning to go to dock", device.name)
            await device.robot.pause_cleaning()
            self._queue.set(device, region)
            await asyncio.sleep(self._settle_delay)
            logger.debug("%s: go to dock", device.name)
            await device.robot.send_to_base()
        else:
            self._queue.set(device, region)
            await self._go_to_dock(device)

    async def _go_to_dock(self, device: Device, action: Action | None = None) -> None:
        if action is None:
            action = decide(device, Intent(IntentKind.GO_TO_DOCK))

        if action == Action.PAUSE_THEN_DOCK:
            logger.debug("%s: pause cleaning to go to dock", device.name)
            await device.robot.pause_cleaning()
            await asyncio.sleep(self._settle_delay)
            logger.debug("%s: go to dock", device.name)
            await device.robot.send_to_base()
        elif action == Action.SEND_TO_BASE:
            logger.debug("%s: go to dock", device.name)
            await device.robot.send_to_base()
        else:
            logger.warning("%s: can't go to dock at the moment", device.name)

    async def _clean(
        self,
        device: Device,
        region: BoundaryRegion | None = None,
        spot: SpotParams | None = None,
    ) -> None:
        preferences = device.preferences
        eco = preferences.eco
        extra_care = preferences.extra_care
        no_go_lines = preferences.no_go_lines
        navigation_mode = preferences.navigation_mode

        self._kick(device)
        logger.debug(
            "%s: start cleaning (%seco: %s, extra care: %s, no-go lines: %s, spot: %s)",
            device.name,
            f"{region.name} " if region else "",
            eco,
            extra_care,
            no_go_lines,
            spot,
        )

        if spot is not None:
            width = spot.width if device.spot_plus else None
            height = spot.height if device.spot_plus else None
            await device.robot.start_spot_cleaning(
                eco, width, height, spot.repeat, navigation_mode
            )
        elif region is not None:
            await device.robot.start_cleaning_boundary(eco, extra_care, region.id)
        else:
            await device.robot.start_cleaning(eco, navigation_mode, no_go_lines)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _kick(self, device: Device) -> None:
        if self._scheduler is not None:
            self._scheduler.kick_auto_refresh(device)

    def _log_noop(self, device: Device, intent: Intent) -> None:
        if intent.kind == IntentKind.GO_TO_DOCK:
            logger.warning("%s: can't go to dock at the moment", device.name)
        elif intent.kind in (IntentKind.START, IntentKind.SPOT_CLEAN):
            logger.debug("%s: cannot start, maybe already cleaning (expected)", device.name)
        else:
            logger.debug("%s: already paused", device.name)

    async def _revert_later(self, on_revert: Callable[[], None]) -> None:
        await asyncio.sleep(self._find_me_delay)
        on_revert()

    def _track(self, task: asyncio.Task) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
