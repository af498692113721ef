"""Main representation — the whole-house view of a robot.

Exposes every toggle of the robot (clean, dock, schedule, find me, eco,
no-go lines, extra care, spot cleaning) plus battery and dock occupancy.
After every refresh it also starts a room clean queued while the robot
was on its way home.
"""

from __future__ import annotations

import logging

from neatobridge.accessories.base import Representation, ToggleListener
from neatobridge.core.models import ControlResult, Device, Intent, IntentKind, SpotParams
from neatobridge.core.room_queue import RoomQueue
from neatobridge.core.sequencer import ActionSequencer
from neatobridge.core.state_cache import StateCache

logger = logging.getLogger(__name__)

# Hideable category (config name) -> toggle it controls.
OPTIONAL_TOGGLES: dict[str, str] = {
    "spot": "spot_clean",
    "dock": "go_to_dock",
    "dockstate": "dock_state",
    "eco": "eco",
    "nogolines": "no_go_lines",
    "extracare": "extra_care",
    "schedule": "schedule",
    "find": "find_me",
}

ALWAYS_VISIBLE = ("clean", "battery_level", "charging")


class MainRepresentation(Representation):
    """Whole-device accessory.

    Args:
        device: The robot.
        cache: State cache used before every read.
        sequencer: Sequencer executing control requests.
        queue: Room queue consumed when the robot is docked.
        hidden: Optional toggle categories to hide (see ``OPTIONAL_TOGGLES``).
        listener: Receives every published toggle value.
    """

    def __init__(
        self,
        device: Device,
        cache: StateCache,
        sequencer: ActionSequencer,
        queue: RoomQueue,
        hidden: tuple[str, ...] = (),
        listener: ToggleListener | None = None,
    ) -> None:
        super().__init__(device, cache, sequencer, listener)
        self._queue = queue
        self._hidden = tuple(hidden)
        logger.info("Added cleaning device named: %s", self.name)

    @property
    def name(self) -> str:
        return self._device.name

    @property
    def visible_toggles(self) -> list[str]:
        """Toggles exposed to the bridge, honouring the hidden categories."""
        toggles = list(ALWAYS_VISIBLE)
        for category, toggle in OPTIONAL_TOGGLES.items():
            if category not in self._hidden:
                toggles.append(toggle)
        return toggles

    # ------------------------------------------------------------------
    # Clean / dock
    # ------------------------------------------------------------------

    async def get_clean(self) -> bool:
        await self._cache.refresh(self._device)
        cleaning = self._device.snapshot.can_pause
        logger.debug("%s: cleaning is %s", self.name, "ON" if cleaning else "OFF")
        return cleaning

    async def get_go_to_dock(self) -> bool:
        return False

    async def set_go_to_dock(self, on: bool) -> ControlResult:
        if not on:
            return ControlResult()
        return await self._sequencer.execute(self._device, Intent(IntentKind.GO_TO_DOCK))

    async def get_dock_state(self) -> int:
        await self._cache.refresh(self._device)
        docked = self._device.snapshot.is_docked
        logger.debug("%s: the dock is %s", self.name, "OCCUPIED" if docked else "NOT OCCUPIED")
        return 1 if docked else 0

    # ------------------------------------------------------------------
    # Schedule / find me
    # ------------------------------------------------------------------

    async def get_schedule(self) -> bool:
        await self._cache.refresh(self._device)
        enabled = self._device.snapshot.is_schedule_enabled
        logger.debug("%s: schedule is %s", self.name, "ON" if enabled else "OFF")
        return enabled

    async def set_schedule(self, on: bool) -> ControlResult:
        kind = IntentKind.ENABLE_SCHEDULE if on else IntentKind.DISABLE_SCHEDULE
        return await self._sequencer.execute(self._device, Intent(kind))

    async def get_find_me(self) -> bool:
        return False

    async def set_find_me(self, on: bool) -> ControlResult:
        if not on:
            return ControlResult()
        return await self._sequencer.execute(
            self._device,
            Intent(IntentKind.FIND_ME),
            on_revert=lambda: self._publish("find_me", False),
        )

    # ------------------------------------------------------------------
    # Cleaning preferences (user owned, a refresh never overwrites them)
    # ------------------------------------------------------------------

    async def get_eco(self) -> bool:
        await self._cache.refresh(self._device)
        return self._device.preferences.eco

    def set_eco(self, on: bool) -> None:
        self._device.preferences.eco = on
        logger.debug("%s: %s eco mode", self.name, "enabled" if on else "disabled")

    async def get_no_go_lines(self) -> bool:
        await self._cache.refresh(self._device)
        return self._device.preferences.no_go_lines

    def set_no_go_lines(self, on: bool) -> None:
        self._device.preferences.no_go_lines = on
        logger.debug("%s: %s no-go lines", self.name, "enabled" if on else "disabled")

    async def get_extra_care(self) -> bool:
        await self._cache.refresh(self._device)
        return self._device.preferences.extra_care

    def set_extra_care(self, on: bool) -> None:
        self._device.preferences.extra_care = on
        logger.debug("%s: %s extra care", self.name, "enabled" if on else "disabled")

    # ------------------------------------------------------------------
    # Spot cleaning
    # ------------------------------------------------------------------

    async def get_spot_clean(self) -> bool:
        return False

    async def set_spot_clean(self, on: bool) -> ControlResult:
        preferences = self._device.preferences
        spot_plus = self._device.spot_plus
        spot = SpotParams(
            width=preferences.spot_width if spot_plus else None,
            height=preferences.spot_height if spot_plus else None,
            repeat=preferences.spot_repeat,
        )
        kind = IntentKind.SPOT_CLEAN if on else IntentKind.SPOT_STOP
        return await self._sequencer.execute(self._device, Intent(kind, spot=spot))

    async def get_spot_width(self) -> int:
        await self._cache.refresh(self._device)
        return self._device.preferences.spot_width

    def set_spot_width(self, width: int) -> None:
        self._device.preferences.spot_width = width
        logger.debug("%s: set spot width to %dcm", self.name, width)

    async def get_spot_height(self) -> int:
        await self._cache.refresh(self._device)
        return self._device.preferences.spot_height

    def set_spot_height(self, height: int) -> None:
        self._device.preferences.spot_height = height
        logger.debug("%s: set spot height to %dcm", self.name, height)

    async def get_spot_repeat(self) -> bool:
        await self._cache.refresh(self._device)
        return self._device.preferences.spot_repeat

    def set_spot_repeat(self, on: bool) -> None:
        self._device.preferences.spot_repeat = on
        logger.debug("%s: %s spot repeat", self.name, "enabled" if on else "disabled")

    # ------------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------------

    def updated(self) -> None:
        snapshot = self._device.snapshot
        preferences = self._device.preferences
        self._publish("clean", snapshot.can_pause)
        self._publish("schedule", snapshot.is_schedule_enabled)
        self._publish("dock_state", 1 if snapshot.is_docked else 0)
        self._publish("eco", preferences.eco)
        self._publish("no_go_lines", preferences.no_go_lines)
        self._publish("extra_care", preferences.extra_care)
        self._publish("spot_repeat", preferences.spot_repeat)
        if self._device.spot_plus:
            self._publish("spot_width", preferences.spot_width)
            self._publish("spot_height", preferences.spot_height)
        self._publish_battery()

        region = self._queue.take_if_docked(self._device)
        if region is not None:
            logger.debug("%s: starting cleaning of next room %s", self.name, region.name)
            self._sequencer.dispatch(self._device, Intent(IntentKind.START, region=region))
