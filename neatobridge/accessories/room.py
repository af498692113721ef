"""Room representation — one clean toggle scoped to a map boundary."""

from __future__ import annotations

import logging

from neatobridge.accessories.base import Representation, ToggleListener
from neatobridge.core.models import BoundaryRegion
from neatobridge.core.sequencer import ActionSequencer
from neatobridge.core.state_cache import StateCache

logger = logging.getLogger(__name__)


def clean_label(region_name: str) -> str:
    """Label of the room's clean toggle.

    "Clean the Kitchen", but "Clean Emma's Room" when the name is possessive.
    """
    words = region_name.split(" ")
    if len(words) >= 2 and words[-2].endswith("'s"):
        return f"Clean {region_name}"
    return f"Clean the {region_name}"


class RoomRepresentation(Representation):
    """Accessory for one cleanable region of a robot.

    Args:
        region: The region this accessory cleans.
        cache: State cache used before every read.
        sequencer: Sequencer executing control requests.
        listener: Receives every published toggle value.
    """

    def __init__(
        self,
        region: BoundaryRegion,
        cache: StateCache,
        sequencer: ActionSequencer,
        listener: ToggleListener | None = None,
    ) -> None:
        super().__init__(region.device, cache, sequencer, listener)
        self._region = region
        logger.info("Added cleaning device named: %s", self.name)

    @property
    def region(self) -> BoundaryRegion:
        return self._region

    @property
    def name(self) -> str:
        return f"{self._device.name} - {self._region.name}"

    @property
    def label(self) -> str:
        return clean_label(self._region.name)

    def _is_cleaning(self) -> bool:
        snapshot = self._device.snapshot
        return snapshot.can_pause and snapshot.cleaning_boundary_id == self._region.id

    async def get_clean(self) -> bool:
        await self._cache.refresh(self._device)
        cleaning = self._is_cleaning()
        logger.debug("%s: cleaning is %s", self.name, "ON" if cleaning else "OFF")
        return cleaning

    def updated(self) -> None:
        self._publish("clean", self._is_cleaning())
        self._publish_battery()
