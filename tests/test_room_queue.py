"""Tests for the deferred room queue."""

from __future__ import annotations

from neatobridge.core.models import BoundaryRegion, Device
from neatobridge.core.room_queue import RoomQueue
from neatobridge.gateway.interfaces import RobotSnapshot
from neatobridge.gateway.stubs import StubRobot, docked_snapshot


def _device() -> tuple[Device, BoundaryRegion]:
    device = Device(robot=StubRobot(), snapshot=RobotSnapshot(can_pause=True))
    region = BoundaryRegion("b1", "Kitchen", device)
    device.regions[region.id] = region
    return device, region


class TestRoomQueue:
    def test_empty_by_default(self) -> None:
        device, _ = _device()
        queue = RoomQueue()
        assert queue.pending(device) is None
        assert queue.take_if_docked(device) is None

    def test_not_consumed_until_docked(self) -> None:
        device, region = _device()
        queue = RoomQueue()
        queue.set(device, region)

        assert queue.take_if_docked(device) is None
        assert device.pending_room_id == "b1"

    def test_consumed_once_when_docked(self) -> None:
        device, region = _device()
        queue = RoomQueue()
        queue.set(device, region)
        device.snapshot = docked_snapshot()

        assert queue.take_if_docked(device) is region
        assert device.pending_room_id is None
        assert queue.take_if_docked(device) is None

    def test_set_replaces_previous_entry(self) -> None:
        device, region = _device()
        hall = BoundaryRegion("b2", "Hall", device)
        device.regions[hall.id] = hall
        queue = RoomQueue()

        queue.set(device, region)
        queue.set(device, hall)
        assert queue.pending(device) is hall

    def test_unknown_region_is_dropped(self) -> None:
        device, _ = _device()
        device.pending_room_id = "gone"
        device.snapshot = docked_snapshot()

        assert RoomQueue().take_if_docked(device) is None
        assert device.pending_room_id is None
