"""Tests for the Main and Room accessory representations."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from neatobridge.accessories.main import MainRepresentation
from neatobridge.accessories.room import RoomRepresentation, clean_label
from neatobridge.core.models import (
    BoundaryRegion,
    ControlResult,
    Device,
    Intent,
    IntentKind,
    SpotParams,
)
from neatobridge.core.room_queue import RoomQueue
from neatobridge.core.sequencer import ActionSequencer
from neatobridge.core.state_cache import StateCache
from neatobridge.gateway.interfaces import RobotSnapshot
from neatobridge.gateway.stubs import StubRobot, docked_snapshot


def _make_main(
    state: RobotSnapshot | None = None,
    hidden: tuple[str, ...] = (),
    spot_plus: bool = True,
    sequencer: ActionSequencer | None = None,
    cache: StateCache | None = None,
) -> tuple[MainRepresentation, Device, MagicMock]:
    device = Device(robot=StubRobot(name="Botvac", state=state), spot_plus=spot_plus)
    cache = cache or StateCache()
    queue = RoomQueue()
    if sequencer is None:
        sequencer = ActionSequencer(cache, queue, settle_delay=0, find_me_delay=0.01)
    listener = MagicMock()
    main = MainRepresentation(device, cache, sequencer, queue, hidden=hidden, listener=listener)
    return main, device, listener


def _make_room(
    state: RobotSnapshot | None = None, region_name: str = "Kitchen"
) -> tuple[RoomRepresentation, Device, MagicMock]:
    device = Device(robot=StubRobot(name="Botvac", state=state))
    region = BoundaryRegion("b1", region_name, device)
    device.regions[region.id] = region
    sequencer = MagicMock(spec=ActionSequencer)
    sequencer.execute = AsyncMock(return_value=ControlResult())
    listener = MagicMock()
    room = RoomRepresentation(region, StateCache(), sequencer, listener)
    return room, device, listener


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _published(listener: MagicMock) -> dict[str, object]:
    return {call.args[1]: call.args[2] for call in listener.call_args_list}


class TestMainReads:
    async def test_reads_through_to_device(self) -> None:
        main, _, _ = _make_main(
            docked_snapshot(charge=55, eco=True, no_go_lines=True, navigation_mode=2,
                            is_schedule_enabled=True)
        )
        assert await main.get_clean() is False
        assert await main.get_battery_level() == 55
        assert await main.get_charging() is True
        assert await main.get_dock_state() == 1
        assert await main.get_eco() is True
        assert await main.get_no_go_lines() is True
        assert await main.get_extra_care() is True
        assert await main.get_schedule() is True

    async def test_write_only_toggles_read_off(self) -> None:
        main, _, _ = _make_main()
        assert await main.get_go_to_dock() is False
        assert await main.get_find_me() is False
        assert await main.get_spot_clean() is False

    async def test_reads_survive_refresh_failure(self) -> None:
        main, device, _ = _make_main()
        device.snapshot = docked_snapshot(charge=33)
        device.robot.fail_on.add("get_state")
        assert await main.get_battery_level() == 33

    async def test_spot_values(self) -> None:
        main, _, _ = _make_main(docked_snapshot(spot_width=300, spot_height=150, spot_repeat=True))
        assert await main.get_spot_width() == 300
        assert await main.get_spot_height() == 150
        assert await main.get_spot_repeat() is True


class TestMainWrites:
    async def test_preferences_are_user_owned(self) -> None:
        main, device, _ = _make_main()
        await main.get_clean()

        main.set_eco(True)
        main.set_no_go_lines(True)
        main.set_extra_care(True)
        main.set_spot_width(250)
        main.set_spot_height(120)
        main.set_spot_repeat(True)

        preferences = device.preferences
        assert preferences.eco
        assert preferences.no_go_lines
        assert preferences.extra_care
        assert (preferences.spot_width, preferences.spot_height) == (250, 120)
        assert preferences.spot_repeat
        assert not device.snapshot.eco

    async def test_eco_kept_across_refresh(self) -> None:
        clock = FakeClock()
        main, device, _ = _make_main(cache=StateCache(clock=clock))
        main.set_eco(True)

        clock.now += 10
        assert await main.get_eco() is True
        clock.now += 10
        assert (await main.set_clean(True)).success

        assert device.robot.call_count("get_state") == 2
        assert device.robot.state.eco is True

    async def test_set_clean_starts_robot(self) -> None:
        main, device, _ = _make_main()
        result = await main.set_clean(True)
        assert result.success
        assert device.robot.call_count("start_cleaning") == 1

    async def test_go_to_dock_off_is_noop(self) -> None:
        main, device, _ = _make_main()
        assert (await main.set_go_to_dock(False)).success
        assert device.robot.calls == []

    async def test_schedule_toggle(self) -> None:
        main, device, _ = _make_main()
        await main.set_schedule(True)
        assert device.robot.state.is_schedule_enabled
        await main.set_schedule(False)
        assert not device.robot.state.is_schedule_enabled

    async def test_find_me_publishes_revert(self) -> None:
        sequencer = ActionSequencer(StateCache(), RoomQueue(), find_me_delay=0.01)
        main, device, listener = _make_main(sequencer=sequencer)

        assert (await main.set_find_me(True)).success
        await sequencer.drain()

        assert device.robot.call_count("find_me") == 1
        listener.assert_called_with("Botvac", "find_me", False)

    async def test_spot_clean_uses_user_parameters(self) -> None:
        sequencer = MagicMock(spec=ActionSequencer)
        sequencer.execute = AsyncMock(return_value=ControlResult())
        main, device, _ = _make_main(sequencer=sequencer)
        main.set_spot_width(180)
        main.set_spot_height(90)
        main.set_spot_repeat(True)

        await main.set_spot_clean(True)

        sequencer.execute.assert_awaited_once_with(
            device,
            Intent(IntentKind.SPOT_CLEAN, spot=SpotParams(width=180, height=90, repeat=True)),
        )

    async def test_spot_clean_without_spot_plus(self) -> None:
        sequencer = MagicMock(spec=ActionSequencer)
        sequencer.execute = AsyncMock(return_value=ControlResult())
        main, device, _ = _make_main(sequencer=sequencer, spot_plus=False)

        await main.set_spot_clean(False)

        sequencer.execute.assert_awaited_once_with(
            device,
            Intent(IntentKind.SPOT_STOP, spot=SpotParams(width=None, height=None, repeat=False)),
        )


class TestMainSurface:
    def test_visible_toggles(self) -> None:
        main, _, _ = _make_main(hidden=("eco", "find"))
        toggles = main.visible_toggles
        assert "clean" in toggles
        assert "battery_level" in toggles
        assert "eco" not in toggles
        assert "find_me" not in toggles
        assert "go_to_dock" in toggles

    def test_info(self) -> None:
        main, device, _ = _make_main()
        info = main.info
        assert info["manufacturer"] == "Neato Robotics"
        assert info["serial_number"] == device.serial
        assert info["model"] == "BotVacD7Connected"
        assert info["name"] == "Botvac"

    def test_updated_publishes_state(self) -> None:
        main, device, listener = _make_main()
        device.snapshot = RobotSnapshot(can_pause=True, charge=70, eco=True, spot_width=220)

        main.updated()

        values = _published(listener)
        assert values["clean"] is True
        assert values["dock_state"] == 0
        assert values["eco"] is True
        assert values["battery_level"] == 70
        assert values["spot_width"] == 220

    def test_updated_without_spot_plus(self) -> None:
        main, _, listener = _make_main(spot_plus=False)
        main.updated()
        assert "spot_width" not in _published(listener)


class TestRoom:
    def test_names(self) -> None:
        room, _, _ = _make_room(region_name="Kitchen")
        assert room.name == "Botvac - Kitchen"
        assert room.label == "Clean the Kitchen"

    def test_possessive_label(self) -> None:
        assert clean_label("Emma's Room") == "Clean Emma's Room"
        assert clean_label("Living Room") == "Clean the Living Room"

    async def test_clean_only_for_own_region(self) -> None:
        room, device, _ = _make_room(RobotSnapshot(can_pause=True, cleaning_boundary_id="b1"))
        assert await room.get_clean() is True

        device.snapshot = RobotSnapshot(can_pause=True, cleaning_boundary_id="b9")
        assert room._is_cleaning() is False

    async def test_set_clean_targets_region(self) -> None:
        room, device, _ = _make_room()
        await room.set_clean(True)
        room._sequencer.execute.assert_awaited_once_with(
            device, Intent(IntentKind.START, region=room.region)
        )

    async def test_set_clean_off_stops(self) -> None:
        room, device, _ = _make_room()
        await room.set_clean(False)
        room._sequencer.execute.assert_awaited_once_with(
            device, Intent(IntentKind.STOP, region=room.region)
        )

    def test_updated_publishes_clean_and_battery(self) -> None:
        room, device, listener = _make_room()
        device.snapshot = RobotSnapshot(can_pause=True, cleaning_boundary_id="b1", charge=12)
        room.updated()
        assert _published(listener) == {"clean": True, "battery_level": 12, "charging": False}
