"""Tests for the cloud gateway interfaces and stubs."""

from __future__ import annotations

import pytest

from neatobridge.gateway.errors import (
    AuthenticationError,
    DiscoveryError,
    GatewayError,
    RemoteOperationError,
)
from neatobridge.gateway.interfaces import BoundaryInfo, CloudClient, MapInfo, RobotClient
from neatobridge.gateway.stubs import StubCloudClient, StubRobot, docked_snapshot


class TestStubRobot:
    """Tests for StubRobot."""

    def test_implements_interface(self) -> None:
        assert issubclass(StubRobot, RobotClient)

    def test_starts_docked(self) -> None:
        robot = StubRobot()
        assert robot.state.is_docked
        assert robot.state.can_start
        assert not robot.state.can_pause

    async def test_get_state_returns_copy(self) -> None:
        robot = StubRobot()
        snapshot = await robot.get_state()
        snapshot.charge = 5
        assert robot.state.charge == 100

    async def test_clean_pause_resume_dock(self) -> None:
        robot = StubRobot()
        await robot.start_cleaning(eco=True, navigation_mode=2, no_go_lines=False)
        assert robot.state.can_pause
        assert robot.state.eco
        assert robot.state.navigation_mode == 2
        assert not robot.state.is_docked

        await robot.pause_cleaning()
        assert robot.state.can_resume
        assert robot.state.can_go_to_base

        await robot.resume_cleaning()
        assert robot.state.can_pause

        await robot.pause_cleaning()
        await robot.send_to_base()
        assert robot.state.is_docked
        assert robot.state.can_start

    async def test_boundary_cleaning_records_region(self) -> None:
        robot = StubRobot()
        await robot.start_cleaning_boundary(eco=False, extra_care=True, boundary_id="b1")
        assert robot.state.cleaning_boundary_id == "b1"
        assert robot.state.navigation_mode == 2

    async def test_spot_without_size_keeps_defaults(self) -> None:
        robot = StubRobot()
        await robot.start_spot_cleaning(False, None, None, True, 1)
        assert robot.state.spot_width == 200
        assert robot.state.spot_repeat

    async def test_rejects_unavailable_command(self) -> None:
        robot = StubRobot()
        with pytest.raises(RemoteOperationError, match="pause_cleaning"):
            await robot.pause_cleaning()

    async def test_fail_on_injects_failure(self) -> None:
        robot = StubRobot()
        robot.fail_on.add("find_me")
        with pytest.raises(GatewayError):
            await robot.find_me()
        assert robot.call_count("find_me") == 1

    async def test_schedule(self) -> None:
        robot = StubRobot(state=docked_snapshot(is_schedule_enabled=False))
        await robot.enable_schedule()
        assert robot.state.is_schedule_enabled
        await robot.disable_schedule()
        assert not robot.state.is_schedule_enabled

    async def test_maps_and_boundaries(self) -> None:
        robot = StubRobot(
            maps=[MapInfo(id="m1")],
            boundaries={"m1": [BoundaryInfo(id="b1", name="Kitchen")]},
        )
        maps = await robot.get_persistent_maps()
        assert [m.id for m in maps] == ["m1"]
        boundaries = await robot.get_map_boundaries("m1")
        assert boundaries[0].name == "Kitchen"
        assert await robot.get_map_boundaries("unknown") == []


class TestStubCloudClient:
    """Tests for StubCloudClient."""

    def test_implements_interface(self) -> None:
        assert issubclass(StubCloudClient, CloudClient)

    async def test_authorize_and_list(self) -> None:
        robot = StubRobot()
        client = StubCloudClient([robot], email="me@example.com", password="pw")
        await client.authorize("me@example.com", "pw")
        assert await client.get_robots() == [robot]

    async def test_wrong_credentials(self) -> None:
        client = StubCloudClient([], email="me@example.com", password="pw")
        with pytest.raises(AuthenticationError):
            await client.authorize("me@example.com", "nope")

    async def test_list_requires_login(self) -> None:
        client = StubCloudClient([StubRobot()])
        with pytest.raises(DiscoveryError):
            await client.get_robots()


class TestRemoteOperationError:
    def test_message(self) -> None:
        err = RemoteOperationError("send_to_base", "offline")
        assert str(err) == "send_to_base failed: offline"
        assert err.operation == "send_to_base"
