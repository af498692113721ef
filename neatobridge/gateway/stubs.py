"""In-memory stub implementations of the cloud interfaces.

These stubs enable development and testing without a vendor account:
- StubRobot: simulates the command state machine of a robot
- StubCloudClient: an account holding a fixed list of StubRobots

Both record every call they receive so tests can assert on them.
"""

from __future__ import annotations

import dataclasses

from neatobridge.gateway.errors import (
    AuthenticationError,
    DiscoveryError,
    RemoteOperationError,
)
from neatobridge.gateway.interfaces import (
    BoundaryInfo,
    CloudClient,
    MapInfo,
    RobotClient,
    RobotMeta,
    RobotSnapshot,
)


def docked_snapshot(**overrides: object) -> RobotSnapshot:
    """Snapshot of an idle robot sitting on its charged dock."""
    values: dict[str, object] = dict(
        can_start=True,
        is_docked=True,
        is_charging=True,
        dock_has_been_seen=True,
        charge=100,
    )
    values.update(overrides)
    return RobotSnapshot(**values)


class StubRobot(RobotClient):
    """Simulated robot that follows the vendor's command rules.

    Commands are only accepted when the matching capability flag is set,
    as the real cloud does. ``send_to_base`` docks the robot immediately.

    Args:
        serial: Robot serial number.
        name: Robot name.
        state: Initial state. Defaults to docked and idle.
        maps: Persistent maps returned by ``get_persistent_maps``.
        boundaries: Boundaries per map id.
        services: Available services reported by the cloud.
        meta: Model and firmware information.
    """

    def __init__(
        self,
        serial: str = "OPS01234-0123456789AB",
        name: str = "Botvac",
        state: RobotSnapshot | None = None,
        maps: list[MapInfo] | None = None,
        boundaries: dict[str, list[BoundaryInfo]] | None = None,
        services: dict[str, str] | None = None,
        meta: RobotMeta | None = None,
    ) -> None:
        self._serial = serial
        self._name = name
        self._state = state if state is not None else docked_snapshot()
        self._maps = list(maps or [])
        self._boundaries = dict(boundaries or {})
        self._services = dict(services or {"spotCleaning": "basic-1"})
        self._meta = meta or RobotMeta(model_name="BotVacD7Connected", firmware="4.5.3-189")
        self.calls: list[str] = []
        self.fail_on: set[str] = set()

    @property
    def serial(self) -> str:
        return self._serial

    @property
    def name(self) -> str:
        return self._name

    @property
    def meta(self) -> RobotMeta:
        return self._meta

    @property
    def available_services(self) -> dict[str, str]:
        return dict(self._services)

    @property
    def state(self) -> RobotSnapshot:
        """Remote-side state (for tests). Mutating it simulates the robot."""
        return self._state

    def call_count(self, operation: str) -> int:
        """Return how many times an operation was called (for testing)."""
        return self.calls.count(operation)

    async def get_state(self) -> RobotSnapshot:
        self._record("get_state")
        return dataclasses.replace(self._state)

    async def start_cleaning(
        self, eco: bool, navigation_mode: int, no_go_lines: bool
    ) -> None:
        self._record("start_cleaning", self._state.can_start)
        self._run(eco=eco, navigation_mode=navigation_mode, no_go_lines=no_go_lines)

    async def start_cleaning_boundary(
        self, eco: bool, extra_care: bool, boundary_id: str
    ) -> None:
        self._record("start_cleaning_boundary", self._state.can_start)
        self._run(
            eco=eco,
            navigation_mode=2 if extra_care else 1,
            cleaning_boundary_id=boundary_id,
        )

    async def start_spot_cleaning(
        self,
        eco: bool,
        width: int | None,
        height: int | None,
        repeat: bool,
        navigation_mode: int,
    ) -> None:
        self._record("start_spot_cleaning", self._state.can_start)
        spot: dict[str, object] = {"spot_repeat": repeat}
        if width is not None:
            spot["spot_width"] = width
        if height is not None:
            spot["spot_height"] = height
        self._run(eco=eco, navigation_mode=navigation_mode, **spot)

    async def pause_cleaning(self) -> None:
        self._record("pause_cleaning", self._state.can_pause)
        self._state = dataclasses.replace(
            self._state,
            can_pause=False,
            can_resume=True,
            can_start=False,
            can_go_to_base=True,
        )

    async def resume_cleaning(self) -> None:
        self._record("resume_cleaning", self._state.can_resume)
        self._state = dataclasses.replace(
            self._state,
            can_pause=True,
            can_resume=False,
            can_go_to_base=False,
        )

    async def send_to_base(self) -> None:
        self._record("send_to_base", self._state.can_go_to_base)
        self._state = dataclasses.replace(
            self._state,
            can_start=True,
            can_pause=False,
            can_resume=False,
            can_go_to_base=False,
            is_docked=True,
            is_charging=True,
            dock_has_been_seen=True,
            cleaning_boundary_id=None,
        )

    async def enable_schedule(self) -> None:
        self._record("enable_schedule")
        self._state.is_schedule_enabled = True

    async def disable_schedule(self) -> None:
        self._record("disable_schedule")
        self._state.is_schedule_enabled = False

    async def find_me(self) -> None:
        self._record("find_me")

    async def get_persistent_maps(self) -> list[MapInfo]:
        self._record("get_persistent_maps")
        return list(self._maps)

    async def get_map_boundaries(self, map_id: str) -> list[BoundaryInfo]:
        self._record("get_map_boundaries")
        return list(self._boundaries.get(map_id, []))

    def _record(self, operation: str, allowed: bool = True) -> None:
        """Record a call and raise if it is rejected."""
        self.calls.append(operation)
        if operation in self.fail_on:
            raise RemoteOperationError(operation, "rejected by stub")
        if not allowed:
            raise RemoteOperationError(operation, "not available in current state")

    def _run(self, **changes: object) -> None:
        """Switch the simulated robot into a running cleaning."""
        changes.setdefault("cleaning_boundary_id", None)
        self._state = dataclasses.replace(
            self._state,
            can_start=False,
            can_pause=True,
            can_resume=False,
            can_go_to_base=False,
            is_docked=False,
            is_charging=False,
            **changes,
        )


class StubCloudClient(CloudClient):
    """Account holding a fixed list of robots.

    Args:
        robots: Robots returned by ``get_robots``.
        email: Accepted login email. ``None`` accepts any credentials.
        password: Accepted login password.
    """

    def __init__(
        self,
        robots: list[RobotClient] | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> None:
        self._robots = list(robots or [])
        self._email = email
        self._password = password
        self.authorized = False
        self.fail_get_robots = False

    async def authorize(self, email: str, password: str) -> None:
        if self._email is not None and (email, password) != (self._email, self._password):
            raise AuthenticationError("invalid credentials")
        self.authorized = True

    async def get_robots(self) -> list[RobotClient]:
        if not self.authorized:
            raise DiscoveryError("not logged in")
        if self.fail_get_robots:
            raise DiscoveryError("robot list unavailable")
        return list(self._robots)
