"""Runtime models shared by the sync and sequencing engine."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum, auto

from neatobridge.gateway.interfaces import RobotClient, RobotMeta, RobotSnapshot


@dataclass
class CleaningPreferences:
    """Values of the Main preference toggles, read when a cleaning starts.

    Attributes:
        eco: Eco mode.
        no_go_lines: Respect no-go lines.
        extra_care: Extra care navigation.
        spot_width: Spot width in cm.
        spot_height: Spot height in cm.
        spot_repeat: Clean the spot twice.
    """

    eco: bool = False
    no_go_lines: bool = False
    extra_care: bool = False
    spot_width: int = 200
    spot_height: int = 200
    spot_repeat: bool = False

    @classmethod
    def from_snapshot(cls, snapshot: RobotSnapshot) -> CleaningPreferences:
        return cls(
            eco=snapshot.eco,
            no_go_lines=snapshot.no_go_lines,
            extra_care=snapshot.navigation_mode == 2,
            spot_width=snapshot.spot_width,
            spot_height=snapshot.spot_height,
            spot_repeat=snapshot.spot_repeat,
        )

    @property
    def navigation_mode(self) -> int:
        return 2 if self.extra_care else 1


@dataclass(eq=False)
class BoundaryRegion:
    """A named room of a robot's map that can be cleaned on its own.

    Attributes:
        id: Opaque boundary identifier from the cloud.
        name: Display name, unique across all robots.
        device: The robot this region belongs to.
    """

    id: str
    name: str
    device: Device = field(repr=False)


@dataclass(eq=False)
class Device:
    """A discovered robot and the engine's view of it.

    Attributes:
        robot: Cloud handle used for every remote call.
        snapshot: Last state fetched from the cloud.
        last_update: Monotonic time of the last fetch start, ``None`` if never fetched.
        timer: The single outstanding refresh timer, if any.
        pending_room_id: Region to clean once the robot is back on its dock.
        regions: Cleanable regions by id.
        spot_plus: The robot supports spot width and height.
        user_preferences: Toggle values set by the user, never overwritten
            by a refresh. Read through ``preferences``.
    """

    robot: RobotClient
    snapshot: RobotSnapshot = field(default_factory=RobotSnapshot)
    last_update: float | None = None
    timer: asyncio.Task | None = field(default=None, repr=False)
    pending_room_id: str | None = None
    regions: dict[str, BoundaryRegion] = field(default_factory=dict, repr=False)
    spot_plus: bool = False
    user_preferences: CleaningPreferences | None = field(default=None, repr=False)

    @property
    def serial(self) -> str:
        return self.robot.serial

    @property
    def name(self) -> str:
        return self.robot.name

    @property
    def meta(self) -> RobotMeta:
        return self.robot.meta

    @property
    def masked_serial(self) -> str:
        """Serial safe for logs: first 9 characters only."""
        return self.serial[:9] + "X" * 12

    @property
    def preferences(self) -> CleaningPreferences:
        """Cleaning preferences owned by the user, seeded from the robot on first use."""
        if self.user_preferences is None:
            self.user_preferences = CleaningPreferences.from_snapshot(self.snapshot)
        return self.user_preferences


class IntentKind(Enum):
    """Control requests a representation can issue."""

    START = auto()
    STOP = auto()
    GO_TO_DOCK = auto()
    ENABLE_SCHEDULE = auto()
    DISABLE_SCHEDULE = auto()
    FIND_ME = auto()
    SPOT_CLEAN = auto()
    SPOT_STOP = auto()


@dataclass(frozen=True)
class SpotParams:
    """Spot cleaning parameters.

    Attributes:
        width: Spot width in cm, ``None`` without spot-plus support.
        height: Spot height in cm, ``None`` without spot-plus support.
        repeat: Clean the spot twice.
    """

    width: int | None = None
    height: int | None = None
    repeat: bool = False


@dataclass(frozen=True)
class Intent:
    """One requested action, consumed by a single sequencer decision."""

    kind: IntentKind
    region: BoundaryRegion | None = None
    spot: SpotParams | None = None


@dataclass(frozen=True)
class ControlResult:
    """Outcome reported back to the bridge for a control request."""

    success: bool = True
    error: str = ""

    @classmethod
    def failed(cls, error: object) -> ControlResult:
        return cls(success=False, error=str(error))
