"""Abstract device cloud interfaces for the Neato bridge.

All bridge code that talks to the vendor cloud must go through these
interfaces. Every operation is a coroutine that may raise a
:class:`~neatobridge.gateway.errors.GatewayError`; commands change the robot
remotely and the effect is only visible through a later ``get_state()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class RobotSnapshot:
    """State of a robot as last reported by the cloud.

    Attributes:
        can_start: A new cleaning run may be started.
        can_pause: The robot is running and may be paused.
        can_resume: The robot is paused and may resume.
        can_go_to_base: The robot may be sent back to its dock.
        is_docked: The robot sits on its dock.
        is_charging: The battery is charging.
        dock_has_been_seen: The robot located its dock during this run.
        charge: Battery level in percent (0-100).
        eco: Eco cleaning mode.
        no_go_lines: Respect no-go lines while cleaning.
        navigation_mode: 1 for normal, 2 for extra care navigation.
        spot_width: Spot cleaning width in cm.
        spot_height: Spot cleaning height in cm.
        spot_repeat: Clean the spot twice.
        is_schedule_enabled: The cloud cleaning schedule is active.
        cleaning_boundary_id: Boundary currently being cleaned, if any.
    """

    can_start: bool = False
    can_pause: bool = False
    can_resume: bool = False
    can_go_to_base: bool = False
    is_docked: bool = False
    is_charging: bool = False
    dock_has_been_seen: bool = False
    charge: int = 0
    eco: bool = False
    no_go_lines: bool = False
    navigation_mode: int = 1
    spot_width: int = 200
    spot_height: int = 200
    spot_repeat: bool = False
    is_schedule_enabled: bool = False
    cleaning_boundary_id: str | None = None


@dataclass(frozen=True)
class RobotMeta:
    """Static robot metadata.

    Attributes:
        model_name: Vendor model name.
        firmware: Firmware revision string.
    """

    model_name: str = ""
    firmware: str = ""


@dataclass(frozen=True)
class MapInfo:
    """A persistent floor map stored in the cloud."""

    id: str
    name: str = ""


@dataclass(frozen=True)
class BoundaryInfo:
    """A boundary drawn on a persistent map.

    Attributes:
        id: Opaque boundary identifier.
        name: Human name given in the vendor app.
        type: Boundary geometry; only ``"polygon"`` boundaries are rooms.
    """

    id: str
    name: str
    type: str = "polygon"


class RobotClient(ABC):
    """Abstract handle on one cloud-connected robot."""

    @property
    @abstractmethod
    def serial(self) -> str:
        """Robot serial number."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Robot name as set in the vendor app."""
        ...

    @property
    @abstractmethod
    def meta(self) -> RobotMeta:
        """Model and firmware information."""
        ...

    @property
    @abstractmethod
    def available_services(self) -> dict[str, str]:
        """Service name to service version (e.g. ``{"spotCleaning": "basic-1"}``)."""
        ...

    @abstractmethod
    async def get_state(self) -> RobotSnapshot:
        """Fetch the current robot state.

        Returns:
            A fresh snapshot owned by the caller.
        """
        ...

    @abstractmethod
    async def start_cleaning(
        self, eco: bool, navigation_mode: int, no_go_lines: bool
    ) -> None:
        """Start a whole-house cleaning run.

        Args:
            eco: Use eco mode.
            navigation_mode: 1 for normal, 2 for extra care.
            no_go_lines: Respect no-go lines.
        """
        ...

    @abstractmethod
    async def start_cleaning_boundary(
        self, eco: bool, extra_care: bool, boundary_id: str
    ) -> None:
        """Start cleaning of a single boundary (room)."""
        ...

    @abstractmethod
    async def start_spot_cleaning(
        self,
        eco: bool,
        width: int | None,
        height: int | None,
        repeat: bool,
        navigation_mode: int,
    ) -> None:
        """Start a spot cleaning run around the robot's position.

        Args:
            eco: Use eco mode.
            width: Spot width in cm, ``None`` when the robot has no spot-plus support.
            height: Spot height in cm, ``None`` when the robot has no spot-plus support.
            repeat: Clean the spot twice.
            navigation_mode: 1 for normal, 2 for extra care.
        """
        ...

    @abstractmethod
    async def pause_cleaning(self) -> None:
        """Pause the running cleaning."""
        ...

    @abstractmethod
    async def resume_cleaning(self) -> None:
        """Resume a paused cleaning."""
        ...

    @abstractmethod
    async def send_to_base(self) -> None:
        """Send the robot back to its dock."""
        ...

    @abstractmethod
    async def enable_schedule(self) -> None:
        """Enable the cloud cleaning schedule."""
        ...

    @abstractmethod
    async def disable_schedule(self) -> None:
        """Disable the cloud cleaning schedule."""
        ...

    @abstractmethod
    async def find_me(self) -> None:
        """Make the robot play a sound so it can be located."""
        ...

    @abstractmethod
    async def get_persistent_maps(self) -> list[MapInfo]:
        """List the persistent maps of this robot."""
        ...

    @abstractmethod
    async def get_map_boundaries(self, map_id: str) -> list[BoundaryInfo]:
        """List the boundaries drawn on one persistent map."""
        ...


class CloudClient(ABC):
    """Abstract vendor cloud account."""

    @abstractmethod
    async def authorize(self, email: str, password: str) -> None:
        """Log in to the vendor cloud.

        Raises:
            AuthenticationError: If the credentials are rejected or the
                cloud cannot be reached.
        """
        ...

    @abstractmethod
    async def get_robots(self) -> list[RobotClient]:
        """List the robots registered to the logged-in account."""
        ...
