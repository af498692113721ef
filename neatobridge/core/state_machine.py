"""Robot cleaning state machine.

The cloud only reports loose capability flags. Every control decision is a
lookup in one of the transition tables below: ordered rows of
(capability check, action), first match wins, no match means no-op.

Transitions:
    Start, no region or the region being cleaned (also SpotClean):
        can_resume → RESUME
        can_start → START
    Start, another region:
        can_pause or can_resume → SWITCH_ROOM (dock, then queue the region)
        otherwise → START the region directly
    Stop (also SpotStop):
        can_pause → PAUSE
    GoToDock:
        can_pause → PAUSE_THEN_DOCK
        can_go_to_base → SEND_TO_BASE

The cloud may report can_pause and can_resume together, so the tables key
on the flags each rule names rather than on a single folded state. The
folded CleaningState is what the sequencer logs.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Callable

from neatobridge.core.models import Device, Intent, IntentKind
from neatobridge.gateway.interfaces import RobotSnapshot


class CleaningState(Enum):
    """States of a robot, derived from its capability flags.

    Derivation (first match wins):
        can_resume → PAUSED
        can_pause → CLEANING
        can_start and is_docked → DOCKED
        can_start → IDLE
        otherwise → DOCKING (busy: returning home, or docked but not ready)
    """

    IDLE = auto()
    CLEANING = auto()
    PAUSED = auto()
    DOCKING = auto()
    DOCKED = auto()


class Action(Enum):
    """What the sequencer does with an intent."""

    NONE = auto()
    START = auto()
    RESUME = auto()
    PAUSE = auto()
    SWITCH_ROOM = auto()
    PAUSE_THEN_DOCK = auto()
    SEND_TO_BASE = auto()
    ENABLE_SCHEDULE = auto()
    DISABLE_SCHEDULE = auto()
    FIND_ME = auto()


def derive_state(snapshot: RobotSnapshot) -> CleaningState:
    """Fold the capability flags of a snapshot into a CleaningState."""
    if snapshot.can_resume:
        return CleaningState.PAUSED
    if snapshot.can_pause:
        return CleaningState.CLEANING
    if snapshot.can_start:
        return CleaningState.DOCKED if snapshot.is_docked else CleaningState.IDLE
    return CleaningState.DOCKING


Rule = tuple[Callable[[RobotSnapshot], bool], Action]


def _can_resume(snapshot: RobotSnapshot) -> bool:
    return snapshot.can_resume


def _can_start(snapshot: RobotSnapshot) -> bool:
    return snapshot.can_start


def _can_pause(snapshot: RobotSnapshot) -> bool:
    return snapshot.can_pause


def _can_go_to_base(snapshot: RobotSnapshot) -> bool:
    return snapshot.can_go_to_base


def _is_running(snapshot: RobotSnapshot) -> bool:
    return snapshot.can_pause or snapshot.can_resume


def _always(snapshot: RobotSnapshot) -> bool:
    return True


# Start without a region, or on the region already being cleaned.
_START_SAME: tuple[Rule, ...] = (
    (_can_resume, Action.RESUME),
    (_can_start, Action.START),
)

# Start on a region other than the one being cleaned.
_START_OTHER: tuple[Rule, ...] = (
    (_is_running, Action.SWITCH_ROOM),
    (_always, Action.START),
)

_STOP: tuple[Rule, ...] = (
    (_can_pause, Action.PAUSE),
)

_GO_TO_DOCK: tuple[Rule, ...] = (
    (_can_pause, Action.PAUSE_THEN_DOCK),
    (_can_go_to_base, Action.SEND_TO_BASE),
)

# Intents that skip capability gating entirely.
_UNGATED: dict[IntentKind, Action] = {
    IntentKind.ENABLE_SCHEDULE: Action.ENABLE_SCHEDULE,
    IntentKind.DISABLE_SCHEDULE: Action.DISABLE_SCHEDULE,
    IntentKind.FIND_ME: Action.FIND_ME,
}


def _lookup(table: tuple[Rule, ...], snapshot: RobotSnapshot) -> Action:
    for applies, action in table:
        if applies(snapshot):
            return action
    return Action.NONE


def decide(device: Device, intent: Intent) -> Action:
    """Choose the action for an intent given the device's current snapshot.

    Args:
        device: Device whose snapshot was just refreshed.
        intent: The requested action.

    Returns:
        The single action the sequencer must perform.

    Raises:
        ValueError: If the intent kind is unknown.
    """
    if intent.kind in _UNGATED:
        return _UNGATED[intent.kind]

    snapshot = device.snapshot

    if intent.kind in (IntentKind.STOP, IntentKind.SPOT_STOP):
        return _lookup(_STOP, snapshot)

    if intent.kind == IntentKind.SPOT_CLEAN:
        return _lookup(_START_SAME, snapshot)

    if intent.kind == IntentKind.START:
        region = intent.region
        if region is None or region.id == snapshot.cleaning_boundary_id:
            return _lookup(_START_SAME, snapshot)
        return _lookup(_START_OTHER, snapshot)

    if intent.kind == IntentKind.GO_TO_DOCK:
        return _lookup(_GO_TO_DOCK, snapshot)

    raise ValueError(f"Unknown intent kind: {intent.kind}")
