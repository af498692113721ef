"""Robot discovery — login, robot listing and map boundary fetching."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from neatobridge.gateway.interfaces import BoundaryInfo, CloudClient, RobotClient

logger = logging.getLogger(__name__)


@dataclass
class DiscoveredRobot:
    """A robot found in the account with the boundaries of all its maps."""

    robot: RobotClient
    boundaries: list[BoundaryInfo] = field(default_factory=list)


async def discover(client: CloudClient, email: str, password: str) -> list[DiscoveredRobot]:
    """Log in and list every robot with its map boundaries.

    Login or robot listing failures are logged and yield no robots. A
    failure while fetching maps or boundaries of one robot is logged and
    that robot keeps the boundaries found before the failure.

    Args:
        client: Cloud account client.
        email: Account email.
        password: Account password.

    Returns:
        Discovered robots, possibly empty.
    """
    logger.debug("Loading your robots")
    try:
        await client.authorize(email, password)
    except Exception as e:
        logger.error(
            "Can't log on to Neato cloud. Please check your internet connection "
            "and your credentials. Try again later if the Neato servers have issues: %s",
            e,
        )
        return []

    try:
        robots = await client.get_robots()
    except Exception as e:
        logger.error("Successful login but can't connect to your Neato robots: %s", e)
        return []

    if not robots:
        logger.error("Successful login but no robots associated with your account.")
        return []

    logger.debug("Found %d robots", len(robots))
    return [
        DiscoveredRobot(robot=robot, boundaries=await _load_boundaries(robot))
        for robot in robots
    ]


async def _load_boundaries(robot: RobotClient) -> list[BoundaryInfo]:
    boundaries: list[BoundaryInfo] = []
    try:
        maps = await robot.get_persistent_maps()
    except Exception as e:
        logger.error("%s: error updating persistent maps: %s", robot.name, e)
        return boundaries

    for persistent_map in maps:
        try:
            boundaries.extend(await robot.get_map_boundaries(persistent_map.id))
        except Exception as e:
            logger.error(
                "%s: error getting boundaries of map %s: %s", robot.name, persistent_map.id, e
            )
            break
    return boundaries
