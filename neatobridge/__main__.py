"""Run the bridge against the simulated Neato cloud.

    python -m neatobridge
"""

from __future__ import annotations

import asyncio
import logging

from neatobridge.core.config import load_settings
from neatobridge.core.logging_config import configure_logging
from neatobridge.core.platform import NeatoPlatform
from neatobridge.gateway.interfaces import BoundaryInfo, MapInfo
from neatobridge.gateway.stubs import StubCloudClient, StubRobot

logger = logging.getLogger("neatobridge")


def _log_toggle(representation: str, toggle: str, value: object) -> None:
    logger.debug("%s: %s = %s", representation, toggle, value)


def _demo_client() -> StubCloudClient:
    robot = StubRobot(
        name="Botvac",
        maps=[MapInfo(id="map-1", name="Ground floor")],
        boundaries={
            "map-1": [
                BoundaryInfo(id="b-kitchen", name="Kitchen"),
                BoundaryInfo(id="b-living", name="Living Room"),
                BoundaryInfo(id="b-line", name="Stairs", type="polyline"),
            ]
        },
    )
    return StubCloudClient([robot])


async def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    platform = NeatoPlatform(settings, _demo_client(), listener=_log_toggle)
    await platform.run()


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Stopping due to keyboard interrupt.")


if __name__ == "__main__":
    run()
