"""Errors raised by the remote device cloud gateway."""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for every failure coming from the device cloud."""


class AuthenticationError(GatewayError):
    """Login to the device cloud failed (bad credentials or network)."""


class DiscoveryError(GatewayError):
    """Robots, maps or boundaries could not be listed."""


class RemoteOperationError(GatewayError):
    """A control command was rejected or did not reach the robot.

    Args:
        operation: Name of the remote operation that failed.
        reason: Human-readable failure reason.
    """

    def __init__(self, operation: str, reason: str = "") -> None:
        self.operation = operation
        self.reason = reason
        message = f"{operation} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
