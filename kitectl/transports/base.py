"""Transport interfaces."""

from __future__ import annotations

from typing import Protocol


class Transport(Protocol):
    """Duplex text-frame connection to the hub.

    One reader and one writer may use a transport concurrently.
    """

    async def send(self, frame: str) -> None:
        """Write one frame, raising TransportSendError on failure."""

    async def recv(self) -> str:
        """Read one frame, raising TransportReceiveError on failure or close."""

    async def close(self) -> None:
        """Close the connection."""


class Dialer(Protocol):
    async def dial(self) -> Transport:
        """Open a new transport, raising TransportConnectError on failure."""
