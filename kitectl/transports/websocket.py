"""WebSocket transport implementation using the websockets asyncio client."""

from __future__ import annotations

import logging
import ssl

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from kitectl.core.errors import (
    TransportConnectError,
    TransportReceiveError,
    TransportSendError,
)
from kitectl.core.model import ClientConfig

LOGGER = logging.getLogger(__name__)


def server_url(config: ClientConfig, addr: str | None = None) -> str:
    scheme = "wss" if config.ssl else "ws"
    return f"{scheme}://{addr or config.server_address}/ws"


def _ssl_context(config: ClientConfig) -> ssl.SSLContext | None:
    if not config.ssl:
        return None
    context = ssl.create_default_context()
    if config.insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


class WebSocketTransport:
    def __init__(self, connection: ClientConnection) -> None:
        self._connection = connection

    async def send(self, frame: str) -> None:
        try:
            await self._connection.send(frame)
        except (ConnectionClosed, OSError) as exc:
            raise TransportSendError(f"WebSocket send failed: {exc}") from exc

    async def recv(self) -> str:
        try:
            frame = await self._connection.recv()
        except (ConnectionClosed, OSError) as exc:
            raise TransportReceiveError(f"WebSocket receive failed: {exc}") from exc
        if isinstance(frame, bytes):
            try:
                return frame.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise TransportReceiveError(f"Binary frame is not UTF-8: {exc}") from exc
        return frame

    async def close(self) -> None:
        await self._connection.close()


class WebSocketDialer:
    """Dials ``scheme://host:port/ws`` with an Origin header equal to the URL."""

    def __init__(self, config: ClientConfig, addr: str | None = None) -> None:
        self.url = server_url(config, addr)
        self._ssl = _ssl_context(config)

    async def dial(self) -> WebSocketTransport:
        try:
            # Keepalive is driven by the hub; pongs are sent by the protocol layer.
            connection = await connect(
                self.url,
                origin=self.url,
                ssl=self._ssl,
                ping_interval=None,
                max_size=None,
            )
        except (InvalidURI, InvalidHandshake, OSError, TimeoutError) as exc:
            raise TransportConnectError(f"Could not connect to {self.url}: {exc}") from exc
        LOGGER.info(
            "kite server connected (http status %d)",
            connection.response.status_code if connection.response else 0,
        )
        return WebSocketTransport(connection)
