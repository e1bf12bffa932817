"""Hub connection lifecycle: dial with retry, then register."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from kitectl.core.codec import decode_message, encode_message
from kitectl.core.errors import ProtocolError, TransportConnectError, TransportError
from kitectl.core.model import Action, ClientConfig, Message
from kitectl.transports.base import Dialer, Transport

RETRY_INTERVAL_S = 5.0
LOGGER = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    DIALING = "dialing"
    CONNECTED = "connected"
    REGISTERING = "registering"
    READY = "ready"


class ConnectionManager:
    """Owns the hub transport until it is handed over in the ready state.

    Dialing is retried forever at a fixed interval. Registration is advisory:
    an unexpected reply is logged and the session proceeds.
    """

    def __init__(
        self,
        config: ClientConfig,
        dialer: Dialer,
        *,
        retry_interval_s: float = RETRY_INTERVAL_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self.dialer = dialer
        self.retry_interval_s = retry_interval_s
        self._sleep = sleep
        self.state = ConnectionState.DISCONNECTED
        self.failed_attempts = 0
        self.registrations = 0

    async def dial(self) -> Transport:
        self.state = ConnectionState.DIALING
        while True:
            try:
                transport = await self.dialer.dial()
            except TransportConnectError as exc:
                self.failed_attempts += 1
                LOGGER.warning("Dial error %s (%d times)", exc, self.failed_attempts)
                await self._sleep(self.retry_interval_s)
                continue
            self.state = ConnectionState.CONNECTED
            return transport

    async def register(self, transport: Transport) -> Message | None:
        """Send the registration message and read exactly one reply."""
        self.state = ConnectionState.REGISTERING
        message = Message(
            action=Action.REGISTER,
            sender=self.config.endpoint,
            data=self.config.api_key,
        )
        await transport.send(encode_message(message))
        self.registrations += 1

        try:
            reply = decode_message(await transport.recv())
        except ProtocolError as exc:
            LOGGER.warning("Unexpected registration response: %s", exc)
            reply = None
        else:
            if reply.action == Action.ACCEPTED:
                LOGGER.info("Connection accepted from %s", reply.sender)
            else:
                LOGGER.warning("Unexpected response (%s) from %s", reply.action, reply.sender)
        self.state = ConnectionState.READY
        return reply

    async def open(self) -> Transport:
        """Block until a registered connection is ready."""
        while True:
            transport = await self.dial()
            try:
                await self.register(transport)
            except TransportError as exc:
                LOGGER.error("Error registering cli on server --> %s", exc)
                self.state = ConnectionState.DISCONNECTED
                await transport.close()
                await self._sleep(self.retry_interval_s)
                continue
            return transport

    def mark_disconnected(self) -> None:
        self.state = ConnectionState.DISCONNECTED
