"""Interactive session: three cooperating tasks over one hub connection."""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from kitectl.core.codec import decode_message
from kitectl.core.connection import ConnectionManager
from kitectl.core.errors import ProtocolError, TransportError
from kitectl.core.inbound import Console, InboundDispatcher
from kitectl.core.model import ClientConfig
from kitectl.core.outbound import OutboundPipeline
from kitectl.transports.base import Dialer, Transport

LOGGER = logging.getLogger(__name__)


class ExportSlot:
    """Filename armed by an export command, consumed by the next export reply.

    Written only by the command-processing task and taken only by the
    listening task, both on the event loop thread.
    """

    def __init__(self) -> None:
        self._filename: str | None = None

    @property
    def armed(self) -> bool:
        return self._filename is not None

    def arm(self, filename: str) -> None:
        self._filename = filename

    def take(self) -> str | None:
        filename, self._filename = self._filename, None
        return filename


@dataclass
class Session:
    config: ClientConfig
    transport: Transport
    console: Console
    export_slot: ExportSlot = field(default_factory=ExportSlot)
    shutdown: asyncio.Event = field(default_factory=asyncio.Event)


def capture_input(
    session: Session,
    lines: asyncio.Queue[str],
    loop: asyncio.AbstractEventLoop,
    read_line: Callable[[], str],
) -> None:
    """Blocking stdin reader, run on a daemon thread.

    A blank line (or end of input) ends the session.
    """
    while not session.shutdown.is_set():
        session.console.show_prompt()
        raw = read_line()
        if session.shutdown.is_set():
            return
        line = raw.rstrip("\r\n")
        if not line:
            if not raw:
                LOGGER.debug("End of input")
            loop.call_soon_threadsafe(session.shutdown.set)
            return
        asyncio.run_coroutine_threadsafe(lines.put(line), loop).result()


async def process_commands(session: Session, lines: asyncio.Queue[str], pipeline: OutboundPipeline) -> None:
    while True:
        line = await lines.get()
        try:
            await pipeline.handle_line(line)
        except TransportError as exc:
            LOGGER.error("Error sending message --> %s", exc)
            session.shutdown.set()
            return
        except Exception:
            LOGGER.exception("Command processing stopped on %r", line)
            session.shutdown.set()
            return


async def listen(session: Session, dispatcher: InboundDispatcher) -> None:
    while True:
        try:
            message = decode_message(await session.transport.recv())
        except (TransportError, ProtocolError) as exc:
            LOGGER.error("Error on read message -> %s", exc)
            session.shutdown.set()
            return
        try:
            dispatcher.dispatch(message)
        except Exception:
            LOGGER.exception("Inbound processing stopped on %s message", message.action)
            session.shutdown.set()
            return


async def run_session(
    config: ClientConfig,
    dialer: Dialer,
    *,
    read_line: Callable[[], str] | None = None,
    console: Console | None = None,
    manager: ConnectionManager | None = None,
) -> Session:
    """Connect, register, and run until the first shutdown signal."""
    manager = manager or ConnectionManager(config, dialer)
    transport = await manager.open()

    session = Session(config=config, transport=transport, console=console or Console(config.prompt))
    pipeline = OutboundPipeline(config, transport, session.console, session.export_slot)
    dispatcher = InboundDispatcher(session.console, session.export_slot)
    lines: asyncio.Queue[str] = asyncio.Queue(maxsize=1)

    tasks = [
        asyncio.create_task(process_commands(session, lines, pipeline)),
        asyncio.create_task(listen(session, dispatcher)),
    ]
    reader = threading.Thread(
        target=capture_input,
        args=(session, lines, asyncio.get_running_loop(), read_line or sys.stdin.readline),
        name="kitectl-input",
        daemon=True,
    )
    reader.start()

    await session.shutdown.wait()
    manager.mark_disconnected()
    for task in tasks:
        task.cancel()
    await transport.close()
    LOGGER.info("kite cli exiting")
    return session
