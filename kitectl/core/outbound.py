"""Turns operator command lines into messages written to the hub."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from kitectl.core.address import resolve_destination
from kitectl.core.codec import encode_message
from kitectl.core.command import ParsedCommand, parse_command
from kitectl.core.errors import SetupValidationError, UserInputError
from kitectl.core.inbound import Console
from kitectl.core.model import Action, ClientConfig, Message
from kitectl.core.setup_bundle import build_setup_message
from kitectl.transports.base import Transport

if TYPE_CHECKING:
    from kitectl.core.session import ExportSlot

LOGGER = logging.getLogger(__name__)


class OutboundPipeline:
    def __init__(
        self,
        config: ClientConfig,
        transport: Transport,
        console: Console,
        export_slot: ExportSlot,
    ) -> None:
        self.config = config
        self.transport = transport
        self.console = console
        self.export_slot = export_slot

    def build_message(self, command: ParsedCommand) -> Message:
        receiver = resolve_destination(command.destination, self.config.endpoint)

        if command.action == Action.SETUP:
            if not command.payload:
                raise UserInputError("Setup error, missing descriptor file")
            return Message(
                action=Action.SETUP,
                sender=self.config.endpoint,
                data=build_setup_message(command.payload),
            )

        if command.action == Action.IMPORT:
            if not command.payload:
                raise UserInputError("Import error, missing filename")
            try:
                content = Path(command.payload).read_text(encoding="utf-8")
            except (OSError, ValueError) as exc:
                raise UserInputError(
                    f"Import error, something wrong with file {command.payload} --> {exc}"
                ) from exc
            return Message(action=command.action, sender=self.config.endpoint, receiver=receiver, data=content)

        if command.action == Action.EXPORT:
            if command.payload:
                self.export_slot.arm(command.payload)
            return Message(action=command.action, sender=self.config.endpoint, receiver=receiver, data="")

        return Message(
            action=command.action,
            sender=self.config.endpoint,
            receiver=None if command.action == Action.REGISTER else receiver,
            data=command.payload or "",
        )

    async def handle_line(self, line: str) -> Message | None:
        """Parse, build and send one command line.

        Operator mistakes are logged and followed by a fresh prompt; transport
        errors propagate to the caller.
        """
        try:
            message = self.build_message(parse_command(line))
        except (UserInputError, SetupValidationError) as exc:
            LOGGER.error("%s", exc)
            self.console.show_prompt()
            return None
        await self.transport.send(encode_message(message))
        LOGGER.debug("Sent %s to %s", message.action, message.receiver)
        return message
