"""Operator command-line grammar: ``action[@destination][:payload]``."""

from __future__ import annotations

import re
from dataclasses import dataclass

from kitectl.core.errors import UserInputError
from kitectl.core.model import Action

# One or more colons separate the destination from the payload.
_COMMAND_RE = re.compile(r"^([^:@]+)(?:@([^:]*))?(?::+(.*))?$")

USAGE = "{action}[@{destination}][:{message}]"


@dataclass(frozen=True)
class ParsedCommand:
    action: Action
    destination: str
    payload: str | None


def parse_command(line: str) -> ParsedCommand:
    match = _COMMAND_RE.match(line.rstrip("\r\n"))
    if match is None:
        raise UserInputError(f"Invalid command ({USAGE})")

    action = Action.parse(match.group(1))
    payload = match.group(3)
    if payload == "":
        payload = None
    return ParsedCommand(
        action=action,
        destination=match.group(2) or "",
        payload=payload,
    )
