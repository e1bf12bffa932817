"""Core data models shared by the parser, codec, and session."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Union

from kitectl.core.errors import UserInputError

WILDCARD = "*"


class Action(str, Enum):
    REGISTER = "register"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    SETUP = "setup"
    IMPORT = "import"
    EXPORT = "export"
    LOG = "log"
    READLOG = "readlog"
    VALUE = "value"
    READ = "read"
    CMD = "cmd"
    MOVE = "move"
    NOTIFY = "notify"
    DISCOVER = "discover"
    PROVISION = "provision"
    UPDATE = "update"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: str) -> Action:
        """Return the action named by ``token``, ignoring case."""
        normalized = token.strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            raise UserInputError(f"Invalid action '{normalized}'") from None


@dataclass(frozen=True)
class Endpoint:
    domain: str = WILDCARD
    type: str = WILDCARD
    host: str = WILDCARD
    address: str = WILDCARD
    id: str = WILDCARD

    def __str__(self) -> str:
        return ".".join((self.domain, self.type, self.host, self.address, self.id))


@dataclass(frozen=True)
class LogEntry:
    time: datetime
    origin: Endpoint
    text: str


@dataclass(frozen=True)
class ValueReport:
    type: str
    description: str
    value: Any
    unit: str = ""


@dataclass(frozen=True)
class SetupFile:
    path: str
    content: bytes


@dataclass(frozen=True)
class SetupMessage:
    description: str = ""
    api_key: str = ""
    files: tuple[SetupFile, ...] = ()


Payload = Union[str, tuple[LogEntry, ...], ValueReport, SetupMessage, Any]


@dataclass(frozen=True)
class Message:
    # Inbound actions outside the known vocabulary are kept as plain strings.
    action: Action | str
    sender: Endpoint
    receiver: Endpoint | None = None
    data: Payload = ""


@dataclass(frozen=True)
class ClientConfig:
    name: str
    api_key: str
    server: str
    port: str
    ssl: bool
    endpoint: Endpoint
    insecure: bool = False

    @property
    def server_address(self) -> str:
        return f"{self.server}:{self.port}"

    @property
    def prompt(self) -> str:
        return f"{self.endpoint}> "
