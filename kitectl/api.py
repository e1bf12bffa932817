"""Stable public API for building tooling on top of kitectl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from kitectl.core.address import resolve_destination, resolve_endpoint
from kitectl.core.codec import decode_message, encode_message
from kitectl.core.command import ParsedCommand, parse_command
from kitectl.core.config_loader import load_config
from kitectl.core.connection import ConnectionManager, ConnectionState
from kitectl.core.errors import (
    ConfigError,
    ExportError,
    KiteError,
    ProtocolError,
    SetupValidationError,
    TransportConnectError,
    TransportError,
    TransportReceiveError,
    TransportSendError,
    UserInputError,
)
from kitectl.core.model import (
    Action,
    ClientConfig,
    Endpoint,
    LogEntry,
    Message,
    SetupFile,
    SetupMessage,
    ValueReport,
)
from kitectl.core.session import Session, run_session
from kitectl.core.setup_bundle import build_setup_message
from kitectl.transports.base import Dialer, Transport
from kitectl.transports.websocket import WebSocketDialer, WebSocketTransport

__all__ = [
    "KiteError",
    "ConfigError",
    "ExportError",
    "ProtocolError",
    "SetupValidationError",
    "UserInputError",
    "TransportError",
    "TransportConnectError",
    "TransportReceiveError",
    "TransportSendError",
    "Action",
    "ClientConfig",
    "Endpoint",
    "LogEntry",
    "Message",
    "SetupFile",
    "SetupMessage",
    "ValueReport",
    "ParsedCommand",
    "ConnectionManager",
    "ConnectionState",
    "Session",
    "Dialer",
    "Transport",
    "WebSocketDialer",
    "WebSocketTransport",
    "build_setup_message",
    "decode_message",
    "encode_message",
    "load_config",
    "parse_command",
    "resolve_destination",
    "resolve_endpoint",
    "run_session",
]
