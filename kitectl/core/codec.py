"""JSON wire codec for hub messages.

The payload shape of a message is selected by its action tag, never by
inspecting the payload itself.
"""

from __future__ import annotations

import base64
import json
import re
from datetime import datetime
from typing import Any

from kitectl.core.errors import ProtocolError
from kitectl.core.model import (
    Action,
    Endpoint,
    LogEntry,
    Message,
    Payload,
    SetupMessage,
    ValueReport,
)

# Hub timestamps may carry nanoseconds; datetime keeps microseconds.
_TIMESTAMP_RE = re.compile(r"^(?P<base>[^.]+?)(?:\.(?P<frac>\d+))?(?P<tz>Z|[+-]\d{2}:\d{2})?$")


def parse_timestamp(value: str) -> datetime:
    match = _TIMESTAMP_RE.match(value.strip())
    if match is None:
        raise ProtocolError(f"Invalid timestamp '{value}'")
    text = match.group("base")
    if match.group("frac"):
        text += "." + match.group("frac")[:6].ljust(6, "0")
    tz = match.group("tz")
    text += "+00:00" if tz in (None, "Z") else tz
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ProtocolError(f"Invalid timestamp '{value}'") from exc


def _encode_endpoint(endpoint: Endpoint) -> dict[str, str]:
    return {
        "domain": endpoint.domain,
        "type": endpoint.type,
        "host": endpoint.host,
        "address": endpoint.address,
        "id": endpoint.id,
    }


def _decode_endpoint(raw: Any) -> Endpoint:
    if raw is None:
        return Endpoint()
    if not isinstance(raw, dict):
        raise ProtocolError(f"Endpoint must be an object, got {type(raw).__name__}")
    return Endpoint(**{name: str(raw.get(name) or "*") for name in ("domain", "type", "host", "address", "id")})


def _encode_data(data: Payload) -> Any:
    if isinstance(data, SetupMessage):
        return {
            "description": data.description,
            "api_key": data.api_key,
            "files": [
                {"path": f.path, "content": base64.b64encode(f.content).decode("ascii")}
                for f in data.files
            ],
        }
    return data


def _decode_log_entries(raw: Any) -> tuple[LogEntry, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ProtocolError("Log payload must be a list")
    entries: list[LogEntry] = []
    for item in raw:
        if not isinstance(item, dict):
            raise ProtocolError("Log entry must be an object")
        entries.append(
            LogEntry(
                time=parse_timestamp(str(item.get("time", ""))),
                origin=_decode_endpoint(item.get("address")),
                text=str(item.get("message", "")),
            )
        )
    return tuple(entries)


def _decode_value_report(raw: Any) -> ValueReport:
    if not isinstance(raw, dict):
        raise ProtocolError("Value payload must be an object")
    return ValueReport(
        type=str(raw.get("type", "")),
        description=str(raw.get("description", "")),
        value=raw.get("value"),
        unit=str(raw.get("unit") or ""),
    )


def _decode_data(action: Action | str, raw: Any) -> Payload:
    if action == Action.LOG:
        return _decode_log_entries(raw)
    if action == Action.VALUE:
        return _decode_value_report(raw)
    return raw


def encode_message(message: Message) -> str:
    envelope: dict[str, Any] = {
        "action": str(message.action),
        "sender": _encode_endpoint(message.sender),
    }
    if message.receiver is not None:
        envelope["receiver"] = _encode_endpoint(message.receiver)
    envelope["data"] = _encode_data(message.data)
    return json.dumps(envelope)


def decode_message(frame: str | bytes) -> Message:
    try:
        envelope = json.loads(frame)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ProtocolError(f"Malformed frame: {exc}") from exc
    if not isinstance(envelope, dict) or not isinstance(envelope.get("action"), str):
        raise ProtocolError("Frame is not a message envelope")

    raw_action = envelope["action"].lower()
    try:
        action: Action | str = Action(raw_action)
    except ValueError:
        action = raw_action

    receiver = envelope.get("receiver")
    return Message(
        action=action,
        sender=_decode_endpoint(envelope.get("sender")),
        receiver=_decode_endpoint(receiver) if receiver is not None else None,
        data=_decode_data(action, envelope.get("data")),
    )
