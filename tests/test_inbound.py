from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from kitectl.core.inbound import Console, InboundDispatcher, format_log_entry
from kitectl.core.model import Action, Endpoint, LogEntry, Message, ValueReport
from kitectl.core.session import ExportSlot

HUB = Endpoint(domain="home", type="server", host="hub", address="main", id="0")
PROMPT = "home.cli.laptop.console.1> "


def _dispatcher() -> tuple[InboundDispatcher, ExportSlot]:
    slot = ExportSlot()
    return InboundDispatcher(Console(PROMPT), slot), slot


def _entry(text: str, second: int) -> LogEntry:
    return LogEntry(time=datetime(2024, 3, 1, 10, 0, second, tzinfo=timezone.utc), origin=HUB, text=text)


@pytest.mark.parametrize("texts", [[], ["only"], ["first", "second", "third", "fourth"]])
def test_log_batch_renders_in_arrival_order(texts: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    dispatcher, _ = _dispatcher()
    # Timestamps run backwards to prove rendering does not sort.
    entries = tuple(_entry(text, 59 - i) for i, text in enumerate(texts))
    dispatcher.dispatch(Message(action=Action.LOG, sender=HUB, data=entries))

    out = capsys.readouterr().out
    lines = [line for line in out.splitlines() if line and not line.startswith(PROMPT)]
    assert lines == [format_log_entry(e) for e in entries]
    assert out.endswith(PROMPT)


def test_log_entry_format() -> None:
    line = format_log_entry(_entry("boot", 5))
    assert line.endswith(" home.server.hub.main.0, boot")
    assert len(line.split(" ")[0].split("/")) == 3


@pytest.mark.parametrize(
    ("report", "expected"),
    [
        (ValueReport(type="gpio", description="relay", value=True), "Value for relay --> true"),
        (ValueReport(type="gpio", description="relay", value=False), "Value for relay --> false"),
        (ValueReport(type="float", description="temp", value=21.456, unit="C"), "Value for temp --> 21.46 C"),
        (ValueReport(type="string", description="mode", value="eco", unit="lvl"), "Value for mode --> eco lvl"),
    ],
)
def test_value_reports(report: ValueReport, expected: str, capsys: pytest.CaptureFixture[str]) -> None:
    dispatcher, _ = _dispatcher()
    dispatcher.dispatch(Message(action=Action.VALUE, sender=HUB, data=report))
    out = capsys.readouterr().out
    assert expected in out
    assert out.endswith(PROMPT)


def test_unknown_value_type_is_skipped(capsys: pytest.CaptureFixture[str]) -> None:
    dispatcher, _ = _dispatcher()
    dispatcher.dispatch(Message(action=Action.VALUE, sender=HUB, data=ValueReport(type="rgb", description="x", value=1)))
    assert capsys.readouterr().out == PROMPT


def test_generic_fallback(capsys: pytest.CaptureFixture[str], caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("INFO")
    dispatcher, _ = _dispatcher()
    dispatcher.dispatch(Message(action="heartbeat", sender=HUB, data={"n": 1}))
    assert "Message received (heartbeat)" in caplog.text
    assert capsys.readouterr().out.endswith(PROMPT)


def test_export_is_one_shot(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    dispatcher, slot = _dispatcher()
    target = tmp_path / "out.json"
    slot.arm(str(target))

    dispatcher.dispatch(Message(action=Action.EXPORT, sender=HUB, data={"lights": [1, 2]}))
    assert json.loads(target.read_text(encoding="utf-8")) == {"lights": [1, 2]}
    assert not slot.armed

    dispatcher.dispatch(Message(action=Action.EXPORT, sender=HUB, data={"lights": [3]}))
    assert json.loads(target.read_text(encoding="utf-8")) == {"lights": [1, 2]}
    assert "Export error, missing filename" in caplog.text
    assert not slot.armed


def test_export_into_missing_directory(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    dispatcher, slot = _dispatcher()
    slot.arm(str(tmp_path / "absent" / "out.json"))
    dispatcher.dispatch(Message(action=Action.EXPORT, sender=HUB, data={}))
    assert "wrong filename" in caplog.text
    assert not slot.armed
    assert not (tmp_path / "absent").exists()


def test_export_onto_directory(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    dispatcher, slot = _dispatcher()
    slot.arm(str(tmp_path))
    dispatcher.dispatch(Message(action=Action.EXPORT, sender=HUB, data={}))
    assert "wrong filename" in caplog.text
    assert not slot.armed


@pytest.mark.parametrize("raw", ["false", "true", 0, 1, None])
def test_gpio_value_must_be_boolean(
    raw: object, capsys: pytest.CaptureFixture[str], caplog: pytest.LogCaptureFixture
) -> None:
    dispatcher, _ = _dispatcher()
    dispatcher.dispatch(Message(action=Action.VALUE, sender=HUB, data=ValueReport(type="gpio", description="relay", value=raw)))
    assert capsys.readouterr().out == PROMPT
    assert "Unreadable gpio value for relay" in caplog.text
