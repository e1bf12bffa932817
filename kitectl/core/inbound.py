"""Rendering of inbound hub messages."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer

from kitectl.core.errors import ExportError
from kitectl.core.model import Action, LogEntry, Message, ValueReport

if TYPE_CHECKING:
    from kitectl.core.session import ExportSlot

TIME_FORMAT = "%Y/%m/%d %H:%M:%S"
LOGGER = logging.getLogger(__name__)


class Console:
    """Operator terminal: rendered lines plus the input prompt."""

    def __init__(self, prompt: str) -> None:
        self.prompt = prompt

    def echo(self, text: str = "") -> None:
        typer.echo(text)

    def show_prompt(self) -> None:
        typer.echo(self.prompt, nl=False)


def format_log_entry(entry: LogEntry) -> str:
    return f"{entry.time.astimezone().strftime(TIME_FORMAT)} {entry.origin}, {entry.text}"


def format_value_report(report: ValueReport) -> str | None:
    if report.type == "gpio":
        if not isinstance(report.value, bool):
            raise TypeError(f"gpio value must be a boolean, got {type(report.value).__name__}")
        return f"Value for {report.description} --> {str(report.value).lower()}"
    if report.type == "float":
        return f"Value for {report.description} --> {float(report.value):.2f} {report.unit}"
    if report.type == "string":
        return f"Value for {report.description} --> {report.value} {report.unit}"
    return None


def export_target(filename: str | None) -> Path:
    if not filename:
        raise ExportError("Export error, missing filename")
    path = Path(filename)
    if path.is_dir() or not path.parent.is_dir():
        raise ExportError(f"Export error, wrong filename ({filename})")
    return path


class InboundDispatcher:
    def __init__(self, console: Console, export_slot: ExportSlot) -> None:
        self.console = console
        self.export_slot = export_slot

    def dispatch(self, message: Message) -> None:
        if message.action == Action.LOG:
            self._render_logs(message.data)
        elif message.action == Action.VALUE:
            self._render_value(message.data)
        elif message.action == Action.EXPORT:
            self._write_export(message.data)
        else:
            self.console.echo()
            LOGGER.info("Message received (%s) -> %s", message.action, message.data)
        self.console.show_prompt()

    def _render_logs(self, entries: tuple[LogEntry, ...]) -> None:
        self.console.echo()
        for entry in entries:
            self.console.echo(format_log_entry(entry))

    def _render_value(self, report: ValueReport) -> None:
        try:
            line = format_value_report(report)
        except (TypeError, ValueError):
            LOGGER.warning("Unreadable %s value for %s: %r", report.type, report.description, report.value)
            return
        if line is not None:
            self.console.echo()
            self.console.echo(line)

    def _write_export(self, data: Any) -> None:
        filename = self.export_slot.take()
        try:
            path = export_target(filename)
            path.write_text(json.dumps(data), encoding="utf-8")
        except ExportError as exc:
            self.console.echo()
            LOGGER.error("%s", exc)
            return
        except (OSError, TypeError, ValueError) as exc:
            self.console.echo()
            LOGGER.error("Export error, cannot write %s: %s", filename, exc)
            return
        LOGGER.info("Exported data written to %s", path)
