"""Assembly of setup bundles from a local descriptor file."""

from __future__ import annotations

import logging
from pathlib import Path

from kitectl.core.config_loader import read_document, validate_document
from kitectl.core.errors import SetupValidationError
from kitectl.core.model import SetupFile, SetupMessage

RESERVED_KEYS = frozenset({"description", "api_key"})
LOGGER = logging.getLogger(__name__)


def build_setup_message(descriptor_path: Path | str) -> SetupMessage:
    """Read a setup descriptor and every file it references.

    All referenced files are checked before any of them is read, so a bundle is
    either complete or not produced at all. File entries are ordered by
    descriptor key.
    """
    descriptor = Path(descriptor_path)
    if not descriptor.is_file():
        raise SetupValidationError(f"Setup descriptor {descriptor} does not exist")

    doc = read_document(descriptor, error=SetupValidationError)
    validate_document(doc, "setup.schema.json", descriptor, error=SetupValidationError)
    root = descriptor.resolve().parent

    entries = sorted((key, value) for key, value in doc.items() if key not in RESERVED_KEYS)
    sources: dict[str, Path] = {}
    for key, value in entries:
        try:
            source = (root / value["src"]).resolve()
        except (OSError, ValueError) as exc:
            raise SetupValidationError(f"{key}, invalid source file {value['src']!r}: {exc}") from exc
        if not source.is_relative_to(root):
            raise SetupValidationError(f"{key}, source file {value['src']} is outside {root}")
        if not source.is_file():
            raise SetupValidationError(f"{key}, source file {source} is missing")
        sources[key] = source

    files: list[SetupFile] = []
    for key, value in entries:
        source = sources[key]
        try:
            content = source.read_bytes()
        except OSError as exc:
            raise SetupValidationError(f"{key}, cannot read {source}: {exc}") from exc
        files.append(SetupFile(path=value["dest"], content=content))
        LOGGER.debug("Bundled %s -> %s (%d bytes)", source, value["dest"], len(content))

    return SetupMessage(
        description=doc.get("description", ""),
        api_key=doc.get("api_key", ""),
        files=tuple(files),
    )
