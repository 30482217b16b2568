"""Focalboard block archive (``.boardarchive``) reading and writing.

The archive is line-delimited JSON::

    {"version": 1, "date": 1625661296789}
    {"type": "board", "data": {...}}
    {"type": "block", "data": {...}}
    ...

Boards come before blocks; every line, the last included, ends with a newline.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from trello2focalboard.blocks import Block, Board, now_ms
from trello2focalboard.exceptions import ArchiveFormatError

logger = logging.getLogger(__name__)

ARCHIVE_VERSION = 1


def build_block_archive(
    boards: Sequence[Board], blocks: Sequence[Block], date: int | None = None
) -> str:
    """Serialize boards and blocks to archive text

    Args:
        boards: Board records, written first
        blocks: Block records, written in the given order
        date: Header timestamp in epoch milliseconds (default: now)
    """
    header = {"version": ARCHIVE_VERSION, "date": now_ms() if date is None else date}
    lines = [json.dumps(header)]
    lines.extend(json.dumps({"type": "board", "data": board.to_record()}) for board in boards)
    lines.extend(json.dumps({"type": "block", "data": block.to_record()}) for block in blocks)
    return "\n".join(lines) + "\n"


def write_block_archive(path: str, boards: Sequence[Board], blocks: Sequence[Block]) -> None:
    """Write the archive for ``boards`` and ``blocks`` to ``path``"""
    content = build_block_archive(boards, blocks)
    Path(path).write_text(content, encoding="utf-8")
    logger.debug("Wrote %d board(s) and %d block(s) to %s", len(boards), len(blocks), path)


def parse_block_archive(
    content: str,
) -> tuple[dict[str, Any], list[dict[str, Any]], list[dict[str, Any]]]:
    """Parse archive text into (header, board records, block records)

    Raises:
        ArchiveFormatError: If the header is missing or invalid, a line isn't
            JSON, or a line has an unknown type
    """
    lines = [line for line in content.splitlines() if line.strip()]
    if not lines:
        raise ArchiveFormatError("Archive is empty")

    try:
        header = json.loads(lines[0])
    except json.JSONDecodeError as e:
        raise ArchiveFormatError(f"Invalid archive header: {e}") from e
    if not isinstance(header, dict) or "version" not in header:
        raise ArchiveFormatError("Archive header must be an object with a version")
    if header["version"] != ARCHIVE_VERSION:
        raise ArchiveFormatError(f"Unsupported archive version: {header['version']}")

    boards: list[dict[str, Any]] = []
    blocks: list[dict[str, Any]] = []
    for number, line in enumerate(lines[1:], start=2):
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise ArchiveFormatError(f"Line {number}: invalid JSON: {e}") from e

        record_type = record.get("type") if isinstance(record, dict) else None
        if record_type == "board":
            boards.append(record["data"])
        elif record_type == "block":
            blocks.append(record["data"])
        else:
            raise ArchiveFormatError(f"Line {number}: unknown record type {record_type!r}")

    return header, boards, blocks
