"""Loading and validation of the Trello export and user-mapping files."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from trello2focalboard.exceptions import (
    ConversionInputError,
    InputFileNotFoundError,
    InvalidInputError,
)
from trello2focalboard.trello_models import TrelloExport, UserRecord

logger = logging.getLogger(__name__)

_user_list_adapter = TypeAdapter(list[UserRecord])


class UserDirectory:
    """Trello member id -> target user lookup, built once per run.

    When the mapping file lists the same Trello id twice, the first record
    wins, the same answer a front-to-back scan of the file would give.
    """

    def __init__(self, records: Iterable[UserRecord] = ()):
        self._records: list[UserRecord] = list(records)
        self._by_trello_id: dict[str, UserRecord] = {}
        for record in self._records:
            self._by_trello_id.setdefault(record.id_trello, record)

    def get(self, trello_id: str | None) -> UserRecord | None:
        if not trello_id:
            return None
        return self._by_trello_id.get(trello_id)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[UserRecord]:
        return iter(self._records)

    def __contains__(self, trello_id: object) -> bool:
        return trello_id in self._by_trello_id


def _read_json(path: str, what: str) -> Any:
    if not Path(path).exists():
        raise InputFileNotFoundError(f"File not found: {path}", path=path)

    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidInputError(f"Invalid JSON in {what} {path}: {e}", path=path) from e
    except OSError as e:
        raise ConversionInputError(f"Could not read {what} {path}: {e}", path=path) from e


def load_trello_export(path: str) -> TrelloExport:
    """Load a Trello board export from a JSON file

    Args:
        path: Path to the JSON file produced by Trello's "Export as JSON"

    Returns:
        Parsed export

    Raises:
        InputFileNotFoundError: If the file doesn't exist
        InvalidInputError: If the file isn't JSON or isn't a board export
        ConversionInputError: If the file exists but can't be read
    """
    data = _read_json(path, "Trello export")
    if not isinstance(data, dict):
        raise InvalidInputError("Trello export must be a JSON object", path=path)

    try:
        export = TrelloExport.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError(f"Not a valid Trello export: {path}\n{e}", path=path) from e

    logger.debug(
        "Loaded export %s: %d lists, %d labels, %d cards, %d checklists, %d actions",
        path,
        len(export.lists),
        len(export.labels),
        len(export.cards),
        len(export.checklists),
        len(export.actions),
    )
    return export


def load_user_mapping(path: str) -> UserDirectory:
    """Load the Trello -> target user mapping file

    The file is a JSON array of ``{"id", "idTrello", "username"}`` objects.

    Raises:
        InputFileNotFoundError: If the file doesn't exist
        InvalidInputError: If the file isn't a JSON array of user records
        ConversionInputError: If the file exists but can't be read
    """
    data = _read_json(path, "user mapping")
    if not isinstance(data, list):
        raise InvalidInputError("User mapping must be a JSON array", path=path)

    try:
        records = _user_list_adapter.validate_python(data)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid user mapping: {path}\n{e}", path=path) from e

    logger.debug("Loaded %d user mapping(s) from %s", len(records), path)
    return UserDirectory(records)
