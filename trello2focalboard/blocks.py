"""Focalboard board and block records produced by the converter.

Records are pydantic models with snake_case attributes that serialize to the
camelCase keys Focalboard reads (``board_id`` -> ``boardId``). The ``create_*``
factories mirror Focalboard's own block constructors: fresh id, current
timestamps, the default ``fields`` for the block type.
"""

from __future__ import annotations

import base64
import secrets
import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_B32_STANDARD = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_B32_Z = "ybndrfg8ejkmcpqxot1uwisza345h769"
_TO_ZBASE32 = str.maketrans(_B32_STANDARD, _B32_Z)


class IDType(str, Enum):
    """One-letter prefix Focalboard puts in front of generated ids."""

    NONE = "7"
    BOARD = "b"
    CARD = "c"
    VIEW = "v"
    BLOCK = "a"


def create_guid(id_type: IDType = IDType.NONE) -> str:
    """Return a new 27-character id: type prefix + 16 random bytes in z-base-32"""
    encoded = base64.b32encode(secrets.token_bytes(16)).decode("ascii").rstrip("=")
    return id_type.value + encoded.translate(_TO_ZBASE32)


def now_ms() -> int:
    return int(time.time() * 1000)


class FocalboardModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict[str, Any]:
        """Serialize with Focalboard's camelCase keys"""
        return self.model_dump(by_alias=True)


class PropertyOption(FocalboardModel):
    id: str
    value: str
    color: str


class PropertyTemplate(FocalboardModel):
    id: str
    name: str
    type: str
    options: list[PropertyOption] = Field(default_factory=list)


class Board(FocalboardModel):
    id: str = Field(default_factory=lambda: create_guid(IDType.BOARD))
    team_id: str = ""
    channel_id: str = ""
    created_by: str = ""
    modified_by: str = ""
    type: str = "P"
    minimum_role: str = ""
    title: str = ""
    description: str = ""
    icon: str = ""
    show_description: bool = False
    is_template: bool = False
    template_version: int = 0
    properties: dict[str, Any] = Field(default_factory=dict)
    card_properties: list[PropertyTemplate] = Field(default_factory=list)
    create_at: int = Field(default_factory=now_ms)
    update_at: int = Field(default_factory=now_ms)
    delete_at: int = 0


class Block(FocalboardModel):
    id: str = Field(default_factory=lambda: create_guid(IDType.BLOCK))
    schema_version: int = Field(1, alias="schema")
    board_id: str = ""
    parent_id: str = ""
    created_by: str = ""
    modified_by: str = ""
    type: str = "unknown"
    title: str = ""
    fields: dict[str, Any] = Field(default_factory=dict)
    create_at: int = Field(default_factory=now_ms)
    update_at: int = Field(default_factory=now_ms)
    delete_at: int = 0
    limited: bool = False

    # Typed views over ``fields`` for the block types the converter emits

    @property
    def properties(self) -> dict[str, Any]:
        return self.fields.setdefault("properties", {})

    @property
    def content_order(self) -> list[str]:
        return self.fields.setdefault("contentOrder", [])


def create_board(**kwargs: Any) -> Board:
    return Board(**kwargs)


def create_board_view(**kwargs: Any) -> Block:
    fields = {
        "viewType": "board",
        "groupById": None,
        "dateDisplayPropertyId": None,
        "sortOptions": [],
        "visiblePropertyIds": [],
        "visibleOptionIds": [],
        "hiddenOptionIds": [],
        "collapsedOptionIds": [],
        "filter": {"operation": "and", "filters": []},
        "cardOrder": [],
        "columnWidths": {},
        "columnCalculations": {},
        "kanbanCalculations": {},
        "defaultTemplateId": "",
    }
    return Block(id=create_guid(IDType.VIEW), type="view", fields=fields, **kwargs)


def create_card(**kwargs: Any) -> Block:
    fields = {"icon": "", "properties": {}, "contentOrder": [], "isTemplate": False}
    return Block(id=create_guid(IDType.CARD), type="card", fields=fields, **kwargs)


def create_text_block(**kwargs: Any) -> Block:
    return Block(type="text", **kwargs)


def create_checkbox_block(value: bool = False, **kwargs: Any) -> Block:
    return Block(type="checkbox", fields={"value": value}, **kwargs)


def create_comment_block(**kwargs: Any) -> Block:
    return Block(type="comment", **kwargs)
