"""Pydantic models for the parts of a Trello board export the converter reads.

Only the fields needed for mapping are declared. Everything else in a real
export (positions, stickers, plugin data, ...) is accepted and ignored.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TrelloModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class TrelloList(TrelloModel):
    id: str
    name: str = ""


class TrelloLabel(TrelloModel):
    id: str
    name: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _null_name(cls, value: Optional[str]) -> str:
        # Colour-only labels come through with name=null in some exports
        return value or ""


class TrelloBadges(TrelloModel):
    # A count in real exports, a bool in hand-written ones; only truthiness matters
    comments: int = 0


class TrelloCard(TrelloModel):
    id: str
    name: str = ""
    desc: Optional[str] = ""
    id_list: Optional[str] = Field(None, alias="idList")
    id_members: list[str] = Field(default_factory=list, alias="idMembers")
    id_labels: list[str] = Field(default_factory=list, alias="idLabels")
    id_checklists: list[str] = Field(default_factory=list, alias="idChecklists")
    badges: TrelloBadges = Field(default_factory=TrelloBadges)

    @field_validator("id_members", "id_labels", "id_checklists", mode="before")
    @classmethod
    def _null_list(cls, value: Optional[list[str]]) -> list[str]:
        return value or []

    @field_validator("badges", mode="before")
    @classmethod
    def _null_badges(cls, value: Optional[dict]) -> dict:
        return value or {}


class TrelloCheckItem(TrelloModel):
    name: str = ""
    state: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.state == "complete"


class TrelloChecklist(TrelloModel):
    id: str
    name: Optional[str] = None
    check_items: list[TrelloCheckItem] = Field(default_factory=list, alias="checkItems")


class TrelloActionCard(TrelloModel):
    id: Optional[str] = None
    name: Optional[str] = None


class TrelloActionData(TrelloModel):
    card: Optional[TrelloActionCard] = None
    text: Optional[str] = None


class TrelloAction(TrelloModel):
    id: Optional[str] = None
    type: Optional[str] = None
    # Kept as text; only comments by mapped users ever need it parsed
    date: Optional[str] = None
    id_member_creator: Optional[str] = Field(None, alias="idMemberCreator")
    data: TrelloActionData = Field(default_factory=TrelloActionData)

    @property
    def card_id(self) -> Optional[str]:
        return self.data.card.id if self.data.card else None

    def is_comment_on(self, card_id: str) -> bool:
        return self.type == "commentCard" and self.card_id == card_id


class TrelloExport(TrelloModel):
    """A Trello board as exported by "Print and export > Export as JSON"."""

    id: Optional[str] = None
    name: str = ""
    desc: Optional[str] = ""
    lists: list[TrelloList] = Field(default_factory=list)
    labels: list[TrelloLabel] = Field(default_factory=list)
    cards: list[TrelloCard] = Field(default_factory=list)
    checklists: list[TrelloChecklist] = Field(default_factory=list)
    actions: list[TrelloAction] = Field(default_factory=list)

    def find_checklist(self, checklist_id: str) -> Optional[TrelloChecklist]:
        return next((c for c in self.checklists if c.id == checklist_id), None)

    def comments_for(self, card_id: str) -> list[TrelloAction]:
        """Comment actions on a card, in export order."""
        return [action for action in self.actions if action.is_comment_on(card_id)]


class UserRecord(TrelloModel):
    """One row of the user-mapping file: a Trello member and its target user."""

    id: str
    id_trello: str = Field(alias="idTrello")
    username: Optional[str] = None
