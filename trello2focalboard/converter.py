"""Trello export to Focalboard board conversion.

The conversion is a single pass over the export:

1. Board plus three card properties: List (select, one option per Trello
   list), Assignees (multiPerson) and Labels (multiSelect, one option per
   Trello label)
2. One default board view
3. Per card: the card block, then its description, checklist items and
   comments as child blocks
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from trello2focalboard.blocks import (
    Block,
    Board,
    PropertyOption,
    PropertyTemplate,
    create_board,
    create_board_view,
    create_card,
    create_checkbox_block,
    create_comment_block,
    create_guid,
    create_text_block,
)
from trello2focalboard.loaders import UserDirectory
from trello2focalboard.trello_models import (
    TrelloAction,
    TrelloCard,
    TrelloExport,
    TrelloLabel,
    TrelloList,
    UserRecord,
)

logger = logging.getLogger(__name__)

OPTION_COLORS = (
    "propColorGray",
    "propColorBrown",
    "propColorOrange",
    "propColorYellow",
    "propColorGreen",
    "propColorBlue",
    "propColorPurple",
    "propColorPink",
    "propColorRed",
)


class ColorAllocator:
    """Round-robin over the option palette

    Each property gets its own allocator, so List and Labels options both start
    at the first color.
    """

    def __init__(self, palette: tuple[str, ...] = OPTION_COLORS):
        self.palette = palette
        self.index = 0

    def next_color(self) -> str:
        color = self.palette[self.index % len(self.palette)]
        self.index += 1
        return color


@dataclass
class ConversionStats:
    cards: int = 0
    text_blocks: int = 0
    checkbox_blocks: int = 0
    comment_blocks: int = 0
    unmapped_lists: int = 0


_datetime_adapter = TypeAdapter(datetime)


def to_epoch_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return round(value.timestamp() * 1000)


def parse_action_date(value: str) -> Optional[int]:
    """ISO 8601 action date -> epoch ms, or None if it doesn't parse"""
    try:
        return to_epoch_ms(_datetime_adapter.validate_python(value))
    except ValidationError:
        return None


class TrelloToFocalboardConverter:
    """Convert one Trello board export into Focalboard board and blocks"""

    def __init__(
        self,
        team_id: str = "",
        channel_id: str = "",
        users: UserDirectory | Iterable[UserRecord] | None = None,
    ):
        self.team_id = team_id
        self.channel_id = channel_id
        if isinstance(users, UserDirectory):
            self.users = users
        else:
            self.users = UserDirectory(users or ())

        self.option_id_map: dict[str, str] = {}  # Trello list ID -> List option ID
        self.labels_id_map: dict[str, str] = {}  # Trello label ID -> Labels option ID
        self.stats = ConversionStats()

    def _build_options(
        self, items: list[TrelloList] | list[TrelloLabel], id_map: dict[str, str]
    ) -> list[PropertyOption]:
        colors = ColorAllocator()
        options = []
        for item in items:
            option_id = create_guid()
            id_map[item.id] = option_id
            options.append(PropertyOption(id=option_id, value=item.name, color=colors.next_color()))
        return options

    def build_list_property(self, lists: list[TrelloList]) -> PropertyTemplate:
        """Trello lists (columns) become options of a select property"""
        options = self._build_options(lists, self.option_id_map)
        return PropertyTemplate(id=create_guid(), name="List", type="select", options=options)

    def build_assignees_property(self) -> PropertyTemplate:
        # Values are target user ids, so there are no static options
        return PropertyTemplate(id=create_guid(), name="Assignees", type="multiPerson")

    def build_labels_property(self, labels: list[TrelloLabel]) -> PropertyTemplate:
        """Trello labels become options of a multiSelect property"""
        options = self._build_options(labels, self.labels_id_map)
        return PropertyTemplate(
            id=create_guid(), name="Labels", type="multiSelect", options=options
        )

    def _map_list(
        self, card: TrelloCard, out_card: Block, list_property: PropertyTemplate
    ) -> None:
        if not card.id_list:
            logger.warning("Missing idList for card: %s", card.name)
            self.stats.unmapped_lists += 1
            return

        option_id = self.option_id_map.get(card.id_list)
        if option_id:
            out_card.properties[list_property.id] = option_id
        else:
            logger.warning("Invalid idList: %s for card: %s", card.id_list, card.name)
            self.stats.unmapped_lists += 1

    def _map_assignees(
        self, card: TrelloCard, out_card: Block, assignees_property: PropertyTemplate
    ) -> None:
        if not card.id_members:
            return

        # Members without a mapping are dropped without a warning
        members = []
        for member_id in card.id_members:
            user = self.users.get(member_id)
            if user:
                members.append(user.id)
        out_card.properties[assignees_property.id] = members

    def _map_labels(
        self, card: TrelloCard, out_card: Block, labels_property: PropertyTemplate
    ) -> None:
        if not card.id_labels:
            return

        labels = [self.labels_id_map[i] for i in card.id_labels if i in self.labels_id_map]
        out_card.properties[labels_property.id] = labels

    def _checklist_blocks(
        self, export: TrelloExport, card: TrelloCard, out_card: Block
    ) -> list[Block]:
        blocks = []
        for checklist_id in card.id_checklists:
            checklist = export.find_checklist(checklist_id)
            if not checklist:
                continue
            for item in checklist.check_items:
                blocks.append(
                    create_checkbox_block(
                        value=item.is_complete,
                        title=item.name,
                        board_id=out_card.board_id,
                        parent_id=out_card.id,
                    )
                )
        return blocks

    def _comment_block(self, comment: TrelloAction, out_card: Block) -> Block:
        user = self.users.get(comment.id_member_creator)
        text = comment.data.text or ""

        comment_block = create_comment_block(board_id=out_card.board_id, parent_id=out_card.id)
        if user and user.username:
            comment_block.title = f"**@{user.username}:** {text}"
        else:
            comment_block.title = text

        if user:
            comment_block.created_by = user.id
            comment_block.modified_by = user.id
            if comment.date:
                update_at = parse_action_date(comment.date)
                if update_at is None:
                    logger.warning("Invalid date %r on comment: %s", comment.date, comment.id)
                else:
                    comment_block.update_at = update_at
        return comment_block

    def convert_card(
        self,
        export: TrelloExport,
        card: TrelloCard,
        board: Board,
        list_property: PropertyTemplate,
        assignees_property: PropertyTemplate,
        labels_property: PropertyTemplate,
    ) -> list[Block]:
        """Convert one card to its card block followed by its content blocks

        The card's contentOrder is complete before the card is returned:
        description first, then checklist items. Comments are child blocks
        but are not part of contentOrder.
        """
        logger.debug(f"Card: {card.name}")

        out_card = create_card(title=card.name, board_id=board.id, parent_id=board.id)
        self._map_list(card, out_card, list_property)
        self._map_assignees(card, out_card, assignees_property)
        self._map_labels(card, out_card, labels_property)

        children: list[Block] = []

        if card.desc:
            text = create_text_block(title=card.desc, board_id=board.id, parent_id=out_card.id)
            children.append(text)
            out_card.content_order.append(text.id)
            self.stats.text_blocks += 1

        checkboxes = self._checklist_blocks(export, card, out_card)
        for checkbox in checkboxes:
            out_card.content_order.append(checkbox.id)
        children.extend(checkboxes)
        self.stats.checkbox_blocks += len(checkboxes)

        if card.badges.comments:
            comments = [self._comment_block(c, out_card) for c in export.comments_for(card.id)]
            children.extend(comments)
            self.stats.comment_blocks += len(comments)

        self.stats.cards += 1
        return [out_card, *children]

    def convert(self, export: TrelloExport) -> tuple[list[Board], list[Block]]:
        """Perform the conversion

        Returns:
            (boards, blocks): exactly one board, then the board view, each card
            and each card's content blocks in export order
        """
        # Join maps and counters are per run
        self.option_id_map = {}
        self.labels_id_map = {}
        self.stats = ConversionStats()

        boards: list[Board] = []
        blocks: list[Block] = []

        logger.info(f"📋 Board: {export.name}")
        board = create_board(
            title=export.name,
            description=export.desc or "",
            team_id=self.team_id,
            channel_id=self.channel_id,
        )

        list_property = self.build_list_property(export.lists)
        assignees_property = self.build_assignees_property()
        labels_property = self.build_labels_property(export.labels)
        board.card_properties = [list_property, assignees_property, labels_property]
        boards.append(board)

        logger.info(f"📝 Lists: {len(export.lists)}")
        logger.info(f"🏷️  Labels: {len(export.labels)}")

        view = create_board_view(title="Board View", board_id=board.id, parent_id=board.id)
        blocks.append(view)

        for card in export.cards:
            blocks.extend(
                self.convert_card(
                    export, card, board, list_property, assignees_property, labels_property
                )
            )

        logger.info("")
        logger.info(f"Found {len(export.cards)} card(s).")
        self._log_summary(len(blocks))

        return boards, blocks

    def _log_summary(self, block_count: int) -> None:
        logger.info("=" * 60)
        logger.info("📊 CONVERSION SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Cards: {self.stats.cards}")
        logger.info(f"Descriptions: {self.stats.text_blocks}")
        logger.info(f"Checklist items: {self.stats.checkbox_blocks}")
        logger.info(f"Comments: {self.stats.comment_blocks}")
        logger.info(f"Total blocks: {block_count}")
        if self.stats.unmapped_lists:
            logger.warning(f"⚠️  {self.stats.unmapped_lists} card(s) without a List value")
        logger.info("=" * 60)


def convert(
    export: TrelloExport,
    team_id: str = "",
    channel_id: str = "",
    users: UserDirectory | Iterable[UserRecord] | None = None,
) -> tuple[list[Board], list[Block]]:
    """Convert ``export`` with a fresh converter (no state shared between calls)"""
    converter = TrelloToFocalboardConverter(team_id=team_id, channel_id=channel_id, users=users)
    return converter.convert(export)
