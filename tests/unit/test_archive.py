"""
Unit tests for Focalboard records and the block archive format
"""

import json
import re
import sys
from pathlib import Path

# Add parent directory to path to import trello2focalboard module
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from trello2focalboard import (
    ArchiveFormatError,
    TrelloExport,
    build_block_archive,
    convert,
    create_guid,
    parse_block_archive,
    write_block_archive,
)
from trello2focalboard.blocks import IDType, create_board, create_card, create_checkbox_block

ZBASE32_ID = re.compile(r"^[7bcva][ybndrfg8ejkmcpqxot1uwisza345h769]{26}$")


class TestCreateGuid:
    """Test id generation"""

    def test_format(self):
        """Should build every typed id as a prefix plus 26 z-base-32 characters"""
        for id_type in IDType:
            guid = create_guid(id_type)
            assert ZBASE32_ID.match(guid)
            assert guid.startswith(id_type.value)

    def test_untyped_prefix(self):
        """Should prefix untyped ids with 7"""
        assert create_guid().startswith("7")

    def test_unique(self):
        """Should not repeat ids"""
        assert len({create_guid() for _ in range(500)}) == 500


class TestRecords:
    """Test record factories and camelCase serialization"""

    def test_board_record_keys(self):
        """Should serialize board fields with camelCase keys"""
        board = create_board(title="B", team_id="t1")
        record = board.to_record()

        assert record["id"].startswith("b")
        assert record["teamId"] == "t1"
        assert record["cardProperties"] == []
        assert record["type"] == "P"
        assert "team_id" not in record

    def test_card_record(self):
        """Should serialize a card with its schema version and fields"""
        card = create_card(title="C", board_id="b1", parent_id="b1")
        record = card.to_record()

        assert record["id"].startswith("c")
        assert record["schema"] == 1
        assert record["type"] == "card"
        assert record["boardId"] == "b1"
        assert record["parentId"] == "b1"
        assert record["fields"] == {
            "icon": "",
            "properties": {},
            "contentOrder": [],
            "isTemplate": False,
        }

    def test_checkbox_record(self):
        """Should keep the checkbox value in fields"""
        record = create_checkbox_block(value=True, title="done").to_record()

        assert record["type"] == "checkbox"
        assert record["fields"] == {"value": True}
        assert record["id"].startswith("a")


class TestBlockArchive:
    """Test build/parse/write of the archive text"""

    def test_header_then_boards_then_blocks(self, simple_export):
        """Should write the header line, then boards, then blocks"""
        boards, blocks = convert(simple_export)
        content = build_block_archive(boards, blocks, date=1234)
        lines = content.splitlines()

        assert json.loads(lines[0]) == {"version": 1, "date": 1234}
        assert json.loads(lines[1])["type"] == "board"
        assert all(json.loads(line)["type"] == "block" for line in lines[2:])
        assert len(lines) == 1 + len(boards) + len(blocks)
        assert content.endswith("\n")

    def test_parse_reads_back_records(self, simple_export):
        """Should read back the records that were written"""
        boards, blocks = convert(simple_export)
        header, board_records, block_records = parse_block_archive(
            build_block_archive(boards, blocks)
        )

        assert header["version"] == 1
        assert board_records[0]["title"] == "Product Roadmap"
        assert [r["cardProperties"][0]["name"] for r in board_records] == ["List"]
        assert [b["id"] for b in block_records] == [b.id for b in blocks]

    def test_empty_board(self):
        """Should write just the board and its view for an empty export"""
        boards, blocks = convert(TrelloExport.model_validate({"name": "E"}))
        _, board_records, block_records = parse_block_archive(build_block_archive(boards, blocks))

        assert len(board_records) == 1
        assert [b["type"] for b in block_records] == ["view"]

    def test_write(self, tmp_path, simple_export):
        """Should write a newline-terminated UTF-8 file"""
        boards, blocks = convert(simple_export)
        out = tmp_path / "out.boardarchive"
        write_block_archive(str(out), boards, blocks)

        _, board_records, block_records = parse_block_archive(out.read_text(encoding="utf-8"))
        assert board_records[0]["id"] == boards[0].id
        assert len(block_records) == len(blocks)

    @pytest.mark.parametrize(
        "content, message",
        [
            ("", "empty"),
            ("not json\n", "Invalid archive header"),
            ('{"date": 1}\n', "version"),
            ('{"version": 2, "date": 1}\n', "Unsupported archive version"),
            ('{"version": 1, "date": 1}\n{"type": "user", "data": {}}\n', "unknown record type"),
            ('{"version": 1, "date": 1}\n{oops\n', "Line 2"),
        ],
    )
    def test_parse_errors(self, content, message):
        """Should raise ArchiveFormatError for unreadable archives"""
        with pytest.raises(ArchiveFormatError, match=message):
            parse_block_archive(content)
