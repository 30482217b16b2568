"""
Unit tests for export / user-mapping loading and the input models
"""

import json
import sys
from pathlib import Path

# Add parent directory to path to import trello2focalboard module
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from trello2focalboard import (
    ConversionInputError,
    InputFileNotFoundError,
    InvalidInputError,
    TrelloExport,
    UserDirectory,
    UserRecord,
    load_trello_export,
    load_user_mapping,
)


class TestLoadTrelloExport:
    """Test load_trello_export()"""

    def test_loads_fixture(self, fixtures_dir):
        """Should parse lists, cards and their references"""
        export = load_trello_export(str(fixtures_dir / "simple_board.json"))

        assert export.name == "Product Roadmap"
        assert [lst.name for lst in export.lists] == ["To Do", "Doing", "Done"]
        assert len(export.cards) == 3
        assert export.cards[0].id_list == "list-doing"
        assert export.cards[0].id_members == ["member-ana", "member-ghost"]

    def test_missing_file(self, tmp_path):
        """Should raise InputFileNotFoundError with the path"""
        path = str(tmp_path / "nope.json")
        with pytest.raises(InputFileNotFoundError) as exc_info:
            load_trello_export(path)

        assert exc_info.value.path == path
        assert "File not found" in str(exc_info.value)

    def test_malformed_json(self, tmp_path):
        """Should raise InvalidInputError for broken JSON"""
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(InvalidInputError, match="Invalid JSON"):
            load_trello_export(str(path))

    def test_not_utf8(self, tmp_path):
        """Should raise InvalidInputError when the file isn't valid UTF-8"""
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"name": "\xff"}')

        with pytest.raises(InvalidInputError, match="Invalid JSON"):
            load_trello_export(str(path))

    def test_unreadable_path(self, tmp_path):
        """Should raise ConversionInputError naming the path when it can't be read"""
        with pytest.raises(ConversionInputError) as exc_info:
            load_trello_export(str(tmp_path))

        assert not isinstance(exc_info.value, InputFileNotFoundError)
        assert exc_info.value.path == str(tmp_path)
        assert "Could not read Trello export" in str(exc_info.value)

    def test_not_an_object(self, tmp_path):
        """Should reject a top-level array"""
        path = tmp_path / "list.json"
        path.write_text("[]")

        with pytest.raises(InvalidInputError, match="JSON object"):
            load_trello_export(str(path))

    def test_wrong_shape(self, tmp_path):
        """Should reject documents that don't match the export shape"""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"name": "B", "lists": [{"name": "no id"}]}))

        with pytest.raises(InvalidInputError, match="Not a valid Trello export"):
            load_trello_export(str(path))

    def test_errors_share_base_class(self, tmp_path):
        """Should raise subclasses of ConversionInputError"""
        with pytest.raises(ConversionInputError):
            load_trello_export(str(tmp_path / "missing.json"))


class TestTrelloModels:
    """Test defaults and tolerance of the input models"""

    def test_minimal_export_defaults(self):
        """Should default missing collections to empty lists"""
        export = TrelloExport.model_validate({"name": "B"})

        assert export.lists == []
        assert export.cards == []
        assert export.actions == []

    def test_card_defaults_and_nulls(self):
        """Should turn null collections into empty ones"""
        export = TrelloExport.model_validate(
            {
                "cards": [
                    {"id": "c1", "idMembers": None, "idLabels": None, "badges": None},
                ]
            }
        )
        card = export.cards[0]

        assert card.desc == ""
        assert card.id_list is None
        assert card.id_members == []
        assert card.id_labels == []
        assert card.id_checklists == []
        assert card.badges.comments == 0

    def test_boolean_comment_badge(self):
        """Should accept a boolean comment badge"""
        export = TrelloExport.model_validate(
            {"cards": [{"id": "c1", "badges": {"comments": True}}]}
        )
        assert export.cards[0].badges.comments

    def test_extra_fields_ignored(self):
        """Should ignore fields that aren't read"""
        export = TrelloExport.model_validate(
            {"name": "B", "prefs": {"background": "blue"}, "lists": [{"id": "l", "pos": 1}]}
        )
        assert export.lists[0].id == "l"

    def test_null_label_name(self):
        """Should turn a null label name into an empty string"""
        export = TrelloExport.model_validate({"labels": [{"id": "x", "name": None}]})
        assert export.labels[0].name == ""

    def test_comments_for_filters_type_and_card(self, comments_export):
        """Should return only commentCard actions on the given card"""
        comments = comments_export.comments_for("card-ticket")

        assert [c.id for c in comments] == ["action-1", "action-3"]

    def test_find_checklist(self, simple_export):
        """Should find checklists by id"""
        assert simple_export.find_checklist("checklist-login").name == "Steps"
        assert simple_export.find_checklist("checklist-missing") is None


class TestUserMapping:
    """Test load_user_mapping() and UserDirectory"""

    def test_loads_fixture(self, fixtures_dir):
        """Should index users by Trello id"""
        users = load_user_mapping(str(fixtures_dir / "users.json"))

        assert len(users) == 2
        assert users.get("member-ana").id == "user-ana-0001"
        assert users.get("member-ana").username == "ana"
        assert "member-ben" in users
        assert users.get("member-ghost") is None

    def test_missing_file(self, tmp_path):
        """Should raise InputFileNotFoundError for a missing mapping"""
        with pytest.raises(InputFileNotFoundError):
            load_user_mapping(str(tmp_path / "users.json"))

    def test_not_an_array(self, tmp_path):
        """Should reject a mapping that isn't an array"""
        path = tmp_path / "users.json"
        path.write_text(json.dumps({"id": "u"}))

        with pytest.raises(InvalidInputError, match="JSON array"):
            load_user_mapping(str(path))

    def test_record_missing_trello_id(self, tmp_path):
        """Should reject records without idTrello"""
        path = tmp_path / "users.json"
        path.write_text(json.dumps([{"id": "u1", "username": "x"}]))

        with pytest.raises(InvalidInputError, match="Invalid user mapping"):
            load_user_mapping(str(path))

    def test_first_record_wins_for_duplicates(self):
        """Should resolve duplicate Trello ids to the first record"""
        users = UserDirectory(
            [
                UserRecord(id="first", idTrello="m1", username="a"),
                UserRecord(id="second", idTrello="m1", username="b"),
            ]
        )

        assert users.get("m1").id == "first"
        assert len(users) == 2
        assert [u.id for u in users] == ["first", "second"]

    def test_empty_lookup_key(self):
        """Should never match a missing or empty id"""
        users = UserDirectory([UserRecord(id="u", idTrello="", username="")])
        assert users.get(None) is None
        assert users.get("") is None
