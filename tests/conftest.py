"""
Shared pytest fixtures for trello2focalboard tests
"""
import json
import logging
from pathlib import Path

import pytest

from trello2focalboard import TrelloExport, UserDirectory, UserRecord


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() between tests so caplog keeps seeing records"""
    yield
    logger = logging.getLogger("trello2focalboard")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def fixtures_dir():
    """Return path to test fixtures directory"""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def simple_board_fixture(fixtures_dir):
    """Load simple board test fixture"""
    with open(fixtures_dir / "simple_board.json") as f:
        return json.load(f)


@pytest.fixture
def board_with_comments_fixture(fixtures_dir):
    """Load board with comments test fixture"""
    with open(fixtures_dir / "board_with_comments.json") as f:
        return json.load(f)


@pytest.fixture
def empty_board_fixture(fixtures_dir):
    """Load empty board test fixture"""
    with open(fixtures_dir / "empty_board.json") as f:
        return json.load(f)


@pytest.fixture
def users_fixture(fixtures_dir):
    """Load user mapping test fixture"""
    with open(fixtures_dir / "users.json") as f:
        return json.load(f)


@pytest.fixture
def simple_export(simple_board_fixture):
    return TrelloExport.model_validate(simple_board_fixture)


@pytest.fixture
def comments_export(board_with_comments_fixture):
    return TrelloExport.model_validate(board_with_comments_fixture)


@pytest.fixture
def users(users_fixture):
    return UserDirectory(UserRecord.model_validate(u) for u in users_fixture)
