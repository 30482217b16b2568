"""Convert Trello board exports into Focalboard board archives."""

from __future__ import annotations

# Import archive reader/writer from extracted module
from trello2focalboard.archive import (
    build_block_archive,
    parse_block_archive,
    write_block_archive,
)

# Import output records from extracted module
from trello2focalboard.blocks import Block, Board, PropertyOption, PropertyTemplate, create_guid

# Import CLI from extracted module
from trello2focalboard.cli import main

# Import converter from extracted module
from trello2focalboard.converter import (
    OPTION_COLORS,
    ColorAllocator,
    TrelloToFocalboardConverter,
    convert,
)

# Import exceptions from extracted module
from trello2focalboard.exceptions import (
    ArchiveFormatError,
    ConversionInputError,
    InputFileNotFoundError,
    InvalidInputError,
    TrelloAPIError,
    TrelloAuthenticationError,
    TrelloNotFoundError,
    TrelloRateLimitError,
    TrelloServerError,
)

# Import input loading from extracted module
from trello2focalboard.loaders import UserDirectory, load_trello_export, load_user_mapping

# Import logging configuration
from trello2focalboard.logging_config import setup_logging

# Import Trello client from extracted module
from trello2focalboard.trello_client import TrelloReader

# Import input models
from trello2focalboard.trello_models import TrelloExport, UserRecord

__version__ = "0.1.0"

__all__ = [
    # Core classes
    "TrelloToFocalboardConverter",
    "ColorAllocator",
    "TrelloReader",
    "UserDirectory",
    "convert",
    "load_trello_export",
    "load_user_mapping",
    "setup_logging",
    "OPTION_COLORS",
    # Models
    "TrelloExport",
    "UserRecord",
    "Board",
    "Block",
    "PropertyOption",
    "PropertyTemplate",
    "create_guid",
    # Archive
    "build_block_archive",
    "parse_block_archive",
    "write_block_archive",
    # Exceptions
    "TrelloAPIError",
    "TrelloAuthenticationError",
    "TrelloNotFoundError",
    "TrelloRateLimitError",
    "TrelloServerError",
    "ConversionInputError",
    "InputFileNotFoundError",
    "InvalidInputError",
    "ArchiveFormatError",
    # CLI
    "main",
]
