"""Custom exception classes for trello2focalboard.

This module defines the exception hierarchy for Trello API errors,
conversion input errors (export and user-mapping files), and archive
format errors.
"""

from __future__ import annotations


class TrelloAPIError(Exception):
    """Base exception for Trello API errors"""

    def __init__(
        self, message: str, status_code: int | None = None, response_text: str | None = None
    ):
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(message)


class TrelloAuthenticationError(TrelloAPIError):
    """Raised when API credentials are invalid or expired (401/403)"""

    pass


class TrelloNotFoundError(TrelloAPIError):
    """Raised when a board or resource is not found (404)"""

    pass


class TrelloRateLimitError(TrelloAPIError):
    """Raised when rate limit is exceeded (429) after retries"""

    pass


class TrelloServerError(TrelloAPIError):
    """Raised when Trello's servers return an error (500/502/503/504)"""

    pass


class ConversionInputError(Exception):
    """Base exception for unusable conversion input.

    Attributes:
        path: The file that could not be used (if applicable)

    Example:
        >>> try:
        ...     load_trello_export("board.json")
        ... except ConversionInputError as e:
        ...     print(f"{e.path}: {e}")
    """

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class InputFileNotFoundError(ConversionInputError):
    """Raised when the Trello export or user-mapping file does not exist.

    The CLI turns this into exit code 2.
    """

    pass


class InvalidInputError(ConversionInputError):
    """Raised when an input file is not valid JSON or has the wrong shape.

    This can occur when:
    - The file is not JSON (e.g. an HTML error page saved by mistake)
    - The export is not a JSON object with the expected board fields
    - The user mapping is not a JSON array of {id, idTrello, username}
    """

    pass


class ArchiveFormatError(Exception):
    """Raised when a board archive cannot be parsed"""

    pass
