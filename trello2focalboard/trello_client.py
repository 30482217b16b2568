"""Trello API client that assembles a board export with retry logic."""

from __future__ import annotations

import logging
import re
import time
from typing import Any, cast

import requests
from pydantic import ValidationError

from trello2focalboard.exceptions import (
    TrelloAPIError,
    TrelloAuthenticationError,
    TrelloNotFoundError,
    TrelloRateLimitError,
    TrelloServerError,
)
from trello2focalboard.trello_models import TrelloExport

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000


class TrelloReader:
    """Read a board from the Trello API in the shape of a JSON export

    An alternative to downloading the export by hand: ``get_export()`` returns
    the same ``TrelloExport`` that loading the exported file would.
    """

    def __init__(
        self,
        api_key: str,
        token: str,
        board_id: str | None = None,
        board_url: str | None = None,
        verify_ssl: bool = True,
    ):
        self.api_key = api_key
        self.token = token
        self.verify_ssl = verify_ssl
        self.base_url = "https://api.trello.com/1"

        self.board_id: str | None
        if board_url:
            self.board_id = self.parse_board_url(board_url)
        elif board_id:
            self.board_id = board_id
        else:
            self.board_id = None

    @staticmethod
    def parse_board_url(url: str) -> str:
        """Extract board ID from Trello URL

        Supports formats:
        - https://trello.com/b/Bm0nnz1R/board-name
        - https://trello.com/b/Bm0nnz1R
        - trello.com/b/Bm0nnz1R/board-name

        Raises:
            ValueError: If URL format is invalid or board ID cannot be extracted
        """
        if not url:
            raise ValueError("URL cannot be empty")

        match = re.search(r"trello\.com/b/([a-zA-Z0-9]+)", url)
        if match:
            return match.group(1)

        raise ValueError(f"Could not extract board ID from URL: {url}")

    @classmethod
    def from_board_reference(
        cls, api_key: str, token: str, reference: str, verify_ssl: bool = True
    ) -> TrelloReader:
        """Build a reader from either a board ID or a board URL"""
        if "trello.com/" in reference:
            return cls(api_key, token, board_url=reference, verify_ssl=verify_ssl)
        return cls(api_key, token, board_id=reference, verify_ssl=verify_ssl)

    def _require_board_id(self) -> str:
        if not self.board_id:
            raise ValueError(
                "board_id is required for this operation. "
                "Initialize TrelloReader with board_id or board_url parameter."
            )
        return self.board_id

    def _request(self, endpoint: str, params: dict | None = None) -> Any:
        """Make authenticated request to Trello API with retry logic"""
        url = f"{self.base_url}/{endpoint}"
        auth_params = {"key": self.api_key, "token": self.token}
        if params:
            auth_params.update(params)

        max_retries = 3
        base_delay = 1.0
        retry_statuses = {429, 500, 502, 503, 504}

        last_exception: requests.RequestException | None = None
        for attempt in range(max_retries):
            try:
                response = requests.get(url, params=auth_params, timeout=30, verify=self.verify_ssl)
                response.raise_for_status()
                return cast(Any, response.json())

            except requests.HTTPError as e:
                last_exception = e
                status_code = e.response.status_code if e.response is not None else 0
                response_text = e.response.text if e.response is not None else ""

                if status_code not in retry_statuses:
                    if status_code == 401:
                        raise TrelloAuthenticationError(
                            "Invalid API credentials. Check your TRELLO_API_KEY and TRELLO_TOKEN.\n"
                            "Get credentials at: https://trello.com/power-ups/admin",
                            status_code=status_code,
                            response_text=response_text,
                        ) from e
                    elif status_code == 403:
                        raise TrelloAuthenticationError(
                            f"Access forbidden to resource: {endpoint}\n"
                            "Your API token may not have permission to access this board.",
                            status_code=status_code,
                            response_text=response_text,
                        ) from e
                    elif status_code == 404:
                        raise TrelloNotFoundError(
                            f"Resource not found: {endpoint}\n"
                            "Check that your board ID is correct and the board exists.",
                            status_code=status_code,
                            response_text=response_text,
                        ) from e
                    else:
                        raise TrelloAPIError(
                            f"HTTP {status_code} error for {endpoint}: {response_text[:200]}",
                            status_code=status_code,
                            response_text=response_text,
                        ) from e

                if attempt < max_retries - 1:
                    delay = base_delay * (2**attempt)  # 1s, 2s, 4s
                    logger.debug("HTTP %s from %s, retrying in %.0fs", status_code, endpoint, delay)
                    time.sleep(delay)

            except requests.RequestException as e:
                last_exception = e
                if attempt < max_retries - 1:
                    time.sleep(base_delay * (2**attempt))
                else:
                    raise TrelloAPIError(
                        f"Network error after {max_retries} attempts: {str(e)}\n"
                        "Check your internet connection and try again.",
                    ) from e

        if isinstance(last_exception, requests.HTTPError):
            response = last_exception.response
            status_code = response.status_code if response is not None else 0
            response_text = response.text if response is not None else ""

            if status_code == 429:
                raise TrelloRateLimitError(
                    f"Rate limit exceeded after {max_retries} retry attempts.\n"
                    "Trello's API rate limit: 100 requests per 10 seconds.\n"
                    "Wait a few minutes and try again.",
                    status_code=status_code,
                    response_text=response_text,
                ) from last_exception
            raise TrelloServerError(
                f"Trello server error (HTTP {status_code}) persisted after {max_retries} retries.\n"
                "Trello's servers may be experiencing issues. Try again later.",
                status_code=status_code,
                response_text=response_text,
            ) from last_exception

        raise TrelloAPIError(f"Request failed after {max_retries} retries: {endpoint}")

    def _paginated_request(self, endpoint: str, params: dict | None = None) -> list[dict]:
        """Fetch every page of a list endpoint

        Trello caps list responses at 1000 items; older pages are requested with
        ``before=<id of the last item>``.
        """
        all_items: list[dict] = []
        request_params = params.copy() if params else {}
        request_params["limit"] = PAGE_SIZE

        while True:
            page_items = self._request(endpoint, request_params)

            if not isinstance(page_items, list):
                return cast(list[dict], page_items)
            if not page_items:
                break

            all_items.extend(page_items)
            if len(page_items) < PAGE_SIZE:
                break

            last_item_id = page_items[-1].get("id")
            if not last_item_id:
                break
            request_params["before"] = last_item_id

        return all_items

    def get_board(self) -> dict:
        """Get board name and description"""
        board_id = self._require_board_id()
        return cast(dict, self._request(f"boards/{board_id}", {"fields": "name,desc,url"}))

    def get_lists(self) -> list[dict]:
        board_id = self._require_board_id()
        return cast(
            list[dict],
            self._request(f"boards/{board_id}/lists", {"filter": "all", "fields": "id,name"}),
        )

    def get_labels(self) -> list[dict]:
        board_id = self._require_board_id()
        return cast(
            list[dict],
            self._request(
                f"boards/{board_id}/labels", {"fields": "id,name,color", "limit": PAGE_SIZE}
            ),
        )

    def get_cards(self) -> list[dict]:
        """Get all cards with the fields the converter maps (paginated past 1000)"""
        board_id = self._require_board_id()
        return self._paginated_request(
            f"boards/{board_id}/cards",
            {
                "filter": "all",
                "fields": "id,name,desc,idList,idMembers,idLabels,idChecklists,badges",
            },
        )

    def get_checklists(self) -> list[dict]:
        board_id = self._require_board_id()
        return cast(
            list[dict],
            self._request(f"boards/{board_id}/checklists", {"checkItem_fields": "name,state"}),
        )

    def get_comment_actions(self) -> list[dict]:
        """Get every commentCard action on the board (paginated past 1000)"""
        board_id = self._require_board_id()
        return self._paginated_request(f"boards/{board_id}/actions", {"filter": "commentCard"})

    def get_export(self) -> TrelloExport:
        """Fetch the board and assemble it into a ``TrelloExport``"""
        board = self.get_board()
        logger.info(f"🌐 Fetching '{board.get('name', self.board_id)}' from Trello API...")

        document = {
            "id": board.get("id", self.board_id),
            "name": board.get("name", ""),
            "desc": board.get("desc", ""),
            "lists": self.get_lists(),
            "labels": self.get_labels(),
            "cards": self.get_cards(),
            "checklists": self.get_checklists(),
            "actions": self.get_comment_actions(),
        }
        logger.info(
            f"✅ Fetched {len(document['cards'])} cards, {len(document['actions'])} comments"
        )
        try:
            return TrelloExport.model_validate(document)
        except ValidationError as e:
            raise TrelloAPIError(f"Unexpected board data from Trello API: {e}") from e
