"""
Network client for the posts/users/comments REST API.

Handles all HTTP requests and turns failures into sentinel results.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter

from .models import AbsentInput, FetchFailure, FetchResult


HEADERS = {
    "User-Agent": "Post-Feed-v1.0",
    "Accept": "application/json",
}

# Base URL
API_URL = "https://jsonplaceholder.typicode.com"

# Query parameter used to filter each collection by its owner
COLLECTION_FILTERS: Dict[str, str] = {
    "posts": "userId",
    "comments": "postId",
}


def is_valid_id(value: Any) -> bool:
    """Identifiers must be positive integers."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def get_session() -> requests.Session:
    """Configures a session that makes exactly one attempt per request."""
    session = requests.Session()
    session.headers.update(HEADERS)

    # No retries: one attempt per fetch
    adapter = HTTPAdapter(max_retries=0)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    return session


class ResourceClient:
    """
    Fetches users, posts and comments.

    Every call returns the decoded JSON payload, or a FetchFailure /
    AbsentInput sentinel. Nothing raises through to the caller.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: str = API_URL,
        timeout: Optional[float] = None,
    ):
        self.session = session or get_session()
        self.base_url = base_url.rstrip("/")
        # None means no timeout; a hung request hangs the caller
        self.timeout = timeout

    def _get_json(self, path: str, kind: str, ident: Optional[int], params: Optional[Dict[str, int]] = None) -> FetchResult:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logging.error(f"Error fetching {kind} {ident}: {e}")
            return FetchFailure(kind=kind, id=ident, cause=str(e))
        except ValueError as e:
            # Body was not valid JSON
            logging.error(f"Error decoding {kind} {ident}: {e}")
            return FetchFailure(kind=kind, id=ident, cause=f"invalid JSON: {e}")

    def fetch_collection(self, kind: str, filter_id: Any) -> FetchResult:
        """Fetches the records of `kind` owned by `filter_id`."""
        if kind not in COLLECTION_FILTERS:
            raise ValueError(f"Unknown filtered collection: {kind}")
        if not is_valid_id(filter_id):
            logging.warning(f"Absent input for {kind} collection: {filter_id!r}")
            return AbsentInput(kind=kind, id=filter_id)
        return self._get_json(kind, kind, filter_id, params={COLLECTION_FILTERS[kind]: filter_id})

    def fetch_single(self, kind: str, ident: Any) -> FetchResult:
        """Fetches one record of `kind` by id."""
        if not is_valid_id(ident):
            logging.warning(f"Absent input for {kind} record: {ident!r}")
            return AbsentInput(kind=kind, id=ident)
        return self._get_json(f"{kind}/{ident}", kind, ident)

    # --- Endpoints ---

    def list_users(self) -> FetchResult:
        return self._get_json("users", "users", None)

    def list_posts(self, user_id: Any) -> FetchResult:
        return self.fetch_collection("posts", user_id)

    def get_user(self, user_id: Any) -> FetchResult:
        return self.fetch_single("users", user_id)

    def list_comments(self, post_id: Any) -> FetchResult:
        return self.fetch_collection("comments", post_id)


class AsyncResourceClient:
    """
    Awaitable facade over ResourceClient.

    Each blocking request runs in a worker thread, so every fetch is a
    suspension point of the calling task.
    """

    def __init__(self, client: Optional[ResourceClient] = None):
        self.client = client or ResourceClient()

    async def list_users(self) -> FetchResult:
        return await asyncio.to_thread(self.client.list_users)

    async def list_posts(self, user_id: Any) -> FetchResult:
        return await asyncio.to_thread(self.client.list_posts, user_id)

    async def get_user(self, user_id: Any) -> FetchResult:
        return await asyncio.to_thread(self.client.get_user, user_id)

    async def list_comments(self, post_id: Any) -> FetchResult:
        return await asyncio.to_thread(self.client.list_comments, post_id)
