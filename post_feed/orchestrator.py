"""
Drives one refresh cycle: posts, then per post its author and comments,
then a single commit to the page.

Fetches are awaited one at a time, in the order the posts arrive, so the
rendered order always matches the source order.
"""

import logging
from typing import Any, List, Optional, Protocol

from .builder import build_comment_subtree, build_post_subtree
from .feed_client import is_valid_id
from .models import (
    AbsentInput,
    CycleResult,
    CycleState,
    FetchFailure,
    FetchResult,
    Invalid,
    Post,
    PostSubtree,
    User,
)
from .parser import decode_comments, decode_user, decode_users, validate_posts
from .refresher import ContainerRefresher
from .session import FeedSession


class FeedClient(Protocol):
    async def list_users(self) -> FetchResult: ...
    async def list_posts(self, user_id: Any) -> FetchResult: ...
    async def get_user(self, user_id: Any) -> FetchResult: ...
    async def list_comments(self, post_id: Any) -> FetchResult: ...


def parse_selection(value: Any) -> Optional[int]:
    """Turns a selection control value into a user id, or None."""
    if is_valid_id(value):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdecimal()):
            return None
        user_id = int(value)
        return user_id if user_id > 0 else None
    return None


def log_records(records: Any) -> None:
    """Dumps every field of every record at debug level."""
    if not isinstance(records, list):
        return
    for item in records:
        if isinstance(item, dict):
            for key, value in item.items():
                logging.debug(f"{key}: {value}")


class FeedOrchestrator:
    def __init__(self, session: FeedSession, client: FeedClient):
        self.session = session
        self.client = client
        self.refresher = ContainerRefresher(session)
        self.state: CycleState = "Idle"

    def _transition(self, state: CycleState) -> None:
        logging.info(f"Cycle state: {self.state} -> {state}")
        self.state = state

    async def init_page(self) -> List[User]:
        """Fetches the user list and fills the selection control."""
        raw = await self.client.list_users()
        if isinstance(raw, (FetchFailure, AbsentInput)):
            logging.error(f"Could not load users: {raw}")
            return []
        users = decode_users(raw)
        count = self.session.populate_select_menu(users)
        logging.info(f"Populated selection control with {count} users")
        return users

    async def on_selection_change(self, value: Any) -> Optional[CycleResult]:
        """
        Handles a change of the selection control.

        Returns None without doing anything while another cycle is in flight.
        """
        if self.session.busy or not self.session.selection_enabled:
            logging.info(f"Selection {value!r} ignored: a refresh is already in progress")
            return None
        user_id = parse_selection(value)
        return await self.run_cycle(value if user_id is None else user_id)

    async def run_cycle(self, user_id: Any) -> Optional[CycleResult]:
        """
        Runs one refresh cycle for `user_id`.

        Returns None without starting when another cycle is in flight.
        """
        session = self.session
        if session.busy:
            logging.info(f"Cycle for user {user_id!r} rejected: a refresh is already in progress")
            return None
        session.busy = True
        session.set_selection_enabled(False)
        self.state = "Idle"
        try:
            self._transition("FetchingPosts")
            if not is_valid_id(user_id):
                return self._fail(user_id, f"invalid user id {user_id!r}")
            raw = await self.client.list_posts(user_id)
            if isinstance(raw, AbsentInput):
                return self._fail(user_id, f"invalid user id {user_id!r}")
            if isinstance(raw, FetchFailure):
                return self._fail(user_id, f"posts fetch failed: {raw.cause}")
            log_records(raw)

            decoded = validate_posts(raw, user_id)
            if isinstance(decoded, Invalid):
                return self._fail(user_id, decoded.reason)
            posts: List[Post] = decoded.value

            self._transition("BuildingSubtrees")
            subtrees: List[PostSubtree] = []
            for post in posts:
                subtrees.append(await self.build_subtree(post))

            report = self.refresher.refresh(subtrees)
            session.selected_user_id = user_id
            self._transition("Committed")
            return CycleResult(
                user_id=user_id,
                state="Committed",
                post_ids=[s.post_id for s in subtrees],
                bindings=report.attached,
            )
        finally:
            session.busy = False
            session.set_selection_enabled(True)

    async def build_subtree(self, post: Post) -> PostSubtree:
        """Fetches author then comments for `post` and builds its subtree."""
        author = await self.fetch_author(post)

        comments_fragment = None
        raw_comments = await self.client.list_comments(post.id)
        if isinstance(raw_comments, (FetchFailure, AbsentInput)):
            logging.warning(f"Post {post.id}: comments unavailable ({raw_comments})")
        else:
            comments = decode_comments(raw_comments, post.id)
            if comments is not None:
                comments_fragment = build_comment_subtree(self.session.document, comments)

        return build_post_subtree(self.session.document, post, author, comments_fragment)

    async def fetch_author(self, post: Post) -> Optional[User]:
        raw = await self.client.get_user(post.user_id)
        if isinstance(raw, (FetchFailure, AbsentInput)):
            logging.warning(f"Post {post.id}: author {post.user_id} unavailable ({raw})")
            return None
        decoded = decode_user(raw)
        if isinstance(decoded, Invalid):
            logging.warning(f"Post {post.id}: author record rejected: {decoded.reason}")
            return None
        if decoded.value.id != post.user_id:
            logging.warning(f"Post {post.id}: author lookup for {post.user_id} returned user {decoded.value.id}")
            return None
        return decoded.value

    def _fail(self, user_id: Any, reason: str) -> CycleResult:
        logging.warning(f"Refresh for user {user_id!r} failed: {reason}")
        self._transition("Failed")
        return CycleResult(user_id=user_id if is_valid_id(user_id) else None, state="Failed", reason=reason)
