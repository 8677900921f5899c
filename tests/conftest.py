import asyncio
import os

import pytest

# Keep CLI imports from writing app.log into the working directory
os.environ.setdefault("FEED_LOG_FILE", os.devnull)

from post_feed.feed_client import is_valid_id
from post_feed.models import AbsentInput, FetchFailure
from post_feed.orchestrator import FeedOrchestrator
from post_feed.session import FeedSession


def make_user(uid, name=None):
    return {
        "id": uid,
        "name": name or f"User {uid}",
        "email": f"user{uid}@example.com",
        "company": {"name": f"Company {uid}", "catchPhrase": f"Phrase {uid}"},
    }


def make_post(pid, uid):
    return {"id": pid, "userId": uid, "title": f"Title {pid}", "body": f"Body {pid}"}


def make_comment(cid, pid):
    return {
        "id": cid,
        "postId": pid,
        "name": f"Commenter {cid}",
        "email": f"c{cid}@example.com",
        "body": f"Comment body {cid}",
    }


class FakeClient:
    """
    In-memory stand-in for AsyncResourceClient.

    `delays` maps a call key such as "comments:1" to seconds to sleep
    before answering; `fail` holds call keys that answer with a FetchFailure.
    """

    def __init__(self, users=None, posts=None, comments=None, delays=None, fail=()):
        self.users = {u["id"]: u for u in (users or [])}
        self.posts = posts or {}
        self.comments = comments or {}
        self.delays = delays or {}
        self.fail = set(fail)
        self.calls = []

    async def _answer(self, key, value):
        self.calls.append(f"start {key}")
        delay = self.delays.get(key)
        if delay:
            await asyncio.sleep(delay)
        self.calls.append(f"end {key}")
        if key in self.fail:
            return FetchFailure(kind=key.split(":")[0], id=None, cause="boom")
        return value

    async def list_users(self):
        return await self._answer("users", list(self.users.values()))

    async def list_posts(self, user_id):
        if not is_valid_id(user_id):
            return AbsentInput("posts", user_id)
        return await self._answer(f"posts:{user_id}", self.posts.get(user_id, []))

    async def get_user(self, user_id):
        if not is_valid_id(user_id):
            return AbsentInput("users", user_id)
        return await self._answer(f"user:{user_id}", self.users.get(user_id))

    async def list_comments(self, post_id):
        if not is_valid_id(post_id):
            return AbsentInput("comments", post_id)
        return await self._answer(f"comments:{post_id}", self.comments.get(post_id, []))


@pytest.fixture
def fake_client():
    return FakeClient(
        users=[make_user(7, "Ada"), make_user(8, "Grace")],
        posts={
            7: [make_post(1, 7), make_post(2, 7)],
            8: [make_post(3, 8)],
        },
        comments={
            1: [make_comment(10, 1), make_comment(11, 1)],
            2: [make_comment(20, 2)],
            3: [],
        },
    )


@pytest.fixture
def session():
    return FeedSession()


@pytest.fixture
def orchestrator(session, fake_client):
    return FeedOrchestrator(session, fake_client)
