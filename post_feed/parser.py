"""
Decodes raw API payloads into typed records.

Every record passes through here before it enters the pipeline; shape
problems come back as Invalid(reason) rather than exceptions.
"""

import logging
from typing import Any, List, Mapping, Optional

from .feed_client import is_valid_id
from .models import Comment, Decoded, Invalid, Ok, Post, User


def _require(raw: Mapping[str, Any], key: str, kind: type) -> Any:
    value = raw.get(key)
    if kind is int:
        if not is_valid_id(value):
            raise KeyError(f"{key} must be a positive integer, got {value!r}")
    elif not isinstance(value, kind):
        raise KeyError(f"{key} must be {kind.__name__}, got {type(value).__name__}")
    return value


def decode_user(raw: Any) -> Decoded:
    if not isinstance(raw, Mapping):
        return Invalid(f"user record is {type(raw).__name__}, not an object")
    try:
        company = raw.get("company")
        if not isinstance(company, Mapping):
            return Invalid("user record has no company object")
        return Ok(User(
            id=_require(raw, "id", int),
            name=_require(raw, "name", str),
            company_name=_require(company, "name", str),
            company_catch_phrase=_require(company, "catchPhrase", str),
        ))
    except KeyError as e:
        return Invalid(f"user record: {e.args[0]}")


def decode_post(raw: Any) -> Decoded:
    if not isinstance(raw, Mapping):
        return Invalid(f"post record is {type(raw).__name__}, not an object")
    try:
        return Ok(Post(
            id=_require(raw, "id", int),
            user_id=_require(raw, "userId", int),
            title=_require(raw, "title", str),
            body=_require(raw, "body", str),
        ))
    except KeyError as e:
        return Invalid(f"post record: {e.args[0]}")


def decode_comment(raw: Any) -> Decoded:
    if not isinstance(raw, Mapping):
        return Invalid(f"comment record is {type(raw).__name__}, not an object")
    try:
        return Ok(Comment(
            id=_require(raw, "id", int),
            post_id=_require(raw, "postId", int),
            name=_require(raw, "name", str),
            email=_require(raw, "email", str),
            body=_require(raw, "body", str),
        ))
    except KeyError as e:
        return Invalid(f"comment record: {e.args[0]}")


def validate_posts(raw: Any, user_id: int) -> Decoded:
    """
    Validates a posts collection for `user_id`.

    The whole collection is rejected if it is not a non-empty list, if any
    record is malformed, or if any record belongs to another user.
    """
    if not isinstance(raw, list):
        return Invalid(f"posts payload is {type(raw).__name__}, not a list")
    if not raw:
        return Invalid(f"user {user_id} has no posts")

    posts: List[Post] = []
    for item in raw:
        decoded = decode_post(item)
        if isinstance(decoded, Invalid):
            return decoded
        post: Post = decoded.value
        if post.user_id != user_id:
            return Invalid(f"post {post.id} belongs to user {post.user_id}, not {user_id}")
        posts.append(post)
    return Ok(posts)


def decode_users(raw: Any) -> List[User]:
    """Decodes a users collection, skipping malformed records."""
    if not isinstance(raw, list):
        logging.warning(f"users payload is {type(raw).__name__}, not a list")
        return []
    users: List[User] = []
    for item in raw:
        decoded = decode_user(item)
        if isinstance(decoded, Invalid):
            logging.warning(f"Skipping user: {decoded.reason}")
            continue
        users.append(decoded.value)
    return users


def decode_comments(raw: Any, post_id: int) -> Optional[List[Comment]]:
    """
    Decodes a comments collection for `post_id`.

    Returns None when the payload is not a list at all; malformed records
    and records for other posts are skipped.
    """
    if not isinstance(raw, list):
        logging.warning(f"comments payload for post {post_id} is {type(raw).__name__}, not a list")
        return None
    comments: List[Comment] = []
    for item in raw:
        decoded = decode_comment(item)
        if isinstance(decoded, Invalid):
            logging.warning(f"Skipping comment on post {post_id}: {decoded.reason}")
            continue
        if decoded.value.post_id != post_id:
            logging.warning(f"Skipping comment {decoded.value.id}: belongs to post {decoded.value.post_id}")
            continue
        comments.append(decoded.value)
    return comments


def parse_post_id(value: Any) -> Optional[int]:
    """
    Reads a post id back from a `data-post-id` attribute.

    Only the canonical decimal form is accepted, so the id survives the
    int -> str -> int round trip unchanged.
    """
    if is_valid_id(value):
        return value
    if not isinstance(value, str) or not (value.isascii() and value.isdecimal()):
        return None
    post_id = int(value)
    if post_id <= 0 or str(post_id) != value:
        return None
    return post_id
